"""Application service: Delete Order use case.

Deletion is permanent; no tombstone is kept.
"""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import EntityNotFoundError
from orderdesk.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> None:
        if not self._order_repo.delete(order_id):
            raise EntityNotFoundError(f"Order #{order_id} not found")
        logger.info("Deleted order #%s", order_id)
