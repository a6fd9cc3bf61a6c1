"""Domain service: order code generation.

Codes look like ``ORD20261018042``: the creation date followed by a
three-digit suffix.  A random suffix is tried a few times; if all of
them are taken the day's suffix space is scanned in order, so a code is
only refused once all 1000 codes of the day exist.
"""

from __future__ import annotations

import random
from datetime import date

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.value_objects import OrderCode
from orderdesk.domain.repository.order_repository import OrderRepository

SUFFIX_SPACE = 1000
RANDOM_ATTEMPTS = 10


class OrderCodeGenerator:

    def __init__(
        self,
        order_repo: OrderRepository,
        rng: random.Random | None = None,
        attempts: int = RANDOM_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._rng = rng or random.Random()
        self._attempts = attempts

    def next_code(self, day: date) -> OrderCode:
        for _ in range(self._attempts):
            code = OrderCode.build(day, self._rng.randrange(SUFFIX_SPACE))
            if not self._taken(code):
                return code

        for suffix in range(SUFFIX_SPACE):
            code = OrderCode.build(day, suffix)
            if not self._taken(code):
                return code

        raise ValidationError(f"No order codes left for {day.isoformat()}")

    def _taken(self, code: OrderCode) -> bool:
        return self._order_repo.get_by_code(code.value) is not None
