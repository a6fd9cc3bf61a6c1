"""SQLAlchemy-backed implementations of the repositories.

Every public method runs in its own transaction.  Tables (and the
directory of a SQLite file) are created on first use.  Driver, connection
and schema failures are logged with their traceback and re-raised as
``DependencyUnavailableError`` so callers never see database internals.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy import Engine, create_engine, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from orderdesk.domain.exceptions import (
    DependencyUnavailableError,
    DuplicateOrderCodeError,
    EntityNotFoundError,
)
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.statistics import ZERO, CustomerTotals, ProductTotals
from orderdesk.domain.model.value_objects import Money, OrderCode, Quantity
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.infrastructure.persistence.sql_tables import Base, OrderRow, ProductRow

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create an engine.  No connection is made until the first query."""
    kwargs: dict = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty db.
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def prepare_database(engine: Engine) -> None:
    """Create the SQLite file's directory and any missing tables."""
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(engine)


def _to_db_time(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open [start 00:00, end+1 00:00) interval covering both days."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class _SqlRepository:

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = sessionmaker(engine, expire_on_commit=False)
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        try:
            prepare_database(self._engine)
        except (OSError, SQLAlchemyError) as exc:
            logger.exception("Cannot prepare database %s", self._engine.url)
            raise DependencyUnavailableError() from exc
        self._schema_ready = True

    @contextmanager
    def _session(self) -> Iterator[Session]:
        self._ensure_schema()
        try:
            with self._sessions.begin() as session:
                yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Database operation failed")
            raise DependencyUnavailableError() from exc


class SqlOrderRepository(_SqlRepository, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def create(self, order: Order) -> Order:
        row = OrderRow()
        self._copy_to_row(order, row)
        try:
            with self._session() as session:
                session.add(row)
                session.flush()
                order.id = row.id
        except IntegrityError as exc:
            raise DuplicateOrderCodeError(order.order_code.value) from exc
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        with self._session() as session:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None

    def get_by_code(self, order_code: str) -> Order | None:
        with self._session() as session:
            row = session.scalars(
                select(OrderRow).where(OrderRow.order_code == order_code)
            ).first()
            return self._to_domain(row) if row is not None else None

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        order_filter = order_filter or OrderFilter()
        stmt = select(OrderRow)
        if order_filter.statuses is not None:
            stmt = stmt.where(OrderRow.status.in_([s.value for s in order_filter.statuses]))
        if order_filter.search:
            needle = order_filter.search
            stmt = stmt.where(
                or_(
                    OrderRow.customer_name.icontains(needle, autoescape=True),
                    OrderRow.mobile_number.icontains(needle, autoescape=True),
                    OrderRow.order_code.icontains(needle, autoescape=True),
                )
            )
        if order_filter.date_range is not None:
            start, end = _day_bounds(*order_filter.date_range)
            stmt = stmt.where(OrderRow.created_at >= start, OrderRow.created_at < end)
        stmt = stmt.order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
        if order_filter.limit is not None:
            stmt = stmt.limit(order_filter.limit)

        with self._session() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def save(self, order: Order) -> None:
        with self._session() as session:
            row = session.get(OrderRow, order.id)
            if row is None:
                raise EntityNotFoundError(f"Order #{order.id} not found")
            self._copy_to_row(order, row)

    def delete(self, order_id: int) -> bool:
        with self._session() as session:
            row = session.get(OrderRow, order_id)
            if row is None:
                return False
            session.delete(row)
        return True

    # --- Aggregate queries ----------------------------------------------------

    def count_by_status(self) -> dict[OrderStatus, int]:
        counts = {status: 0 for status in OrderStatus}
        stmt = select(OrderRow.status, func.count(OrderRow.id)).group_by(OrderRow.status)
        with self._session() as session:
            for status, count in session.execute(stmt):
                counts[OrderStatus.parse(status)] += count
        return counts

    def revenue_between(self, start: date, end: date) -> Decimal:
        lower, upper = _day_bounds(start, end)
        stmt = select(func.sum(OrderRow.total_amount)).where(
            OrderRow.created_at >= lower, OrderRow.created_at < upper
        )
        with self._session() as session:
            total = session.execute(stmt).scalar()
        return Decimal(total) if total is not None else ZERO

    def group_by_product(self) -> list[ProductTotals]:
        stmt = (
            select(
                OrderRow.product_ref,
                func.sum(OrderRow.quantity),
                func.sum(OrderRow.total_amount),
                func.count(OrderRow.id),
                func.min(OrderRow.id),
            )
            .group_by(OrderRow.product_ref)
            .order_by(func.min(OrderRow.id))
        )
        with self._session() as session:
            groups = session.execute(stmt).all()
            first_ids = [g[4] for g in groups]
            names = dict(
                session.execute(
                    select(OrderRow.id, OrderRow.product_name).where(OrderRow.id.in_(first_ids))
                ).all()
            ) if first_ids else {}

        return [
            ProductTotals(
                product_ref=ref,
                product_name=names.get(first_id, ""),
                total_quantity=int(quantity or 0),
                total_revenue=Decimal(revenue) if revenue is not None else ZERO,
                order_count=count,
                first_order_id=first_id,
            )
            for ref, quantity, revenue, count, first_id in groups
        ]

    def group_by_customer(self) -> list[CustomerTotals]:
        stmt = select(
            OrderRow.customer_name,
            OrderRow.mobile_number,
            func.count(OrderRow.id),
            func.sum(OrderRow.total_amount),
            func.max(OrderRow.created_at),
        ).group_by(OrderRow.customer_name, OrderRow.mobile_number)
        with self._session() as session:
            rows = session.execute(stmt).all()

        return [
            CustomerTotals(
                customer_name=name,
                mobile_number=mobile,
                order_count=count,
                total_spent=Decimal(spent) if spent is not None else ZERO,
                last_order_at=_from_db_time(last) if last is not None else None,
            )
            for name, mobile, count, spent, last in rows
        ]

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _copy_to_row(order: Order, row: OrderRow) -> None:
        row.order_code = order.order_code.value
        row.customer_name = order.customer_name
        row.address = order.address
        row.mobile_number = order.mobile_number
        row.product_ref = order.product_ref
        row.product_name = order.product_name
        row.quantity = order.quantity.value
        row.status = order.status.value
        row.total_amount = order.total_amount.amount
        row.currency = order.total_amount.currency
        row.notes = order.notes
        row.created_at = _to_db_time(order.created_at)
        row.updated_at = _to_db_time(order.updated_at)

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            order_code=OrderCode(row.order_code),
            customer_name=row.customer_name,
            address=row.address,
            mobile_number=row.mobile_number,
            product_ref=row.product_ref,
            product_name=row.product_name,
            quantity=Quantity(row.quantity),
            total_amount=Money(Decimal(row.total_amount), row.currency),
            status=OrderStatus.parse(row.status),
            notes=row.notes or "",
            created_at=_from_db_time(row.created_at),
            updated_at=_from_db_time(row.updated_at),
        )


class SqlProductRepository(_SqlRepository, ProductRepository):

    def get_by_ref(self, ref: str) -> Product | None:
        with self._session() as session:
            row = session.get(ProductRow, ref)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        with self._session() as session:
            rows = session.scalars(select(ProductRow).order_by(ProductRow.ref))
            return [self._to_domain(row) for row in rows]

    def save(self, product: Product) -> None:
        with self._session() as session:
            session.merge(
                ProductRow(
                    ref=product.ref,
                    name=product.name,
                    price=product.price.amount,
                    currency=product.price.currency,
                    category=product.category,
                    description=product.description,
                )
            )

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            ref=row.ref,
            name=row.name,
            price=Money(Decimal(row.price), row.currency),
            category=row.category or "",
            description=row.description or "",
        )
