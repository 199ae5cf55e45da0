from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from contextvars import ContextVar
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncEngine

from billbook.errors import ConstraintViolationError, LedgerError, LedgerErrorCode, NotInitializedError
from billbook.models.bill import (
    Bill,
    BillQuery,
    BillRecord,
    BillType,
    BillUpdate,
    CategoryTotal,
    DateRange,
    SortField,
    SortOrder,
    Statistics,
)
from billbook.repositories.base import BillRepository
from billbook.repositories.factory import get_bill_repository
from billbook.repositories.predicates import BILL_COLUMNS, BILL_TABLE, Predicates

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {BILL_TABLE} (
  bill_id INTEGER PRIMARY KEY AUTOINCREMENT,
  date TEXT NOT NULL,
  type TEXT CHECK(type IN ('{BillType.INCOME.value}', '{BillType.EXPENSE.value}')),
  category TEXT,
  amount REAL,
  remark TEXT
)"""


def _boundary(
    operation: str, default: Callable[[], T]
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Absorb every failure of a public operation into its "nothing happened" result.

    The failure is logged and its code kept on ``LedgerStore.last_error``.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self: LedgerStore, *args: Any, **kwargs: Any) -> T:
            self._set_error(None)
            try:
                return await func(self, *args, **kwargs)
            except LedgerError as e:
                self._set_error(e.code)
                logger.error("%s failed (%s): %s", operation, e.code.value, e)
            except Exception:
                self._set_error(LedgerErrorCode.STORE_FAULT)
                logger.exception("%s failed unexpectedly", operation)
            return default()

        return wrapper

    return decorator


def _enum_value(value: object) -> object:
    return value.value if isinstance(value, BillType) else value


def _validate(model: type[M], value: M | Mapping[str, Any]) -> M:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise ConstraintViolationError(str(e)) from e


# BillQuery is a DateRange, so list filters go through here too.
def _apply_date_range(predicates: Predicates, date_range: DateRange | None) -> Predicates:
    if date_range is None:
        return predicates
    if date_range.start_date:
        predicates.greater_than_or_equal_to("date", date_range.start_date)
    if date_range.end_date:
        predicates.less_than_or_equal_to("date", date_range.end_date)
    return predicates


def _row_to_record(row: RowMapping) -> BillRecord:
    return BillRecord(
        id=row["bill_id"],
        date=row["date"],
        type=BillType(row["type"]),
        category=row["category"],
        amount=row["amount"],
        remark=row["remark"],
    )


class LedgerStore:
    """Income/expense ledger over a single ``bills`` table.

    Every public coroutine is non-throwing: failures are logged and reported
    through the operation's sentinel (``-1``, ``False``, ``None``, ``[]`` or
    zero totals), with the distinguishing code left on ``last_error``.
    ``last_error`` is tracked per asyncio task, so concurrent calls on one
    store each read back their own outcome.
    """

    def __init__(
        self,
        repository_factory: Callable[[AsyncEngine | None], BillRepository] = get_bill_repository,
    ) -> None:
        self._repository_factory = repository_factory
        self._repo: BillRepository | None = None
        self._last_error: ContextVar[LedgerErrorCode | None] = ContextVar(
            f"billbook_last_error_{id(self)}", default=None
        )

    @property
    def last_error(self) -> LedgerErrorCode | None:
        return self._last_error.get()

    def _set_error(self, code: LedgerErrorCode | None) -> None:
        self._last_error.set(code)

    @property
    def is_initialized(self) -> bool:
        return self._repo is not None

    def _require_repo(self) -> BillRepository:
        if self._repo is None:
            raise NotInitializedError()
        return self._repo

    @_boundary("Database initialization", lambda: False)
    async def init(self, engine: AsyncEngine | None = None) -> bool:
        if self._repo is not None:
            return True

        repo = self._repository_factory(engine)
        await repo.open()
        self._repo = repo

        await self.ensure_schema()
        logger.info("Database initialized")
        return True

    @_boundary("Creating bill table", lambda: False)
    async def ensure_schema(self) -> bool:
        await self._require_repo().execute_sql(CREATE_TABLE_SQL)
        logger.info("Bill table created or already present")
        return True

    @_boundary("Adding bill", lambda: -1)
    async def add_bill(self, bill: Bill | Mapping[str, Any]) -> int:
        repo = self._require_repo()
        bill = _validate(Bill, bill)

        bill_id = await repo.insert(
            {
                "date": bill.date,
                "type": _enum_value(bill.type),
                "category": bill.category,
                "amount": bill.amount,
                "remark": bill.remark or "",
            }
        )
        logger.info("Bill added, id=%d", bill_id)
        return bill_id

    @_boundary("Deleting bill", lambda: False)
    async def delete_bill(self, bill_id: int) -> bool:
        repo = self._require_repo()
        deleted = await repo.delete(Predicates().equal_to("bill_id", bill_id))
        logger.info("Bill %d deleted, rows affected: %d", bill_id, deleted)
        if deleted <= 0:
            self._set_error(LedgerErrorCode.NOT_FOUND)
        return deleted > 0

    @_boundary("Updating bill", lambda: False)
    async def update_bill(self, bill_id: int, changes: BillUpdate | Mapping[str, Any]) -> bool:
        repo = self._require_repo()
        values = _validate(BillUpdate, changes).changes()
        if not values:
            self._set_error(LedgerErrorCode.NOTHING_TO_UPDATE)
            logger.warning("Bill %d update skipped: no fields to change", bill_id)
            return False

        updated = await repo.update(values, Predicates().equal_to("bill_id", bill_id))
        logger.info("Bill %d updated, rows affected: %d", bill_id, updated)
        if updated <= 0:
            self._set_error(LedgerErrorCode.NOT_FOUND)
        return updated > 0

    @_boundary("Fetching bill", lambda: None)
    async def get_bill_by_id(self, bill_id: int) -> BillRecord | None:
        repo = self._require_repo()
        rows = await repo.query(Predicates().equal_to("bill_id", bill_id), BILL_COLUMNS)
        if not rows:
            self._set_error(LedgerErrorCode.NOT_FOUND)
            return None
        return _row_to_record(rows[0])

    @_boundary("Listing bills", list)
    async def list_bills(self, query: BillQuery | Mapping[str, Any] | None = None) -> list[BillRecord]:
        repo = self._require_repo()
        query = _validate(BillQuery, query or {})

        predicates = Predicates()
        if query.type:
            predicates.equal_to("type", query.type.value)
        _apply_date_range(predicates, query)

        if query.sort_by:
            field = query.sort_by.value
            if query.sort_order == SortOrder.DESC:
                predicates.order_by_desc(field)
            else:
                predicates.order_by_asc(field)
        else:
            # Most recent first
            predicates.order_by_desc(SortField.DATE.value)

        rows = await repo.query(predicates, BILL_COLUMNS)
        return [_row_to_record(row) for row in rows]

    async def _sum_amounts(self, repo: BillRepository, bill_type: BillType, date_range: DateRange | None) -> float:
        predicates = _apply_date_range(Predicates().equal_to("type", bill_type.value), date_range)
        rows = await repo.query(predicates, ["amount"])
        return sum((row["amount"] or 0.0 for row in rows), 0.0)

    @_boundary("Computing statistics", Statistics)
    async def get_statistics(self, date_range: DateRange | Mapping[str, Any] | None = None) -> Statistics:
        repo = self._require_repo()
        date_range = _validate(DateRange, date_range or {})
        # A failure in either scan zeroes both totals.
        total_income = await self._sum_amounts(repo, BillType.INCOME, date_range)
        total_expense = await self._sum_amounts(repo, BillType.EXPENSE, date_range)
        return Statistics(total_income=total_income, total_expense=total_expense)

    @_boundary("Computing category statistics", list)
    async def get_category_statistics(
        self, bill_type: BillType | str, date_range: DateRange | Mapping[str, Any] | None = None
    ) -> list[CategoryTotal]:
        repo = self._require_repo()
        try:
            bill_type = BillType(bill_type)
        except ValueError as e:
            raise ConstraintViolationError(str(e)) from e
        date_range = _validate(DateRange, date_range or {})
        predicates = _apply_date_range(Predicates().equal_to("type", bill_type.value), date_range)
        rows = await repo.query(predicates, ["category", "amount"])

        totals: dict[str, float] = {}
        for row in rows:
            category = row["category"]
            totals[category] = totals.get(category, 0.0) + (row["amount"] or 0.0)

        return sorted(
            (CategoryTotal(category=category, total=total) for category, total in totals.items()),
            key=lambda item: item.total,
            reverse=True,
        )
