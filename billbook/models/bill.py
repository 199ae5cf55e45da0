from __future__ import annotations

from datetime import date as date_type
from enum import Enum

from pydantic import BaseModel, field_validator


class BillType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class SortField(str, Enum):
    DATE = "date"
    AMOUNT = "amount"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _iso_date(value: object) -> object:
    if isinstance(value, date_type):
        return value.isoformat()
    return value


class Bill(BaseModel):
    date: str  # 'YYYY-MM-DD'
    type: BillType
    category: str
    amount: float
    remark: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object) -> object:
        return _iso_date(value)

    @field_validator("remark", mode="before")
    @classmethod
    def _default_remark(cls, value: object) -> object:
        return "" if value is None else value


class BillRecord(Bill):
    id: int


class BillUpdate(BaseModel):
    """Partial change set for an existing bill; ``None`` means "leave as is"."""

    date: str | None = None
    type: BillType | None = None
    category: str | None = None
    amount: float | None = None
    remark: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object) -> object:
        return _iso_date(value)

    def changes(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)


class DateRange(BaseModel):
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value: object) -> object:
        return _iso_date(value)


class BillQuery(DateRange):
    type: BillType | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None


class Statistics(BaseModel):
    total_income: float = 0.0
    total_expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense


class CategoryTotal(BaseModel):
    category: str
    total: float
