from datetime import date

import pytest
from pydantic import ValidationError

from billbook.models.bill import (
    Bill,
    BillQuery,
    BillRecord,
    BillType,
    BillUpdate,
    DateRange,
    SortField,
    SortOrder,
    Statistics,
)


class TestBill:
    def test_remark_defaults_to_empty(self):
        bill = Bill(date="2025-01-01", type=BillType.INCOME, category="Salary", amount=1000)
        assert bill.remark == ""

    def test_remark_none_becomes_empty(self):
        bill = Bill(date="2025-01-01", type="Income", category="Salary", amount=1000, remark=None)
        assert bill.remark == ""

    def test_type_from_string(self):
        bill = Bill(date="2025-01-01", type="Expense", category="Food", amount=5)
        assert bill.type is BillType.EXPENSE

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            Bill(date="2025-01-01", type="Transfer", category="Food", amount=5)

    def test_date_object_converted_to_iso(self):
        bill = Bill(date=date(2025, 3, 7), type="Expense", category="Food", amount=5)
        assert bill.date == "2025-03-07"

    def test_empty_category_allowed(self):
        bill = Bill(date="2025-01-01", type="Expense", category="", amount=5)
        assert bill.category == ""

    def test_record_carries_id(self):
        record = BillRecord(id=7, date="2025-01-01", type="Income", category="Gift", amount=20)
        assert record.id == 7
        assert isinstance(record, Bill)


class TestBillUpdate:
    def test_changes_only_present_fields(self):
        update = BillUpdate(amount=99.5)
        assert update.changes() == {"amount": 99.5}

    def test_changes_serializes_enum(self):
        update = BillUpdate(type=BillType.INCOME, category="Bonus")
        assert update.changes() == {"type": "Income", "category": "Bonus"}

    def test_empty_update_has_no_changes(self):
        assert BillUpdate().changes() == {}

    def test_date_object_converted(self):
        assert BillUpdate(date=date(2024, 12, 31)).changes() == {"date": "2024-12-31"}


class TestQueries:
    def test_query_defaults(self):
        query = BillQuery()
        assert query.type is None
        assert query.sort_by is None
        assert query.sort_order is None
        assert query.start_date is None
        assert query.end_date is None

    def test_query_parses_strings(self):
        query = BillQuery(type="Income", sort_by="amount", sort_order="desc")
        assert query.type is BillType.INCOME
        assert query.sort_by is SortField.AMOUNT
        assert query.sort_order is SortOrder.DESC

    def test_date_range_accepts_dates(self):
        date_range = DateRange(start_date=date(2025, 1, 1), end_date="2025-01-31")
        assert date_range.start_date == "2025-01-01"
        assert date_range.end_date == "2025-01-31"


class TestStatistics:
    def test_defaults_zero(self):
        stats = Statistics()
        assert stats.total_income == 0
        assert stats.total_expense == 0
        assert stats.balance == 0

    def test_balance(self):
        stats = Statistics(total_income=350, total_expense=50)
        assert stats.balance == 300
