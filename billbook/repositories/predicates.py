from __future__ import annotations

BILL_TABLE = "bills"
BILL_COLUMNS = ("bill_id", "date", "type", "category", "amount", "remark")


class Predicates:
    """Composable filter for one table: equality, inclusive range and ordering.

    Clauses are AND-ed in the order they are added.  Column names are checked
    against the table's known columns; values only ever travel as bind
    parameters.
    """

    def __init__(self, table: str = BILL_TABLE, columns: tuple[str, ...] = BILL_COLUMNS) -> None:
        self.table = table
        self.columns = columns
        self._conditions: list[str] = []
        self._order: list[str] = []
        self.params: dict[str, object] = {}

    def _column(self, column: str) -> str:
        if column not in self.columns:
            raise ValueError(f"Unknown column {column!r} for table {self.table}")
        return column

    def _bind(self, column: str, op: str, value: object) -> Predicates:
        name = f"p{len(self.params)}"
        self._conditions.append(f"{self._column(column)} {op} :{name}")
        self.params[name] = value
        return self

    def equal_to(self, column: str, value: object) -> Predicates:
        return self._bind(column, "=", value)

    def greater_than_or_equal_to(self, column: str, value: object) -> Predicates:
        return self._bind(column, ">=", value)

    def less_than_or_equal_to(self, column: str, value: object) -> Predicates:
        return self._bind(column, "<=", value)

    def order_by_asc(self, column: str) -> Predicates:
        self._order.append(f"{self._column(column)} ASC")
        return self

    def order_by_desc(self, column: str) -> Predicates:
        self._order.append(f"{self._column(column)} DESC")
        return self

    def where_clause(self) -> str:
        if not self._conditions:
            return ""
        return " WHERE " + " AND ".join(self._conditions)

    def order_clause(self) -> str:
        if not self._order:
            return ""
        return " ORDER BY " + ", ".join(self._order)
