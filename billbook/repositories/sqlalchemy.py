from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from billbook.errors import ConstraintViolationError, StoreFaultError
from billbook.repositories.base import BillRepository
from billbook.repositories.predicates import BILL_COLUMNS, BILL_TABLE, Predicates

logger = logging.getLogger(__name__)


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, engine: AsyncEngine, table: str = BILL_TABLE) -> None:
        self.engine = engine
        self.table = table

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[AsyncConnection]:
        """Check out a connection, translating driver errors into ledger errors."""
        try:
            async with self.engine.connect() as conn:
                yield conn
        except IntegrityError as e:
            raise ConstraintViolationError(str(e.orig)) from e
        except SQLAlchemyError as e:
            raise StoreFaultError(str(e)) from e

    @staticmethod
    def _check_columns(columns: Sequence[str] | Mapping[str, object]) -> None:
        unknown = [c for c in columns if c not in BILL_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown columns: {', '.join(unknown)}")

    async def open(self) -> None:
        async with self._connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def execute_sql(self, sql: str) -> None:
        async with self._connect() as conn:
            await conn.execute(text(sql))
            await conn.commit()

    async def insert(self, values: Mapping[str, object]) -> int:
        self._check_columns(values)
        columns = ", ".join(values)
        placeholders = ", ".join(f":{c}" for c in values)
        async with self._connect() as conn:
            result = await conn.execute(
                text(f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"),
                dict(values),
            )
            await conn.commit()
        row_id = result.lastrowid
        if row_id is None:
            raise StoreFaultError(f"Store returned no row id for insert into {self.table}")
        return row_id

    async def update(self, values: Mapping[str, object], predicates: Predicates) -> int:
        self._check_columns(values)
        assignments = ", ".join(f"{c} = :v_{c}" for c in values)
        params = {f"v_{c}": v for c, v in values.items()}
        params.update(predicates.params)
        async with self._connect() as conn:
            result = await conn.execute(
                text(f"UPDATE {self.table} SET {assignments}{predicates.where_clause()}"),
                params,
            )
            await conn.commit()
        return result.rowcount

    async def delete(self, predicates: Predicates) -> int:
        async with self._connect() as conn:
            result = await conn.execute(
                text(f"DELETE FROM {self.table}{predicates.where_clause()}"),
                predicates.params,
            )
            await conn.commit()
        return result.rowcount

    async def query(self, predicates: Predicates, columns: Sequence[str]) -> list[RowMapping]:
        self._check_columns(columns)
        sql = f"SELECT {', '.join(columns)} FROM {self.table}{predicates.where_clause()}{predicates.order_clause()}"
        async with self._connect() as conn:
            result = await conn.execute(text(sql), predicates.params)
            rows = list(result.mappings().fetchall())
        logger.debug("Query on %s returned %d rows", self.table, len(rows))
        return rows
