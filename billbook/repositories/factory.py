from sqlalchemy.ext.asyncio import AsyncEngine

from billbook.repositories.base import BillRepository


def get_bill_repository(engine: AsyncEngine | None = None) -> BillRepository:
    from billbook.repositories.sqlalchemy import SQLAlchemyBillRepository

    if engine is None:
        from billbook.db import build_engine

        engine = build_engine()
    return SQLAlchemyBillRepository(engine)
