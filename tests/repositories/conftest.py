import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from billbook.repositories.sqlalchemy import SQLAlchemyBillRepository
from billbook.services.ledger_store import CREATE_TABLE_SQL


@pytest.fixture()
async def bill_repo(db_engine: AsyncEngine) -> SQLAlchemyBillRepository:
    repo = SQLAlchemyBillRepository(db_engine)
    await repo.execute_sql(CREATE_TABLE_SQL)
    return repo
