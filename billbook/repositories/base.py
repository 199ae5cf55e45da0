from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from sqlalchemy.engine import RowMapping

from billbook.repositories.predicates import Predicates


class BillRepository(ABC):
    @abstractmethod
    async def open(self) -> None: ...

    @abstractmethod
    async def execute_sql(self, sql: str) -> None: ...

    @abstractmethod
    async def insert(self, values: Mapping[str, object]) -> int: ...

    @abstractmethod
    async def update(self, values: Mapping[str, object], predicates: Predicates) -> int: ...

    @abstractmethod
    async def delete(self, predicates: Predicates) -> int: ...

    @abstractmethod
    async def query(self, predicates: Predicates, columns: Sequence[str]) -> list[RowMapping]: ...
