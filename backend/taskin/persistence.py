"""
Persistence contract for Taskin.

TaskinDbContext exposes one typed collection per entity; UnitOfWork turns
the pending changes into a commit, optionally inside an explicit transaction.
Both wrap the same AsyncSession, which is scoped to one request.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction
from sqlmodel import SQLModel, select

from taskin.logging_config import get_logger
from taskin.models import Pomodoro, Project, Task

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class EntitySet(Generic[ModelT]):
    """Typed access to one table."""

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self._session = session
        self._model = model

    async def find(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return await self._session.get(self._model, entity_id)

    def add(self, entity: ModelT) -> None:
        self._session.add(entity)

    async def remove(self, entity: ModelT) -> None:
        await self._session.delete(entity)

    async def list(
        self,
        *criteria: Any,
        order_by: Sequence[Any] = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        """Rows matching all criteria; without order_by they come back in stored order."""
        query = select(self._model)
        if criteria:
            query = query.where(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def count(self, *criteria: Any) -> int:
        query = select(func.count()).select_from(self._model)
        if criteria:
            query = query.where(*criteria)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def delete_where(self, *criteria: Any) -> int:
        """Bulk delete; returns the number of rows removed."""
        statement = (
            delete(self._model)
            .where(*criteria)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(statement)
        return result.rowcount or 0


class TaskinDbContext:
    """The entity collections handlers work with."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.projects: EntitySet[Project] = EntitySet(session, Project)
        self.tasks: EntitySet[Task] = EntitySet(session, Task)
        self.pomodoros: EntitySet[Pomodoro] = EntitySet(session, Pomodoro)

    async def fetch_all(self, statement: Any) -> list[Any]:
        """Run an arbitrary select (aggregates, projections) and return its rows."""
        result = await self.session.execute(statement)
        return list(result.all())


class Transaction:
    """
    An explicit transaction scope.

    Closing a transaction that was not committed rolls it back, so using it
    as an async context manager releases it on every exit path.
    """

    def __init__(self, session_transaction: AsyncSessionTransaction):
        self.transaction_id = uuid.uuid4()
        self._inner = session_transaction
        self._completed = False

    @property
    def is_active(self) -> bool:
        return not self._completed and self._inner.is_active

    async def commit(self) -> None:
        await self._inner.commit()
        self._completed = True

    async def rollback(self) -> None:
        await self._inner.rollback()
        self._completed = True

    async def close(self) -> None:
        if self.is_active:
            logger.debug(f"Rolling back uncommitted transaction {self.transaction_id}")
            await self.rollback()
        self._completed = True

    async def __aenter__(self) -> "Transaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class UnitOfWork:
    """Commit boundary for a request."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._transaction: Optional[Transaction] = None

    async def save_changes(self) -> int:
        """
        Persist pending changes and return how many objects were written.

        Inside an explicit transaction this only flushes; the commit happens
        in commit_transaction.
        """
        pending = len(self._session.new) + len(self._session.dirty) + len(self._session.deleted)
        if self._transaction is not None and self._transaction.is_active:
            await self._session.flush()
        else:
            await self._session.commit()
        return pending

    async def begin_transaction(self) -> Transaction:
        """
        Start an explicit transaction.

        When the session already has one open (a read autobegins it), that
        transaction is adopted instead, so save_changes still only flushes
        and nothing is committed before commit_transaction.
        """
        if self._session.in_transaction():
            inner = self._session.get_transaction()
        else:
            inner = await self._session.begin()
        self._transaction = Transaction(inner)
        logger.debug(f"Began transaction {self._transaction.transaction_id}")
        return self._transaction

    async def commit_transaction(self, transaction: Optional[Transaction]) -> None:
        if transaction is None:
            return
        await transaction.commit()
        logger.debug(f"Committed transaction {transaction.transaction_id}")
        if self._transaction is transaction:
            self._transaction = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Begin a transaction and release it however the block exits."""
        transaction = await self.begin_transaction()
        try:
            yield transaction
        finally:
            await transaction.close()
            if self._transaction is transaction:
                self._transaction = None
