from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from sqlalchemy import func, select

if TYPE_CHECKING:
    from datetime import date
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession


class ScheduleRejected(Exception):
    """Raised inside a unit of work to abandon it with a user-facing reason."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnitOfWork:
    """All-or-nothing boundary around a sequence of mutations.

    ``async with UnitOfWork(session) as uow:`` commits when the block exits
    normally. Any exception, including the ``ScheduleRejected`` raised by
    ``reject``, rolls back every statement issued on the session since the
    transaction began, and then propagates.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.session.rollback()
            return
        try:
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

    def reject(self, message: str) -> NoReturn:
        raise ScheduleRejected(message)


async def lock_shift_date(session: AsyncSession, shift_date: date) -> None:
    """Serialize writers of one calendar date until the transaction ends.

    Uses a transaction-scoped advisory lock on PostgreSQL. Other dialects
    rely on the unique pending-shift index instead.
    """
    connection = await session.connection()
    if connection.dialect.name == "postgresql":
        await session.execute(select(func.pg_advisory_xact_lock(shift_date.toordinal())))
