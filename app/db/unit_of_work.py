# app/db/unit_of_work.py
"""
Unit of work over one AsyncSession.

Entities return domain events from their mutating methods; handlers hand
them to the unit of work together with the entity. `save_changes()`
commits first and only then dispatches, so no subscriber ever sees an
event whose write is not durable.

Usage:
    user, registered = User.register(...)
    uow.add(user, registered)
    written = await uow.save_changes()
"""

from typing import Any, Generic, Optional, Sequence, TypeVar
from sqlalchemy import event, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from common.api_error import ConflictError, PersistenceError
from common.logger import get_app_logger
from app.domain.events import DomainEvent
from app.domain.event_dispatcher import DomainEventsDispatcher
from .models import (
    DbBaseModel,
    User,
    Doctor,
    Appointment,
    MedicalRecord,
    ChatMessage,
)

logger = get_app_logger(__name__)

M = TypeVar("M", bound=DbBaseModel)


class Repository(Generic[M]):
    """Typed access to one root collection."""

    def __init__(self, session: AsyncSession, model: type[M]):
        self._session = session
        self._model = model

    async def get(self, entity_id: str) -> Optional[M]:
        return await self._session.get(self._model, entity_id)

    async def find(
        self,
        *criteria: Any,
        order_by: Sequence[Any] = (),
    ) -> list[M]:
        query = (
            select(self._model)
            .where(*criteria)
            .order_by(*order_by)
            .execution_options(logging_token=f"{self._model.__name__}.find")
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def first(self, *criteria: Any) -> Optional[M]:
        query = (
            select(self._model)
            .where(*criteria)
            .limit(1)
            .execution_options(logging_token=f"{self._model.__name__}.first")
        )
        result = await self._session.execute(query)
        return result.scalars().first()


class UnitOfWork:
    def __init__(self, session: AsyncSession, dispatcher: DomainEventsDispatcher):
        self.session = session
        self._dispatcher = dispatcher

        # Insertion-ordered: entity registration order
        self._buffers: dict[Any, list[DomainEvent]] = {}
        self._written_rows = 0
        self._failed = False

        self.users = Repository(session, User)
        self.doctors = Repository(session, Doctor)
        self.appointments = Repository(session, Appointment)
        self.medical_records = Repository(session, MedicalRecord)
        self.chat_messages = Repository(session, ChatMessage)

        event.listen(session.sync_session, "after_flush", self._count_written_rows)

    def _count_written_rows(self, session: Session, flush_context: Any) -> None:
        # Collections are still in their pre-flush state inside after_flush
        updated = sum(
            1
            for obj in session.dirty
            if session.is_modified(obj, include_collections=False)
        )
        self._written_rows += len(session.new) + updated + len(session.deleted)

    def add(self, entity: DbBaseModel, *events: Optional[DomainEvent]) -> None:
        self.session.add(entity)
        self.record(entity, *events)

    def record(self, entity: DbBaseModel, *events: Optional[DomainEvent]) -> None:
        """Buffer events raised by `entity`. None (nothing changed) is skipped."""
        buffer = self._buffers.setdefault(entity, [])
        buffer.extend(e for e in events if e is not None)

    def pending_events(self, entity: Optional[DbBaseModel] = None) -> list[DomainEvent]:
        if entity is not None:
            return list(self._buffers.get(entity, ()))
        return [e for buffer in self._buffers.values() for e in buffer]

    async def save_changes(self) -> int:
        """
        Commit, then dispatch every buffered event in one ordered batch.

        Returns the number of rows written since the last save. On failure
        the transaction is rolled back and the buffers are kept.

        The rollback discards the staged writes, so a failed unit of work is
        spent: saving it again raises PersistenceError and dispatches
        nothing. Retry the whole operation with a new unit of work.
        """
        if self._failed:
            raise PersistenceError(
                "Unit of work was rolled back after a failed commit; "
                "retry with a new one"
            )

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self._rollback_after_failure(e)
            raise ConflictError(f"Write violates a uniqueness rule: {e.orig}") from e
        except StaleDataError as e:
            await self._rollback_after_failure(e)
            raise ConflictError(
                "The record was changed by someone else; reload and retry"
            ) from e
        except SQLAlchemyError as e:
            await self._rollback_after_failure(e)
            raise PersistenceError("Storage is unavailable, try again") from e

        written = self._written_rows
        self._written_rows = 0

        events = self.pending_events()
        self._buffers.clear()

        if events:
            await self._dispatcher.dispatch(events)

        logger.debug(
            "Unit of work committed", written_rows=written, events=len(events)
        )
        return written

    async def _rollback_after_failure(self, error: Exception) -> None:
        logger.warning(
            "Commit failed, rolled back",
            error_type=type(error).__name__,
            pending_events=len(self.pending_events()),
        )
        self._written_rows = 0
        self._failed = True
        await self.session.rollback()

    @property
    def failed(self) -> bool:
        return self._failed


__all__ = ["UnitOfWork", "Repository"]
