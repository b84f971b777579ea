"""Entity Store gateway over an async SQLAlchemy session.

Services talk to persistence only through this class: exact-match lookups,
create, update of leaf values and filtered deletes. Each call commits by
default, giving per-row atomic writes; pass ``commit=False`` to batch several
writes into one transaction and finish with :meth:`EntityStore.commit`.
"""
import logging
import uuid
from typing import Any, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.database import Base
from fitcoach.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore:
    """Persistence gateway used by all domain services."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _where(self, model: type[Base], filters: dict[str, Any]) -> list:
        clauses = []
        for field, value in filters.items():
            column = getattr(model, field)
            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return clauses

    async def _fail(self, action: str, model: type[Base], exc: SQLAlchemyError) -> None:
        logger.error(f"Entity store {action} failed for {model.__tablename__}: {exc}")
        await self.db.rollback()
        raise GatewayError(f"Failed to {action} {model.__tablename__}") from exc

    async def get(self, model: type[ModelT], entity_id: uuid.UUID) -> ModelT | None:
        """Get an entity by primary key."""
        try:
            result = await self.db.execute(select(model).where(model.id == entity_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail("read", model, e)

    async def find(
        self,
        model: type[ModelT],
        order_by: Sequence[Any] | None = None,
        **filters: Any,
    ) -> list[ModelT]:
        """List entities matching all exact-match filters."""
        query = select(model).where(*self._where(model, filters))
        if order_by:
            query = query.order_by(*order_by)
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._fail("query", model, e)

    async def find_one(self, model: type[ModelT], **filters: Any) -> ModelT | None:
        """Get the first entity matching all exact-match filters."""
        try:
            result = await self.db.execute(
                select(model).where(*self._where(model, filters)).limit(1)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail("query", model, e)

    async def create(self, entity: ModelT, commit: bool = True) -> ModelT:
        """Insert a new entity."""
        try:
            self.db.add(entity)
            if commit:
                await self.db.commit()
                await self.db.refresh(entity)
            else:
                await self.db.flush()
            return entity
        except SQLAlchemyError as e:
            await self._fail("create", type(entity), e)

    async def update(self, entity: ModelT, commit: bool = True, **values: Any) -> ModelT:
        """Set leaf values on an entity and persist them."""
        for field, value in values.items():
            setattr(entity, field, value)
        try:
            if commit:
                await self.db.commit()
                await self.db.refresh(entity)
            else:
                await self.db.flush()
            return entity
        except SQLAlchemyError as e:
            await self._fail("update", type(entity), e)

    async def delete_where(self, model: type[Base], commit: bool = True, **filters: Any) -> int:
        """Delete every row matching all filters in one statement.

        Returns the number of rows removed.
        """
        if not filters:
            raise ValueError("delete_where requires at least one filter")
        try:
            result = await self.db.execute(
                delete(model)
                .where(*self._where(model, filters))
            )
            if commit:
                await self.db.commit()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            await self._fail("delete", model, e)

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Entity store commit failed: {e}")
            await self.db.rollback()
            raise GatewayError("Failed to commit changes") from e

    async def rollback(self) -> None:
        await self.db.rollback()
