# classroll/services/base_service.py
"""Base service with common CRUD operations."""
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Type, Any, AsyncIterator, Dict, Optional, TypeVar, Generic
import logging

from ..core.exceptions import (
    ClassrollException,
    ConflictError,
    DatabaseError,
    NotFoundError,
    StoreConstraintError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')

CHECK_VIOLATION = "23514"
FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    for err in (exc.orig, getattr(exc.orig, "__cause__", None)):
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code:
            return code
    return None


def translate_integrity_error(exc: IntegrityError) -> ClassrollException:
    code = _sqlstate(exc)
    text = str(exc.orig)
    if code == CHECK_VIOLATION or "CHECK constraint failed" in text:
        return StoreConstraintError("Write rejected by a data constraint")
    if code == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in text:
        return ValidationError("Referenced record does not exist")
    return ConflictError("Record conflicts with existing data")


def validate_id(value: Any, name: str) -> int:
    """Reject anything but a positive integer identifier."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {name}", field=name)
    return value


class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit the work done in the block, or roll it back and translate store errors."""
        try:
            yield
            await self.db.commit()
        except ClassrollException:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Integrity error in %s: %s", self.__class__.__name__, e.orig)
            raise translate_integrity_error(e)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Database error in %s: %s", self.__class__.__name__, e)
            raise DatabaseError()

    async def get(self, id: Any) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any, resource: str) -> T:
        obj = await self.get(id)
        if obj is None:
            raise NotFoundError(resource, id)
        return obj

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        async with self.transaction():
            self.db.add(obj)
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: T, obj_in: Dict) -> T:
        async with self.transaction():
            for key, value in obj_in.items():
                setattr(obj, key, value)
        await self.db.refresh(obj)
        return obj

