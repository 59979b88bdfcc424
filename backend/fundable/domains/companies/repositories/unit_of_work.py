"""
Unit of Work

Owns the transaction of one AsyncSession and the repositories bound to it.
One instance per request or CLI command; never share it between tasks.
"""

# Standard library imports
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

# Third-party imports
from sqlalchemy.ext.asyncio import AsyncSession

# Domain imports (relative)
from ..models.audit import AuditMixin
from .company_repository import CompanyRepository

logger = logging.getLogger(__name__)


class UnitOfWork:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.companies = CompanyRepository(db)
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    async def begin(self) -> None:
        if self._active:
            raise RuntimeError("A transaction is already active on this unit of work.")
        # Reads issued before begin() autobegin the session transaction; adopt it.
        if not self.db.in_transaction():
            await self.db.begin()
        self._active = True

    async def save_changes(self) -> None:
        """Run the on-save hook of every modified audited object, then flush."""
        for obj in list(self.db.dirty):
            if isinstance(obj, AuditMixin) and self.db.is_modified(obj):
                obj.on_save()
        await self.db.flush()

    async def commit(self) -> None:
        try:
            await self.save_changes()
            await self.db.commit()
        except (Exception, asyncio.CancelledError):
            await self.rollback()
            raise
        finally:
            self._active = False

    async def rollback(self) -> None:
        try:
            await self.db.rollback()
        finally:
            self._active = False

    @asynccontextmanager
    async def transaction(self, operation_name: str = "transaction") -> AsyncIterator[None]:
        """
        Begin a transaction, commit it when the block finishes and roll it back
        when the block raises or the task is cancelled.

        Args:
            operation_name: Name of the operation for logging
        """
        await self.begin()
        logger.debug(f"Starting {operation_name}")
        try:
            yield
            await self.commit()
        except (Exception, asyncio.CancelledError) as e:
            logger.error(f"Error in {operation_name}, rolling back: {e!r}")
            # A failed commit has already rolled back
            if self._active:
                await self.rollback()
            raise
        logger.debug(f"Successfully completed {operation_name}")
