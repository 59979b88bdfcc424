from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """
    Audit and soft-delete columns shared by the company aggregate and its records.

    ``on_save`` is called explicitly by the unit of work for every modified
    object before changes are flushed.
    """

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def mark_updated(self) -> None:
        self.updated_at = utcnow()

    def delete(self) -> None:
        """Soft delete: hides the row from default queries without removing it."""
        self.is_deleted = True
        self.deleted_at = utcnow()
        self.mark_updated()

    def restore(self) -> None:
        self.is_deleted = False
        self.deleted_at = None
        self.mark_updated()

    def on_save(self) -> None:
        self.mark_updated()
