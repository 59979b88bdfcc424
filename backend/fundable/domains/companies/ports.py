"""
Ports used by the company services.

The services only talk to persistence and to SEC EDGAR through these
protocols; ``repositories`` and ``clients`` hold the production adapters.
"""
from __future__ import annotations

import uuid
from typing import AsyncContextManager, List, Optional, Protocol

from .models import CentralIndexKey, Company
from .models.edgar import EdgarCompanyData


class FilingDataSource(Protocol):
    """Port: fetch a company name and its income facts by CIK."""

    async def get_company_data(self, cik: int) -> Optional[EdgarCompanyData]:
        """Return None when the source has no such company."""
        ...


class CompanyRepositoryPort(Protocol):
    """Port: load and stage Company aggregates. Soft-deleted companies are never returned."""

    async def get_by_id(self, company_id: uuid.UUID) -> Optional[Company]: ...

    async def get_by_id_with_records(self, company_id: uuid.UUID) -> Optional[Company]: ...

    async def get_by_cik(self, cik: CentralIndexKey) -> Optional[Company]: ...

    async def get_by_cik_with_records(self, cik: CentralIndexKey) -> Optional[Company]: ...

    async def get_all_with_records(self) -> List[Company]: ...

    async def get_eligible_for_funding(self) -> List[Company]:
        """Companies whose standard fundable amount is set and > 0, ordered by name."""
        ...

    async def get_by_name_starts_with(self, letter: str) -> List[Company]:
        """Eligible companies whose name starts with ``letter`` (case-insensitive)."""
        ...

    async def exists_by_cik(self, cik: CentralIndexKey) -> bool: ...

    async def add(self, company: Company) -> None: ...

    async def delete(self, company_id: uuid.UUID) -> None:
        """Hard delete; income records go with it."""
        ...


class UnitOfWorkPort(Protocol):
    """Port: transaction boundary owned by exactly one logical call."""

    async def begin(self) -> None: ...

    async def save_changes(self) -> None: ...

    async def commit(self) -> None:
        """Save pending changes and commit; rolls back if the commit fails."""
        ...

    async def rollback(self) -> None: ...

    def transaction(self, operation_name: str = "transaction") -> AsyncContextManager[None]:
        """Begin, then commit on success or roll back on any failure or cancellation."""
        ...
