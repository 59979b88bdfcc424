import uuid
from typing import List, Optional

from sqlalchemy import exists, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from ..models import CentralIndexKey, Company


class CompanyRepository:
    """SQLAlchemy implementation of the company repository port."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _active():
        return select(Company).where(Company.is_deleted.is_(False))

    @staticmethod
    def _with_records(statement):
        return statement.options(selectinload(Company._income_records))

    async def get_by_id(self, company_id: uuid.UUID) -> Optional[Company]:
        result = await self.db.execute(self._active().where(Company.id == company_id))
        return result.scalar_one_or_none()

    async def get_by_id_with_records(self, company_id: uuid.UUID) -> Optional[Company]:
        result = await self.db.execute(
            self._with_records(self._active().where(Company.id == company_id))
        )
        return result.scalar_one_or_none()

    async def get_by_cik(self, cik: CentralIndexKey) -> Optional[Company]:
        result = await self.db.execute(self._active().where(Company.cik == cik))
        return result.scalar_one_or_none()

    async def get_by_cik_with_records(self, cik: CentralIndexKey) -> Optional[Company]:
        result = await self.db.execute(
            self._with_records(self._active().where(Company.cik == cik))
        )
        return result.scalar_one_or_none()

    async def get_all_with_records(self) -> List[Company]:
        result = await self.db.execute(
            self._with_records(self._active().order_by(Company.created_at, Company.entity_name))
        )
        return list(result.scalars().all())

    async def get_eligible_for_funding(self) -> List[Company]:
        result = await self.db.execute(
            self._active()
            .where(
                Company.standard_fundable_amount.is_not(None),
                Company.standard_fundable_amount > 0,
            )
            .order_by(Company.entity_name)
        )
        return list(result.scalars().all())

    async def get_by_name_starts_with(self, letter: str) -> List[Company]:
        result = await self.db.execute(
            self._active()
            .where(
                Company.standard_fundable_amount.is_not(None),
                Company.standard_fundable_amount > 0,
                func.upper(Company.entity_name).like(f"{letter.upper()}%"),
            )
            .order_by(Company.entity_name)
        )
        return list(result.scalars().all())

    async def exists_by_cik(self, cik: CentralIndexKey) -> bool:
        # Soft-deleted rows still hold the unique CIK, so they count here
        result = await self.db.execute(select(exists().where(Company.cik == cik)))
        return bool(result.scalar())

    async def add(self, company: Company) -> None:
        self.db.add(company)

    async def delete(self, company_id: uuid.UUID) -> None:
        result = await self.db.execute(
            self._with_records(select(Company).where(Company.id == company_id))
        )
        company = result.scalar_one_or_none()
        if company is not None:
            await self.db.delete(company)
