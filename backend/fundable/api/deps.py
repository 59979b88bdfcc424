from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fundable.db.session import AsyncSessionLocal
from fundable.domains.companies.clients.edgar_client import get_edgar_client
from fundable.domains.companies.ports import FilingDataSource
from fundable.domains.companies.repositories import UnitOfWork
from fundable.domains.companies.services import CompanyService, FundableAmountService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency to get an async database session."""
    async with AsyncSessionLocal() as session:
        # Transactions are committed by the services through the unit of work;
        # anything left open here is rolled back.
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_unit_of_work(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_filing_source() -> FilingDataSource:
    return get_edgar_client()


def get_company_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
    filing_source: FilingDataSource = Depends(get_filing_source),
) -> CompanyService:
    return CompanyService(unit_of_work.companies, unit_of_work, filing_source)


def get_fundable_amount_service(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
) -> FundableAmountService:
    return FundableAmountService(unit_of_work.companies, unit_of_work)
