"""
Company Service

Creates, imports and maintains companies. Imports pull the company name and
income facts from SEC EDGAR and persist them inside a single transaction.

Batch imports are all-or-nothing at the transaction level: companies that
already exist or that SEC EDGAR does not know are skipped, anything else that
goes wrong (including cancellation) rolls back the whole batch.
"""
import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from fundable.shared.exceptions import (
    CompanyAlreadyExistsException,
    CompanyNotFoundException,
    FilingDataNotFoundException,
)
from ..models import CentralIndexKey, Company, IncomeRecord
from ..models.edgar import EdgarCompanyData
from ..ports import CompanyRepositoryPort, FilingDataSource, UnitOfWorkPort

logger = logging.getLogger(__name__)


class CompanyService:

    def __init__(
        self,
        repository: CompanyRepositoryPort,
        unit_of_work: UnitOfWorkPort,
        filing_source: FilingDataSource,
    ):
        self.repository = repository
        self.unit_of_work = unit_of_work
        self.filing_source = filing_source

    async def get_all_companies(self) -> List[Company]:
        return await self.repository.get_all_with_records()

    async def get_company_by_cik(self, cik: int) -> Optional[Company]:
        return await self.repository.get_by_cik_with_records(CentralIndexKey.create(cik))

    async def get_company_by_id(self, company_id: uuid.UUID) -> Optional[Company]:
        return await self.repository.get_by_id_with_records(company_id)

    async def create_company(self, cik: int, entity_name: str) -> Company:
        cik_key = CentralIndexKey.create(cik)
        if await self.repository.exists_by_cik(cik_key):
            raise CompanyAlreadyExistsException(cik)

        company = Company.create(cik_key, entity_name)

        async with self.unit_of_work.transaction(f"create company CIK {cik}"):
            await self.repository.add(company)

        logger.info(f"Created company {entity_name!r} (CIK {cik})")
        return company

    async def import_company(self, cik: int) -> Company:
        """
        Import one company from SEC EDGAR.

        Raises:
            CompanyAlreadyExistsException: If the CIK is already stored.
            FilingDataNotFoundException: If SEC EDGAR has no data for the CIK.
        """
        cik_key = CentralIndexKey.create(cik)
        if await self.repository.exists_by_cik(cik_key):
            raise CompanyAlreadyExistsException(cik)

        edgar_data = await self.filing_source.get_company_data(cik)
        if edgar_data is None:
            raise FilingDataNotFoundException(cik)

        company = self._build_company(cik_key, edgar_data)

        async with self.unit_of_work.transaction(f"import of CIK {cik}"):
            await self.repository.add(company)

        logger.info(
            f"Imported {company.entity_name!r} (CIK {cik}) with {len(company.income_records)} income records"
        )
        return company

    async def batch_import_companies(self, ciks: Sequence[int]) -> List[Company]:
        """
        Import several companies in one transaction, in the given order.

        Returns:
            The companies that were imported; skipped CIKs are simply absent.
        """
        imported: List[Company] = []

        async with self.unit_of_work.transaction(f"batch import of {len(ciks)} companies"):
            for cik in ciks:
                cik_key = CentralIndexKey.create(cik)
                if await self.repository.exists_by_cik(cik_key):
                    logger.info(f"Skipping CIK {cik}: company already exists")
                    continue

                edgar_data = await self.filing_source.get_company_data(cik)
                if edgar_data is None:
                    logger.info(f"Skipping CIK {cik}: not found in SEC EDGAR")
                    continue

                company = self._build_company(cik_key, edgar_data)
                await self.repository.add(company)
                imported.append(company)

        logger.info(f"Batch import finished: {len(imported)} of {len(ciks)} companies imported")
        return imported

    async def delete_company(self, company_id: uuid.UUID) -> None:
        company = await self.repository.get_by_id(company_id)
        if company is None:
            raise CompanyNotFoundException(company_id, field="id")

        async with self.unit_of_work.transaction(f"delete company {company_id}"):
            await self.repository.delete(company_id)

        logger.info(f"Deleted company {company.entity_name!r} ({company_id})")

    async def add_income_record(
        self,
        cik: int,
        year: int,
        amount: Decimal,
        form: str,
        frame: Optional[str],
        filed_date: date,
        accession_number: str,
    ) -> Company:
        """Manually add (or replace, for the same year and form) an income record."""
        company = await self.repository.get_by_cik_with_records(CentralIndexKey.create(cik))
        if company is None:
            raise CompanyNotFoundException(cik)

        record = IncomeRecord.create(
            company.id, year, amount, form, frame, filed_date, accession_number
        )

        async with self.unit_of_work.transaction(f"add income record for CIK {cik}"):
            company.add_income_record(record)

        return company

    async def rename_company(self, cik: int, entity_name: str) -> Company:
        """
        Rename a company. Already calculated fundable amounts are recalculated
        so the special amount follows the new name.
        """
        company = await self.repository.get_by_cik_with_records(CentralIndexKey.create(cik))
        if company is None:
            raise CompanyNotFoundException(cik)

        async with self.unit_of_work.transaction(f"rename company CIK {cik}"):
            recalculated = company.update_entity_name(entity_name)

        if recalculated:
            logger.info(f"Renamed CIK {cik} to {entity_name!r} and recalculated fundable amounts")
        else:
            logger.info(f"Renamed CIK {cik} to {entity_name!r}")
        return company

    @staticmethod
    def _build_company(cik: CentralIndexKey, edgar_data: EdgarCompanyData) -> Company:
        company = Company.create(cik, edgar_data.entity_name)
        for income in edgar_data.income_records:
            company.add_income_record(
                IncomeRecord.create(
                    company.id,
                    income.year,
                    income.amount,
                    income.form,
                    income.frame,
                    income.filed_date,
                    income.accession_number,
                )
            )
        return company
