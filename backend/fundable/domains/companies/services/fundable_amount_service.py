import logging
from decimal import Decimal
from typing import List

from fundable.shared.exceptions import CompanyNotFoundException, InsufficientIncomeDataException
from ..models import CentralIndexKey, Company
from ..ports import CompanyRepositoryPort, UnitOfWorkPort
from ..schemas.company import FundableAmountResponse

logger = logging.getLogger(__name__)


class FundableAmountService:
    """Calculates fundable amounts and lists the companies eligible for funding."""

    def __init__(self, repository: CompanyRepositoryPort, unit_of_work: UnitOfWorkPort):
        self.repository = repository
        self.unit_of_work = unit_of_work

    async def get_fundable_companies(self) -> List[FundableAmountResponse]:
        companies = await self.repository.get_eligible_for_funding()
        return self._to_listing(companies)

    async def get_fundable_companies_by_letter(self, letter: str) -> List[FundableAmountResponse]:
        if not isinstance(letter, str) or len(letter) != 1 or not letter.isalpha():
            raise ValueError("Must be a letter.")

        companies = await self.repository.get_by_name_starts_with(letter)
        return self._to_listing(companies)

    async def calculate_fundable_amount(self, cik: int) -> Company:
        company = await self.repository.get_by_cik_with_records(CentralIndexKey.create(cik))
        if company is None:
            raise CompanyNotFoundException(cik)

        async with self.unit_of_work.transaction(f"fundable amount calculation for CIK {cik}"):
            company.calculate_fundable_amounts()

        logger.info(
            f"Calculated fundable amounts for CIK {cik}: standard={company.standard_fundable_amount}, "
            f"special={company.special_fundable_amount}"
        )
        return company

    async def calculate_all_fundable_amounts(self) -> int:
        """
        Recalculate every company in one transaction.

        Returns:
            Number of companies whose amounts were calculated.
        """
        companies = await self.repository.get_all_with_records()
        processed_count = 0

        async with self.unit_of_work.transaction("fundable amount calculation for all companies"):
            for company in companies:
                try:
                    company.calculate_fundable_amounts()
                    processed_count += 1
                except InsufficientIncomeDataException as e:
                    # calculate_fundable_amounts zeroes the amounts instead of raising today
                    logger.info(f"Skipping CIK {company.cik}: {e.message}")
                    continue

        logger.info(f"Calculated fundable amounts for {processed_count} of {len(companies)} companies")
        return processed_count

    @staticmethod
    def _to_listing(companies: List[Company]) -> List[FundableAmountResponse]:
        return [
            FundableAmountResponse(
                id=index,
                name=company.entity_name,
                standard_fundable_amount=company.standard_fundable_amount or Decimal("0"),
                special_fundable_amount=company.special_fundable_amount or Decimal("0"),
            )
            for index, company in enumerate(companies, start=1)
        ]
