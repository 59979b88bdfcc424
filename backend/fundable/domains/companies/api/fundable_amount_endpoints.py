"""
Fundable Amount API Endpoints

Listing of fundable companies and triggers for the fundable amount calculation.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from fundable.api.deps import get_fundable_amount_service
from fundable.shared.exceptions import DomainException, handle_domain_exception
from ..schemas.company import CalculateAllResponse, CompanyResponse, FundableAmountResponse
from ..services.fundable_amount_service import FundableAmountService

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_letter(value: str, parameter: str) -> None:
    if len(value) != 1 or not value.isalpha():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{parameter} parameter must be a valid letter (A-Z)."
        )


@router.get("/", response_model=List[FundableAmountResponse])
async def get_fundable_companies(
    starts_with: Optional[str] = Query(None, description="Only companies whose name starts with this letter"),
    service: FundableAmountService = Depends(get_fundable_amount_service)
):
    if starts_with is not None:
        _require_letter(starts_with, "starts_with")
        logger.info(f"Getting fundable companies starting with letter: {starts_with}")
        return await service.get_fundable_companies_by_letter(starts_with)

    logger.info("Getting all fundable companies")
    return await service.get_fundable_companies()


@router.get("/letter/{letter}", response_model=List[FundableAmountResponse])
async def get_fundable_companies_by_letter(
    letter: str = Path(..., description="First letter of the company name"),
    service: FundableAmountService = Depends(get_fundable_amount_service)
):
    _require_letter(letter, "letter")
    logger.info(f"Getting fundable companies starting with letter: {letter}")
    return await service.get_fundable_companies_by_letter(letter)


@router.post("/calculate/all", response_model=CalculateAllResponse)
async def calculate_all_fundable_amounts(service: FundableAmountService = Depends(get_fundable_amount_service)):
    logger.info("Calculating fundable amounts for all companies")
    processed_count = await service.calculate_all_fundable_amounts()
    return CalculateAllResponse(
        message="Fundable amounts calculated successfully",
        processed_count=processed_count
    )


@router.post("/calculate/{cik}", response_model=CompanyResponse)
async def calculate_fundable_amount(
    cik: int = Path(..., gt=0, description="SEC Central Index Key"),
    service: FundableAmountService = Depends(get_fundable_amount_service)
):
    logger.info(f"Calculating fundable amount for company with CIK: {cik}")
    try:
        return await service.calculate_fundable_amount(cik)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)
