"""
Company API Endpoints

CRUD and SEC EDGAR import endpoints for companies.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from fundable.api.deps import get_company_service
from fundable.shared.exceptions import DomainException, handle_domain_exception
from ..schemas.company import (
    BatchImport, CompanyCreate, CompanyImport, CompanyResponse, CompanyUpdate, IncomeRecordCreate
)
from ..services.company_service import CompanyService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[CompanyResponse])
async def get_all_companies(service: CompanyService = Depends(get_company_service)):
    logger.info("Getting all companies")
    return await service.get_all_companies()


@router.get("/cik/{cik}", response_model=CompanyResponse)
async def get_company_by_cik(
    cik: int = Path(..., gt=0, description="SEC Central Index Key"),
    service: CompanyService = Depends(get_company_service)
):
    logger.info(f"Getting company with CIK: {cik}")
    company = await service.get_company_by_cik(cik)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Company with CIK {cik} not found.")
    return company


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company_by_id(company_id: UUID, service: CompanyService = Depends(get_company_service)):
    logger.info(f"Getting company with ID: {company_id}")
    company = await service.get_company_by_id(company_id)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Company with ID {company_id} not found.")
    return company


@router.post("/", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(company_data: CompanyCreate, service: CompanyService = Depends(get_company_service)):
    logger.info(f"Creating company with CIK: {company_data.cik}")
    try:
        return await service.create_company(company_data.cik, company_data.entity_name)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)


@router.post("/import", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def import_company(import_data: CompanyImport, service: CompanyService = Depends(get_company_service)):
    logger.info(f"Importing company with CIK: {import_data.cik}")
    try:
        return await service.import_company(import_data.cik)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)


@router.post("/import/batch", response_model=List[CompanyResponse])
async def batch_import_companies(batch_data: BatchImport, service: CompanyService = Depends(get_company_service)):
    logger.info(f"Batch importing {len(batch_data.ciks)} companies")
    try:
        return await service.batch_import_companies(batch_data.ciks)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)


@router.patch("/cik/{cik}", response_model=CompanyResponse)
async def rename_company(
    update_data: CompanyUpdate,
    cik: int = Path(..., gt=0, description="SEC Central Index Key"),
    service: CompanyService = Depends(get_company_service)
):
    logger.info(f"Renaming company with CIK: {cik}")
    try:
        return await service.rename_company(cik, update_data.entity_name)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)


@router.post("/cik/{cik}/income-records", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def add_income_record(
    record_data: IncomeRecordCreate,
    cik: int = Path(..., gt=0, description="SEC Central Index Key"),
    service: CompanyService = Depends(get_company_service)
):
    logger.info(f"Adding {record_data.form} income record for {record_data.year} to CIK: {cik}")
    try:
        return await service.add_income_record(
            cik,
            year=record_data.year,
            amount=record_data.amount,
            form=record_data.form,
            frame=record_data.frame,
            filed_date=record_data.filed_date,
            accession_number=record_data.accession_number,
        )
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(company_id: UUID, service: CompanyService = Depends(get_company_service)):
    logger.info(f"Deleting company with ID: {company_id}")
    try:
        await service.delete_company(company_id)
    except (DomainException, ValueError) as e:
        raise handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
