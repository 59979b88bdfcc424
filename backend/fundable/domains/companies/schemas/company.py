from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from ..models.company import MAX_ENTITY_NAME_LENGTH


class CompanyCreate(BaseModel):
    cik: int = Field(..., gt=0, description="SEC Central Index Key")
    entity_name: str = Field(..., min_length=1, max_length=MAX_ENTITY_NAME_LENGTH)


class CompanyImport(BaseModel):
    cik: int = Field(..., gt=0, description="SEC Central Index Key")


class BatchImport(BaseModel):
    ciks: List[int] = Field(..., min_length=1, description="CIKs to import, processed in order")

    @field_validator("ciks")
    @classmethod
    def ciks_must_be_positive(cls, ciks: List[int]) -> List[int]:
        if any(cik <= 0 for cik in ciks):
            raise ValueError("Each CIK must be greater than 0.")
        return ciks


class CompanyUpdate(BaseModel):
    entity_name: str = Field(..., min_length=1, max_length=MAX_ENTITY_NAME_LENGTH)


class IncomeRecordCreate(BaseModel):
    year: int
    amount: Decimal
    form: str = Field(..., min_length=1, max_length=10)
    frame: Optional[str] = Field(None, max_length=20)
    filed_date: date
    accession_number: str = Field(..., min_length=1, max_length=100)


class IncomeRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    year: int
    amount: Decimal
    form: str
    frame: Optional[str]
    filed_date: date
    accession_number: str


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cik: int
    entity_name: str
    standard_fundable_amount: Optional[Decimal]
    special_fundable_amount: Optional[Decimal]
    created_at: datetime
    updated_at: Optional[datetime]
    income_records: List[IncomeRecordResponse] = []

    @field_validator("cik", mode="before")
    @classmethod
    def unwrap_cik(cls, value):
        # ORM objects expose the CentralIndexKey value object
        return getattr(value, "value", value)


class FundableAmountResponse(BaseModel):
    id: int = Field(..., description="Sequential position in the listing, starting at 1")
    name: str
    standard_fundable_amount: Decimal
    special_fundable_amount: Decimal


class CalculateAllResponse(BaseModel):
    message: str
    processed_count: int
