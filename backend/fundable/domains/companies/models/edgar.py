from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date
from decimal import Decimal

# Raw shapes returned by data.sec.gov. Only the fields we read are declared.

class EdgarSubmissions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cik: Optional[str] = None
    name: Optional[str] = None


class EdgarFactEntry(BaseModel):
    """One entry of facts.us-gaap.NetIncomeLoss.units.USD."""
    model_config = ConfigDict(extra="ignore")

    accn: str
    fy: Optional[int] = None  # fiscal year is null on some filings
    val: Decimal
    form: str
    frame: Optional[str] = None
    filed: date


# Normalized output of the EDGAR client

class EdgarIncomeData(BaseModel):
    year: int
    amount: Decimal
    form: str
    frame: Optional[str] = None
    filed_date: date
    accession_number: str


class EdgarCompanyData(BaseModel):
    cik: int
    entity_name: str
    income_records: List[EdgarIncomeData] = Field(default_factory=list)
