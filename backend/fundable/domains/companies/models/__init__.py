from .identifier import CentralIndexKey
from .income_record import IncomeRecord
from .company import Company, REQUIRED_YEARS

__all__ = [
    "CentralIndexKey",
    "IncomeRecord",
    "Company",
    "REQUIRED_YEARS",
]
