from .company_service import CompanyService
from .fundable_amount_service import FundableAmountService

__all__ = [
    "CompanyService",
    "FundableAmountService",
]
