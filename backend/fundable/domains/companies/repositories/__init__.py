from .company_repository import CompanyRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "CompanyRepository",
    "UnitOfWork",
]
