"""
Shared Utilities

Common exception classes used across the service.
"""

from .exceptions import (
    DomainException, InvalidCompanyDataException, CompanyAlreadyExistsException,
    CompanyNotFoundException, FilingDataNotFoundException, InsufficientIncomeDataException,
    handle_domain_exception, domain_exception_to_http_exception
)

__all__ = [
    # Exception classes and handlers
    "DomainException", "InvalidCompanyDataException", "CompanyAlreadyExistsException",
    "CompanyNotFoundException", "FilingDataNotFoundException", "InsufficientIncomeDataException",
    "handle_domain_exception", "domain_exception_to_http_exception",
]
