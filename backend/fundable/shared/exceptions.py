"""
Shared Exception Classes

Domain-specific exception classes for consistent error handling across the service.
Provides structured error reporting with appropriate HTTP status codes.
"""

# Standard library imports
from typing import Optional, Dict, Any

# Third-party imports
from fastapi import HTTPException


class DomainException(Exception):
    """
    Base exception class for all domain-specific errors.

    Provides common functionality for error reporting and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class InvalidCompanyDataException(DomainException):
    """Raised when company data is invalid or incomplete."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="INVALID_COMPANY_DATA",
            details=details
        )


class CompanyAlreadyExistsException(DomainException):
    """Raised when a company with the same CIK is already stored."""

    def __init__(self, cik: int):
        message = f"Company with CIK {cik} already exists."
        super().__init__(
            message=message,
            error_code="COMPANY_ALREADY_EXISTS",
            details={"cik": cik}
        )


class CompanyNotFoundException(DomainException):
    """Raised when a requested company is not stored."""

    def __init__(self, identifier: Any, field: str = "cik"):
        message = f"Company with {field.upper()} {identifier} not found."
        super().__init__(
            message=message,
            error_code="COMPANY_NOT_FOUND",
            details={field: str(identifier)}
        )


class FilingDataNotFoundException(DomainException):
    """Raised when SEC EDGAR has no filing data for a CIK."""

    def __init__(self, cik: int):
        message = f"Company with CIK {cik} not found in SEC EDGAR database."
        super().__init__(
            message=message,
            error_code="FILING_DATA_NOT_FOUND",
            details={"cik": cik}
        )


class InsufficientIncomeDataException(DomainException):
    """Raised when a company lacks the income history needed for a fundable amount."""

    def __init__(self, cik: int, missing_years: Optional[list] = None):
        message = f"Insufficient income data to calculate fundable amounts for CIK {cik}"
        super().__init__(
            message=message,
            error_code="INSUFFICIENT_INCOME_DATA",
            details={"cik": cik, "missing_years": missing_years or []}
        )


def domain_exception_to_http_exception(exception: DomainException) -> HTTPException:
    """
    Convert domain exceptions to FastAPI HTTPException with appropriate status codes.

    Args:
        exception: Domain-specific exception

    Returns:
        HTTPException with appropriate status code and detail
    """
    # Map exception types to HTTP status codes
    status_code_map = {
        InvalidCompanyDataException: 400,
        InsufficientIncomeDataException: 400,
        CompanyAlreadyExistsException: 409,
        CompanyNotFoundException: 404,
        FilingDataNotFoundException: 404,
    }

    status_code = status_code_map.get(type(exception), 400)

    detail = {
        "error": exception.message,
        "error_code": exception.error_code,
        "details": exception.details
    }

    return HTTPException(status_code=status_code, detail=detail)


def handle_domain_exception(exception: Exception) -> HTTPException:
    """
    Handle domain exceptions and convert them to appropriate HTTP responses.

    Args:
        exception: Any exception that occurred

    Returns:
        HTTPException with appropriate status code and detail
    """
    if isinstance(exception, DomainException):
        return domain_exception_to_http_exception(exception)
    elif isinstance(exception, ValueError):
        return HTTPException(
            status_code=400,
            detail={
                "error": str(exception),
                "error_code": "INVALID_ARGUMENT",
                "details": {}
            }
        )
    else:
        # Handle generic exceptions
        return HTTPException(
            status_code=500,
            detail={
                "error": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "details": {"message": str(exception)}
            }
        )
