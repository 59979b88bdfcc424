# This file makes the 'clients' directory a Python package.
from .edgar_client import EdgarClient, get_edgar_client

__all__ = [
    "EdgarClient",
    "get_edgar_client",
]
