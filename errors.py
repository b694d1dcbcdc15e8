"""Catalog errors.

Every failure a request can hit is a subclass of CatalogError so the HTTP
layer can map them to status codes in one place.
"""

from typing import List, Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Input violated one or more product/variant rules."""

    status_code = 400

    def __init__(self, violations: List[str], message: Optional[str] = None):
        super().__init__(message or ", ".join(violations))
        self.violations = list(violations)


class InvalidIdError(CatalogError):
    """An identifier is not a well-formed ObjectId."""

    status_code = 400


class NotFoundError(CatalogError):
    """A requested product or variant does not exist."""

    status_code = 404
