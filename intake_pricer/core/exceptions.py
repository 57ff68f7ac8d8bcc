"""Custom exceptions (structured hierarchy)

The matching engine itself never raises: parse problems degrade to 0/None and
"no match" is a normal result. These exceptions belong to the caller-level
layers (catalog provider, lookup payload envelope, batch intake).
"""
from typing import Any, Optional


class PricerException(Exception):
    """Base class for every custom exception"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# Catalog
class CatalogException(PricerException):
    """Base class for catalog errors"""
    def __init__(self, message: str, error_code: str = "CATALOG_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CATALOG_ERROR", details)


class CatalogFetchException(CatalogException):
    """Catalog text could not be fetched"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to fetch catalog: {reason}"
        super().__init__(message, "CATALOG_FETCH_FAILED", details or {"reason": reason})


# Lookup provider
class LookupException(PricerException):
    """Base class for device lookup errors"""
    def __init__(self, message: str, error_code: str = "LOOKUP_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "LOOKUP_ERROR", details)


class LookupProviderException(LookupException):
    """Lookup provider returned an error envelope or failed outright"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Lookup provider error: {reason}"
        super().__init__(message, "LOOKUP_PROVIDER_ERROR", details or {"reason": reason})


# Validation
class ValidationException(PricerException):
    """Input validation failure"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidImeiException(ValidationException):
    """Device identifier is empty after cleaning"""
    def __init__(self, raw: Any, details: Optional[dict[str, Any]] = None):
        super().__init__("imei", f"no usable identifier (value: {raw!r})", details)
