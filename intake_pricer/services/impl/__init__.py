"""Services implementation package."""

from .intake_service import (
    IntakeService,
    LookupClient,
    clean_imei,
    purchase_hints,
)

__all__ = ["IntakeService", "LookupClient", "clean_imei", "purchase_hints"]
