"""Business services - export only."""

from .impl import IntakeService, LookupClient, clean_imei, purchase_hints

__all__ = ["IntakeService", "LookupClient", "clean_imei", "purchase_hints"]
