from .pricing_schema import (
    CarrierResponse,
    IntakeItem,
    IntakeResponse,
    MatchResponse,
    PricingVariantsResponse,
    SignatureResponse,
)

__all__ = [
    "CarrierResponse",
    "IntakeItem",
    "IntakeResponse",
    "MatchResponse",
    "PricingVariantsResponse",
    "SignatureResponse",
]
