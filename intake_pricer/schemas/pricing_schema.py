"""Pydantic schemas (engine output contract and batch intake results)"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, field_validator


class MatchResponse(BaseModel):
    """Engine output for one query"""
    matched_label: Optional[str] = Field(None, description="Matched catalog device label")
    matched_category: Optional[str] = Field(None, description="Matched catalog category (sheet)")
    confidence_score: float = Field(0.0, ge=0.0, le=1.0, description="Match quality in [0, 1], not a probability")
    purchase_price_cents: Optional[int] = Field(None, description="Suggested purchase price, passed through as ingested")
    base_price_cents: Optional[int] = Field(None, description="Base (list) price, passed through as ingested")


class SignatureResponse(BaseModel):
    """Structured signature derived from the device description"""
    generation: Optional[int] = Field(None, ge=0)
    tier: Optional[str] = None
    storage_gb: Optional[int] = Field(None, ge=0)
    color: Optional[str] = None


class CarrierResponse(BaseModel):
    """Carrier and lock state derived from the lookup payload"""
    carrier_name: Optional[str] = None
    is_unlocked: bool = False
    icloud_lock_on: bool = False


class PricingVariantsResponse(BaseModel):
    """Purchase price for every condition x lock combination"""
    prices: Dict[str, Optional[int]] = Field(default_factory=dict, description="NEW_UNLOCKED, NEW_LOCKED, USED_UNLOCKED, USED_LOCKED")
    matched_label: Optional[str] = None
    matched_category: Optional[str] = None
    confidence_score: float = Field(0.0, ge=0.0, le=1.0)


class IntakeItem(BaseModel):
    """One device in a batch intake"""
    imei: str = Field(..., description="Cleaned device identifier")
    ok: bool = True
    error: Optional[str] = None

    display_name: Optional[str] = None
    color: Optional[str] = None
    storage: Optional[str] = Field(None, description="e.g. 256GB / 1TB")
    carrier: Optional[str] = None
    icloud_lock_on: bool = False

    used: bool = False
    used_source: Optional[str] = Field(None, description="imei_suffix | purchase_date")
    purchase_date: Optional[str] = None
    purchase_age_days: Optional[int] = None
    condition_hint: str = ""

    signature: Optional[SignatureResponse] = None
    match: Optional[MatchResponse] = None
    variants: Optional[PricingVariantsResponse] = None

    @field_validator("condition_hint")
    @classmethod
    def validate_condition_hint(cls, v: str) -> str:
        if v not in ("", "assume_used", "check_for_use"):
            raise ValueError(f"unknown condition hint: {v}")
        return v


class IntakeResponse(BaseModel):
    """Batch intake result, items in input order"""
    items: List[IntakeItem] = Field(default_factory=list)
    total: int = Field(0, ge=0)
    succeeded: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)
    truncated: bool = Field(False, description="Input exceeded the batch cap")
