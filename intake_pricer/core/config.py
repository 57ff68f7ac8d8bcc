"""Settings - environment loading and validation"""
from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator


class Settings(BaseSettings):
    """Application settings"""

    # Catalog
    catalog_cache_ttl: int = 300  # 5 minutes

    # Signature extraction
    # Generation tokens outside this range are ignored (e.g. "5" in "5G", "20" in "2024").
    # Widen the upper bound when the product line grows past it.
    signature_generation_min: int = 6
    signature_generation_max: int = 19

    # Carrier
    # Used when no carrier can be inferred from the lookup payload.
    default_carrier: str = "Unlocked"

    # Batch intake (upstream lookup provider rate limits)
    intake_concurrency: int = 5
    intake_dispatch_delay_ms: int = 160
    intake_max_items: int = 200

    # Purchase-date condition hints
    used_after_days: int = 45
    check_use_after_days: int = 14

    # Catalog search
    search_default_limit: int = 15
    search_max_limit: int = 50

    # Logging
    log_level: str = "INFO"

    @field_validator("catalog_cache_ttl")
    @classmethod
    def validate_catalog_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("catalog_cache_ttl must be positive")
        return v

    @field_validator("intake_concurrency", "intake_max_items", "search_default_limit", "search_max_limit")
    @classmethod
    def validate_positive_counts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("intake and search limits must be positive")
        return v

    @field_validator("intake_dispatch_delay_ms")
    @classmethod
    def validate_dispatch_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("intake_dispatch_delay_ms must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        if self.signature_generation_min > self.signature_generation_max:
            raise ValueError("signature_generation_min must not exceed signature_generation_max")
        if self.check_use_after_days > self.used_after_days:
            raise ValueError("check_use_after_days must not exceed used_after_days")
        return self

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
