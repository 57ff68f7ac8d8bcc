"""Match Orchestrator - engine entry point

Wires the pipeline for one device:
1. Lookup payload -> LookupRecord
2. Display name, signature and brand from the model fields
3. Carrier / lock inference (default resolved explicitly)
4. Candidate filter -> matcher
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from intake_pricer.catalog.ingestor import Catalog
from intake_pricer.core.config import settings
from intake_pricer.core.logging import logger
from intake_pricer.schemas.pricing_schema import (
    CarrierResponse,
    MatchResponse,
    PricingVariantsResponse,
    SignatureResponse,
)
from intake_pricer.utils.text.core.cleaning import title_case
from intake_pricer.utils.text.matching.signature import (
    Brand,
    DeviceSignature,
    build_display_name,
    extract_signature,
    infer_brand,
)

from .candidates import Condition, filter_candidates
from .carrier import UNLOCKED, CarrierInfo, infer_carrier, resolve_carrier
from .matcher import MatchQuery, match
from .payload import LookupRecord, parse_lookup_payload
from .result import MatchResult


VARIANT_KEYS = ("NEW_UNLOCKED", "NEW_LOCKED", "USED_UNLOCKED", "USED_LOCKED")

CarrierLike = Union[CarrierInfo, str, None]


def variant_key(condition: Union[Condition, str, None], carrier: CarrierLike) -> str:
    """``NEW_UNLOCKED`` / ``USED_LOCKED`` etc.

    Only an "Unlocked" carrier counts as unlocked; any other carrier, or none,
    is locked. A missing condition is new.
    """
    if isinstance(condition, Condition):
        cond = condition.value
    else:
        cond = (condition or Condition.NEW.value).strip().lower()

    if isinstance(carrier, CarrierInfo):
        unlocked = carrier.is_unlocked
    else:
        unlocked = (carrier or "").strip().lower() == UNLOCKED.lower()
    return f"{cond.upper()}_{'UNLOCKED' if unlocked else 'LOCKED'}"


def merge_signatures(primary: DeviceSignature, fallback: DeviceSignature) -> DeviceSignature:
    """Fill the unknown fields of ``primary`` from ``fallback``."""
    return DeviceSignature(
        generation=primary.generation if primary.generation is not None else fallback.generation,
        tier=primary.tier if primary.tier is not None else fallback.tier,
        storage_gb=primary.storage_gb if primary.storage_gb is not None else fallback.storage_gb,
        color=primary.color if primary.color is not None else fallback.color,
    )


def signature_to_response(signature: DeviceSignature) -> SignatureResponse:
    return SignatureResponse(
        generation=signature.generation,
        tier=signature.tier.value if signature.tier else None,
        storage_gb=signature.storage_gb,
        color=signature.color,
    )


def match_to_response(result: MatchResult) -> MatchResponse:
    row = result.matched_row
    return MatchResponse(
        matched_label=row.device_label if row else None,
        matched_category=row.category if row else None,
        confidence_score=result.confidence_score,
        purchase_price_cents=result.purchase_price_cents,
        base_price_cents=result.base_price_cents,
    )


@dataclass(frozen=True)
class DeviceMatch:
    """Match result plus everything derived on the way to it."""

    result: MatchResult
    signature: DeviceSignature
    carrier: CarrierInfo
    brand: Brand
    condition: Condition
    display_name: Optional[str] = None

    def to_response(self) -> MatchResponse:
        return match_to_response(self.result)

    def signature_response(self) -> SignatureResponse:
        return signature_to_response(self.signature)

    def carrier_response(self) -> CarrierResponse:
        return CarrierResponse(
            carrier_name=self.carrier.carrier_name,
            is_unlocked=self.carrier.is_unlocked,
            icloud_lock_on=self.carrier.icloud_lock_on,
        )


@dataclass(frozen=True)
class PricingVariants:
    """Purchase price per variant key plus the most confident match overall."""

    prices: dict[str, Optional[int]] = field(
        default_factory=lambda: {key: None for key in VARIANT_KEYS}
    )
    best: MatchResult = field(default_factory=MatchResult.no_match)

    def to_response(self) -> PricingVariantsResponse:
        row = self.best.matched_row
        return PricingVariantsResponse(
            prices=dict(self.prices),
            matched_label=row.device_label if row else None,
            matched_category=row.category if row else None,
            confidence_score=self.best.confidence_score,
        )


class MatchOrchestrator:
    """Engine facade. Stateless apart from the default carrier policy."""

    def __init__(self, default_carrier: Optional[str] = None):
        self.default_carrier = default_carrier or settings.default_carrier

    # ------------------------------------------------------------------
    # description-level API
    # ------------------------------------------------------------------
    def match_description(
        self,
        description: Optional[str],
        catalog: Catalog,
        condition: Condition = Condition.NEW,
        carrier: CarrierLike = None,
        display_name: Optional[str] = None,
        brand: Optional[Brand] = None,
    ) -> DeviceMatch:
        """Match a free-text model description against ``catalog``."""
        display = display_name or build_display_name(description)
        signature = extract_signature(description)
        if display:
            signature = merge_signatures(signature, extract_signature(display))
        carrier_info = self._carrier(carrier)
        brand = brand or infer_brand(f"{description or ''} {display or ''}")

        result = self._run(description, display, signature, brand, condition, carrier_info, catalog)
        return DeviceMatch(
            result=result,
            signature=signature,
            carrier=carrier_info,
            brand=brand,
            condition=condition,
            display_name=display,
        )

    def price_variants(
        self,
        description: Optional[str],
        catalog: Catalog,
        display_name: Optional[str] = None,
        locked_carrier: Optional[str] = None,
        brand: Optional[Brand] = None,
    ) -> PricingVariants:
        """Run the matcher for all four condition x lock combinations."""
        display = display_name or build_display_name(description)
        signature = extract_signature(description)
        if display:
            signature = merge_signatures(signature, extract_signature(display))
        brand = brand or infer_brand(f"{description or ''} {display or ''}")

        prices: dict[str, Optional[int]] = {}
        best = MatchResult.no_match()
        for condition in (Condition.NEW, Condition.USED):
            for carrier_info in (
                CarrierInfo(carrier_name=UNLOCKED, is_unlocked=True),
                CarrierInfo(carrier_name=locked_carrier, is_unlocked=False),
            ):
                result = self._run(description, display, signature, brand, condition, carrier_info, catalog)
                prices[variant_key(condition, carrier_info)] = (
                    result.purchase_price_cents if result.is_match else None
                )
                if result.confidence_score > best.confidence_score:
                    best = result
        return PricingVariants(prices=prices, best=best)

    # ------------------------------------------------------------------
    # payload-level API
    # ------------------------------------------------------------------
    def describe(self, record: LookupRecord) -> tuple[Optional[str], Optional[str]]:
        """(model description, display name) for a lookup record.

        The provider's model name is the better display name when present;
        otherwise one is built from the model description.
        """
        description = record.model_description or record.model_name or record.model_code
        if record.model_name:
            display = title_case(" ".join(record.model_name.split()))
        else:
            display = build_display_name(record.model_description)
        return description, display

    def match_lookup(
        self,
        payload: Any,
        catalog: Catalog,
        condition: Condition = Condition.NEW,
        default_carrier: Optional[str] = None,
    ) -> DeviceMatch:
        """Match a raw lookup payload (mapping, envelope or ``Key: Value`` text)."""
        record = parse_lookup_payload(payload)
        description, display = self.describe(record)
        carrier_info = resolve_carrier(
            infer_carrier(record), default_carrier or self.default_carrier
        )
        brand = infer_brand(
            " ".join(filter(None, (record.manufacturer, record.model_name, description)))
        )
        return self.match_description(
            description,
            catalog,
            condition=condition,
            carrier=carrier_info,
            display_name=display,
            brand=brand,
        )

    # ------------------------------------------------------------------
    def _carrier(self, carrier: CarrierLike) -> CarrierInfo:
        if isinstance(carrier, CarrierInfo):
            return resolve_carrier(carrier, self.default_carrier)
        if carrier:
            return CarrierInfo(
                carrier_name=carrier,
                is_unlocked=carrier.strip().lower() == UNLOCKED.lower(),
            )
        return resolve_carrier(CarrierInfo(), self.default_carrier)

    def _run(
        self,
        description: Optional[str],
        display: Optional[str],
        signature: DeviceSignature,
        brand: Brand,
        condition: Condition,
        carrier: CarrierInfo,
        catalog: Catalog,
    ) -> MatchResult:
        label = display or description or ""
        candidates = filter_candidates(catalog.rows, brand, condition, carrier.is_unlocked)
        logger.debug(
            f"Matching '{label}': brand={brand.value} condition={condition.value} "
            f"unlocked={carrier.is_unlocked} candidates={len(candidates)}"
        )
        query = MatchQuery(
            label=label,
            signature=signature,
            brand=brand,
            carrier_name=carrier.carrier_name,
        )
        return match(query, candidates)
