"""Batch intake service - lookup, match and price a list of device identifiers"""
import asyncio
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Protocol

from intake_pricer.catalog.cache import CatalogProvider
from intake_pricer.catalog.ingestor import Catalog
from intake_pricer.core.config import settings
from intake_pricer.core.exceptions import InvalidImeiException, PricerException
from intake_pricer.core.logging import logger, sanitize_for_log
from intake_pricer.engine.candidates import Condition
from intake_pricer.engine.orchestrator import MatchOrchestrator
from intake_pricer.engine.payload import parse_lookup_payload, raise_for_envelope
from intake_pricer.schemas.pricing_schema import IntakeItem, IntakeResponse


_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


class LookupClient(Protocol):
    """Upstream device lookup (IMEI provider). Network access lives in the caller."""

    async def lookup(self, imei: str) -> Any:
        ...


@dataclass(frozen=True)
class CleanedImei:
    imei: str
    used_flag: bool = False


@dataclass(frozen=True)
class PurchaseHints:
    purchase_date: Optional[str] = None
    age_days: Optional[int] = None
    condition_hint: str = ""


def clean_imei(raw: Any) -> CleanedImei:
    """Strip everything but letters and digits.

    A trailing ``u`` / ``U`` is the operator's "used" marker and is removed.

    Raises:
        InvalidImeiException: nothing usable is left
    """
    trimmed = str(raw if raw is not None else "").strip()
    used_flag = trimmed[-1:] in ("u", "U")
    imei = _NON_ALNUM_RE.sub("", trimmed)
    if used_flag:
        imei = imei[:-1]
    if not imei:
        raise InvalidImeiException(raw)
    return CleanedImei(imei=imei, used_flag=used_flag)


def parse_purchase_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def purchase_hints(date_str: Optional[str], today: Optional[date] = None) -> PurchaseHints:
    """Condition hint from the estimated purchase date.

    Older than ``used_after_days`` -> ``assume_used``; at least
    ``check_use_after_days`` -> ``check_for_use``; otherwise no hint.
    """
    parsed = parse_purchase_date(date_str)
    if parsed is None:
        return PurchaseHints(purchase_date=date_str or None)

    age = ((today or date.today()) - parsed).days
    hint = ""
    if age > settings.used_after_days:
        hint = "assume_used"
    elif age >= settings.check_use_after_days:
        hint = "check_for_use"
    return PurchaseHints(purchase_date=date_str, age_days=age, condition_hint=hint)


def format_storage(storage_gb: Optional[int]) -> Optional[str]:
    if not storage_gb:
        return None
    if storage_gb >= 1024 and storage_gb % 1024 == 0:
        return f"{storage_gb // 1024}TB"
    return f"{storage_gb}GB"


class IntakeService:
    """
    Batch intake

    - lookups run with bounded concurrency (intake_concurrency)
    - dispatches are paced (intake_dispatch_delay_ms) for provider rate limits
    - a failing item never fails the batch; results keep input order
    """

    def __init__(
        self,
        lookup_client: LookupClient,
        catalog_provider: CatalogProvider,
        orchestrator: Optional[MatchOrchestrator] = None,
        concurrency: Optional[int] = None,
        dispatch_delay_ms: Optional[int] = None,
        max_items: Optional[int] = None,
    ):
        if lookup_client is None:
            raise ValueError("lookup_client must not be None")
        if catalog_provider is None:
            raise ValueError("catalog_provider must not be None")

        self.lookup_client = lookup_client
        self.catalog_provider = catalog_provider
        self.orchestrator = orchestrator or MatchOrchestrator()
        self.concurrency = concurrency or settings.intake_concurrency
        self.dispatch_delay = (
            settings.intake_dispatch_delay_ms if dispatch_delay_ms is None else dispatch_delay_ms
        ) / 1000
        self.max_items = max_items or settings.intake_max_items

    async def intake(self, raw_imeis: Iterable[Any], today: Optional[date] = None) -> IntakeResponse:
        """
        Look up, match and price every identifier.

        Raises:
            CatalogFetchException: the catalog could not be loaded (whole batch)
        """
        raw_list = list(raw_imeis)
        truncated = len(raw_list) > self.max_items
        if truncated:
            logger.warning(f"Intake batch truncated: {len(raw_list)} -> {self.max_items}")
            raw_list = raw_list[:self.max_items]

        catalog = await self.catalog_provider.get_catalog()
        logger.info(f"Intake started: items={len(raw_list)}, catalog_rows={len(catalog)}")

        semaphore = asyncio.Semaphore(self.concurrency)
        pace_lock = asyncio.Lock()
        loop = asyncio.get_running_loop()
        next_dispatch = [loop.time()]

        async def paced(raw: Any) -> IntakeItem:
            async with semaphore:
                async with pace_lock:
                    wait = next_dispatch[0] - loop.time()
                    if wait > 0:
                        await asyncio.sleep(wait)
                    next_dispatch[0] = loop.time() + self.dispatch_delay
                return await self.process_one(raw, catalog, today)

        items = await asyncio.gather(*(paced(raw) for raw in raw_list))

        succeeded = sum(1 for item in items if item.ok)
        logger.info(f"Intake finished: ok={succeeded}, failed={len(items) - succeeded}")
        return IntakeResponse(
            items=list(items),
            total=len(items),
            succeeded=succeeded,
            failed=len(items) - succeeded,
            truncated=truncated,
        )

    async def process_one(self, raw: Any, catalog: Catalog, today: Optional[date] = None) -> IntakeItem:
        """Single identifier -> IntakeItem. Failures become ``ok=False`` items."""
        try:
            cleaned = clean_imei(raw)
        except InvalidImeiException as e:
            logger.info(f"Skipping invalid identifier: {sanitize_for_log(str(raw))}")
            return IntakeItem(imei=str(raw if raw is not None else ""), ok=False, error=str(e))

        try:
            payload = await self.lookup_client.lookup(cleaned.imei)
            raise_for_envelope(payload)
            return self._build_item(cleaned, payload, catalog, today)
        except PricerException as e:
            logger.warning(f"Intake failed: imei={sanitize_for_log(cleaned.imei)}, error={e}")
            return IntakeItem(imei=cleaned.imei, ok=False, error=str(e))
        except Exception as e:
            logger.error(
                f"Intake failed: imei={sanitize_for_log(cleaned.imei)}, error={type(e).__name__}",
                exc_info=True,
            )
            return IntakeItem(imei=cleaned.imei, ok=False, error=f"{type(e).__name__}: {e}")

    def _build_item(self, cleaned: CleanedImei, payload: Any, catalog: Catalog, today: Optional[date]) -> IntakeItem:
        record = parse_lookup_payload(payload)
        hints = purchase_hints(record.purchase_date, today)

        used = cleaned.used_flag or hints.condition_hint == "assume_used"
        used_source = None
        if cleaned.used_flag:
            used_source = "imei_suffix"
        elif used:
            used_source = "purchase_date"

        condition = Condition.USED if used else Condition.NEW
        device = self.orchestrator.match_lookup(payload, catalog, condition=condition)
        variants = self.orchestrator.price_variants(
            self.orchestrator.describe(record)[0],
            catalog,
            display_name=device.display_name,
            locked_carrier=None if device.carrier.is_unlocked else device.carrier.carrier_name,
            brand=device.brand,
        )

        return IntakeItem(
            imei=cleaned.imei,
            display_name=device.display_name,
            color=device.signature.color,
            storage=format_storage(device.signature.storage_gb),
            carrier=device.carrier.carrier_name,
            icloud_lock_on=device.carrier.icloud_lock_on,
            used=used,
            used_source=used_source,
            purchase_date=hints.purchase_date,
            purchase_age_days=hints.age_days,
            condition_hint=hints.condition_hint,
            signature=device.signature_response(),
            match=device.to_response(),
            variants=variants.to_response(),
        )
