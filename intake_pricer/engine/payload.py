"""Lookup payload normalization.

Lookup providers answer in one of three shapes:

- a flat mapping ``{"Model Description": "...", "Carrier": "..."}``
- an envelope ``{"status": "success", "result": <mapping | text>}``
- free text with ``Key: Value`` lines (``<br>`` counts as a line break)

All of them become a :class:`LookupRecord`, an ordered list of ``(key, value)``
pairs. Payload order matters: carrier inference scans keys in that order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

from intake_pricer.core.exceptions import LookupProviderException


_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_LINE_RE = re.compile(r"^\s*([^:]+?)\s*:\s*(.+?)\s*$")
_TAG_RE = re.compile(r"<[^>]+>")

_ERROR_STATUSES = frozenset({"error", "failed", "failure", "rejected"})


@dataclass(frozen=True)
class LookupRecord:
    """Ordered key/value view of a lookup payload."""

    fields: tuple[tuple[str, str], ...] = ()

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def find(self, *needles: str) -> Optional[str]:
        """First non-empty value whose lower-cased key contains any needle."""
        for key, value in self.fields:
            low = key.lower()
            if value and any(n in low for n in needles):
                return value
        return None

    def as_dict(self) -> dict[str, str]:
        return dict(self.fields)

    @property
    def manufacturer(self) -> Optional[str]:
        return self.find("manufacturer")

    @property
    def model_name(self) -> Optional[str]:
        return self.find("model name")

    @property
    def model_code(self) -> Optional[str]:
        return self.find("model code", "model number")

    @property
    def model_description(self) -> Optional[str]:
        return self.find("model description", "description")

    @property
    def imei(self) -> Optional[str]:
        return self.find("imei")

    @property
    def purchase_date(self) -> Optional[str]:
        return self.find("purchase date")


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "On" if value else "Off"
    return str(value).strip()


def _from_mapping(data: Mapping[Any, Any]) -> LookupRecord:
    fields = []
    for key, value in data.items():
        # nested structures carry nothing we match on
        if isinstance(value, (dict, list, tuple)):
            continue
        fields.append((str(key).strip(), _stringify(value)))
    return LookupRecord(tuple(fields))


def _from_text(text: str) -> LookupRecord:
    fields = []
    for line in _BR_RE.sub("\n", text).splitlines():
        m = _LINE_RE.match(_TAG_RE.sub("", line))
        if not m:
            continue
        fields.append((m.group(1), m.group(2)))
    return LookupRecord(tuple(fields))


_ENVELOPE_KEYS = frozenset({"status", "result", "message"})


def _is_envelope(payload: Mapping[Any, Any]) -> bool:
    """``{"status": ..., "result": ...}`` wrapper, or a bare ``{"result": ...}``.

    A flat provider mapping that merely has a ``result`` field among its
    device fields is not an envelope.
    """
    if "result" not in payload:
        return False
    return "status" in payload or set(payload) <= _ENVELOPE_KEYS


def parse_lookup_payload(payload: Any) -> LookupRecord:
    """Normalize any supported payload shape. Never raises.

    Unsupported shapes (``None``, numbers, lists) yield an empty record.
    """
    if isinstance(payload, Mapping):
        if _is_envelope(payload):
            return parse_lookup_payload(payload["result"])
        return _from_mapping(payload)
    if isinstance(payload, str):
        return _from_text(payload)
    return LookupRecord()


def raise_for_envelope(payload: Any) -> None:
    """Raise when an envelope reports a provider-side failure.

    Raises:
        LookupProviderException: status is an error status, or the result is empty
    """
    if not isinstance(payload, Mapping) or not _is_envelope(payload):
        return

    status = str(payload.get("status", "")).strip().lower()
    if status in _ERROR_STATUSES:
        reason = payload.get("message") or payload.get("result") or status
        raise LookupProviderException(str(reason), details={"status": status})
    if not payload.get("result"):
        raise LookupProviderException("empty result", details={"status": status})
