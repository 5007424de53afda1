"""Turn a World Bank indicator payload into a list of observations.

The World Bank API answers with ``[paging_info, [observation, ...]]``. Anything
that doesn't look like that is treated as "no data", never as an error.
"""
from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

MIN_LIMIT = 1
MAX_LIMIT = 20


class Observation(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: str
    value: Any
    country: str
    indicator: str


def clamp_limit(limit: int) -> int:
    return min(max(MIN_LIMIT, int(limit)), MAX_LIMIT)


def _label(field: Any, fallback: str) -> str:
    # country/indicator komen als {"id": "...", "value": "..."}
    if isinstance(field, Mapping):
        value = field.get("value")
        if value is not None:
            return str(value)
    return fallback


def _entries(payload: Any) -> list:
    if not isinstance(payload, list) or len(payload) < 2:
        return []
    entries = payload[1]
    return entries if isinstance(entries, list) else []


def normalize_observations(
    payload: Any,
    country_code: str,
    indicator_code: str,
    limit: int,
) -> List[Observation]:
    kept = [
        item for item in _entries(payload)
        if item and isinstance(item, Mapping) and not ("value" in item and item["value"] is None)
    ]
    return [
        Observation(
            year=str(item.get("date", "")),
            value=item.get("value"),
            country=_label(item.get("country"), country_code),
            indicator=_label(item.get("indicator"), indicator_code),
        )
        for item in kept[:clamp_limit(limit)]
    ]


def year_as_int(year: str) -> Optional[int]:
    try:
        return int(year)
    except (TypeError, ValueError):
        return None
