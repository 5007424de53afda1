"""World Bank indicator query: validate -> fetch -> normalize -> render.

Every call re-fetches; no retries, no caching. Failures are folded into a
``QueryResult`` with ``is_error=True`` so the tool layer never sees an
uncaught exception from here.
"""
import logging
from datetime import date
from typing import Any, Dict, Literal, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field

from .config import RenderProfile, Settings
from .normalize import clamp_limit, normalize_observations
from .tables import WORLD_BANK_COLUMNS, RenderedTable, plain_title, render_table, sort_most_recent_first

logger = logging.getLogger(__name__)

SOURCE = "World Bank Open Data API"
BASE_URL = "https://api.worldbank.org/v2"
MIN_YEAR = 1960
MAX_YEAR = 2100
RANGE_ERROR = "Invalid range: startYear must be less than or equal to endYear."


class OpenDataError(Exception):
    pass


class UpstreamHTTPError(OpenDataError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"World Bank API request failed: {status_code}")


# ----------------------------
# Parameters & result
# ----------------------------
class QueryParams(BaseModel):
    database_id: Literal["world_bank"] = Field("world_bank", description="Open database id, alleen world_bank")
    country_code: str = Field("CAN", min_length=3, max_length=3, description="ISO-3 landcode, bijv. CAN, USA, FRA")
    indicator_code: str = Field("SP.POP.TOTL", min_length=3, description="World Bank indicator, bijv. SP.POP.TOTL")
    start_year: int = Field(2018, ge=MIN_YEAR, le=MAX_YEAR)
    end_year: int = Field(default_factory=lambda: date.today().year, ge=MIN_YEAR, le=MAX_YEAR)
    # geen grenzen: buiten [1, 20] wordt geclamped, niet geweigerd
    limit: int = 10


class QueryResult(BaseModel):
    is_error: bool = False
    text: str
    structured: Optional[Dict[str, Any]] = None


def validate_query(params: QueryParams) -> Optional[str]:
    if params.start_year > params.end_year:
        return RANGE_ERROR
    return None


def build_endpoint(country_code: str, indicator_code: str, start_year: int, end_year: int, limit: int) -> str:
    return (
        f"{BASE_URL}/country/{quote(country_code, safe='')}/indicator/{quote(indicator_code, safe='')}"
        f"?format=json&date={start_year}:{end_year}&per_page={clamp_limit(limit)}"
    )


# ----------------------------
# Fetch
# ----------------------------
async def fetch_payload(
    endpoint: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    async with httpx.AsyncClient(follow_redirects=True, timeout=timeout, transport=transport) as client:
        resp = await client.get(endpoint, headers={"Accept": "application/json"})
    if not resp.is_success:
        raise UpstreamHTTPError(resp.status_code)
    return resp.json()


# ----------------------------
# Response layout
# ----------------------------
def _summary_text(profile: RenderProfile, endpoint: str, table: RenderedTable, row_count: int) -> str:
    if profile.name == "basic":
        return "\n".join([
            f"Data source: {SOURCE}",
            f"Endpoint: {endpoint}",
            "",
            "Table widget:",
            table.markdown,
        ])
    lines = [
        f"Found {row_count} row(s) from {SOURCE}.",
        f"Endpoint: {endpoint}",
        "",
        table.title,
        "",
        table.markdown,
    ]
    if table.html is not None:
        lines += ["", "HTML table:", table.html]
    return "\n".join(lines)


async def query_indicator(
    params: QueryParams,
    *,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> QueryResult:
    settings = settings or Settings()
    profile = settings.profile

    problem = validate_query(params)
    if problem:
        return QueryResult(is_error=True, text=problem)

    limit = clamp_limit(params.limit)
    endpoint = build_endpoint(params.country_code, params.indicator_code, params.start_year, params.end_year, limit)
    logger.info("Querying %s", endpoint)

    try:
        payload = await fetch_payload(endpoint, settings.http_timeout, transport)
    except UpstreamHTTPError as exc:
        logger.warning("Upstream returned HTTP %s for %s", exc.status_code, endpoint)
        return QueryResult(is_error=True, text=f"Failed to query open database: {exc}")
    except (httpx.HTTPError, ValueError) as exc:
        # timeouts, netwerkfouten en kapotte JSON
        logger.warning("Request to %s failed: %r", endpoint, exc)
        return QueryResult(is_error=True, text=f"Failed to query open database: {str(exc) or type(exc).__name__}")

    observations = normalize_observations(payload, params.country_code, params.indicator_code, limit)
    logger.debug("Normalized %d observation(s)", len(observations))
    if profile.sort_most_recent_first:
        observations = sort_most_recent_first(observations)

    table = render_table(
        observations,
        country_code=params.country_code,
        indicator_code=params.indicator_code,
        start_year=params.start_year,
        end_year=params.end_year,
        include_html=profile.include_html,
        decorate=profile.decorate_title,
    )
    columns = [c.model_dump() for c in WORLD_BANK_COLUMNS]
    title = plain_title(table.title)

    return QueryResult(
        text=_summary_text(profile, endpoint, table, len(observations)),
        structured={
            "source": SOURCE,
            "endpoint": endpoint,
            "profile": profile.name,
            "title": title,
            "columns": columns,
            "rows": table.rows,
            "rawRows": [obs.model_dump() for obs in observations],
            "markdownTable": table.markdown,
            "htmlTable": table.html,
            "widgetType": "table",
            "widget": {
                "type": "table",
                "title": title,
                "columns": columns,
                "rows": table.rows,
            },
        },
    )
