"""
FastMCP server: store catalog tools + World Bank open-data query

Usage:
  uv pip install -e .
  opendata-store-mcp                       # stdio
  opendata-store-mcp --transport http      # streamable HTTP op :8000/mcp

Call:
  name: queryOpenDatabase, arguments: {"country_code": "FRA", "start_year": 2015, "limit": 5}
"""
import argparse
import json
import logging
from typing import Annotated, Literal, Optional

import httpx
import uvicorn
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from . import __version__
from .catalog import ProductNotFoundError, find_product, get_categories, get_discount_policy, load_store_data
from .config import Settings, configure_logging
from .worldbank import MAX_YEAR, MIN_YEAR, QueryParams, query_indicator

logger = logging.getLogger(__name__)


def create_server(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    settings = settings or Settings()
    app = FastMCP(
        name="instagram-sell-store-server",
        version=__version__,
        instructions="MCP server for an Instagram store catalog, its discount policy and World Bank open data.",
    )

    # ----------------------------
    # Store catalog
    # ----------------------------
    @app.tool(name="getCategory")
    def get_category() -> dict:
        """Returns high-level categories sold by the store."""
        return get_categories(load_store_data(settings.store_data_path))

    @app.tool(name="getProductByName")
    def get_product_by_name(
            name: Annotated[str, Field(description="Product name, case-insensitive", min_length=1)]
    ) -> dict:
        """Returns product details (name, category, price, description, picture) by product name."""
        data = load_store_data(settings.store_data_path)
        try:
            return find_product(data, name)
        except ProductNotFoundError as exc:
            logger.info("Product lookup miss: %r", name)
            raise ToolError(json.dumps(exc.as_dict(), indent=2)) from exc

    def discount_policy() -> dict:
        """Returns store discount policy based on order amount tiers."""
        return get_discount_policy(load_store_data(settings.store_data_path))

    app.tool(discount_policy, name="getDiscountPolicy")
    # oude (verkeerd gespelde) naam blijft bestaan voor bestaande clients
    app.tool(discount_policy, name="getDiscoutpolicy")

    # ----------------------------
    # Open data
    # ----------------------------
    @app.tool(name="queryOpenDatabase")
    async def query_open_database(
            database_id: Annotated[Literal["world_bank"], Field(description="Open database identifier. Currently supports only world_bank.")] = "world_bank",
            country_code: Annotated[str, Field(description="ISO-3 country code, e.g. CAN, USA, FRA.", min_length=3, max_length=3)] = "CAN",
            indicator_code: Annotated[str, Field(description="World Bank indicator code, e.g. SP.POP.TOTL for population.", min_length=3)] = "SP.POP.TOTL",
            start_year: Annotated[int, Field(description="First year of the range", ge=MIN_YEAR, le=MAX_YEAR)] = 2018,
            end_year: Annotated[Optional[int], Field(description="Last year of the range (default: current year)", ge=MIN_YEAR, le=MAX_YEAR)] = None,
            limit: Annotated[int, Field(description="Maximum number of rows; clamped to 1-20")] = 10,
    ) -> ToolResult:
        """
        Fetches indicator data from the World Bank Open Data API and returns it as a table widget.

        Returns text with the endpoint, a title, a Markdown table (and an HTML table in the
        rich profile) plus structured content: source, endpoint, title, columns, rows,
        rawRows, markdownTable, htmlTable and a widget {type: "table", title, columns, rows}.
        """
        params = QueryParams(
            database_id=database_id,
            country_code=country_code,
            indicator_code=indicator_code,
            start_year=start_year,
            limit=limit,
            **({"end_year": end_year} if end_year is not None else {}),
        )
        result = await query_indicator(params, settings=settings, transport=transport)
        if result.is_error:
            raise ToolError(result.text)
        return ToolResult(
            content=[TextContent(type="text", text=result.text)],
            structured_content=result.structured,
        )

    return app


def main(argv=None):
    ap = argparse.ArgumentParser(description="Store catalog + World Bank open-data MCP server.")
    ap.add_argument("--transport", choices=["stdio", "http"], default="stdio", help="MCP transport.")
    ap.add_argument("--host", default="127.0.0.1", help="Host voor http transport.")
    ap.add_argument("--port", type=int, default=8000, help="Poort voor http transport.")
    ap.add_argument("--path", default="/mcp", help="URL-pad voor http transport.")
    ap.add_argument("--profile", choices=["basic", "rich"], help="Tabelprofiel (default uit OPENDATA_RENDER_PROFILE of 'rich').")
    ap.add_argument("--log-level", help="Logniveau (default uit LOG_LEVEL of INFO).")
    args = ap.parse_args(argv)

    settings = Settings.from_env(render_profile=args.profile, log_level=args.log_level)
    configure_logging(settings.log_level)
    logger.info("Starting server (transport=%s, profile=%s)", args.transport, settings.render_profile)

    app = create_server(settings)
    if args.transport == "http":
        # stateless + JSON antwoorden: geen sessies, geen SSE-streams
        http_app = app.http_app(path=args.path, json_response=True, stateless_http=True)
        uvicorn.run(http_app, host=args.host, port=args.port, log_level=settings.log_level.lower())
    else:
        app.run()
