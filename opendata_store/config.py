import logging
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_STORE_DATA = Path(__file__).parent / "data" / "store-data.json"

# ----------------------------
# Render profiles
# ----------------------------
class RenderProfile(BaseModel):
    name: Literal["basic", "rich"]
    sort_most_recent_first: bool = Field(..., description="Sorteer rijen op jaar, nieuwste eerst")
    include_html: bool = Field(..., description="Voeg een HTML-tabel toe aan de output")
    decorate_title: bool = Field(..., description="Titel in Markdown vet")


PROFILES = {
    "basic": RenderProfile(name="basic", sort_most_recent_first=False, include_html=False, decorate_title=False),
    "rich": RenderProfile(name="rich", sort_most_recent_first=True, include_html=True, decorate_title=True),
}

# ----------------------------
# Settings
# ----------------------------
class Settings(BaseModel):
    render_profile: Literal["basic", "rich"] = Field("rich", description="Welk tabelprofiel de query-tool gebruikt")
    http_timeout: float = Field(15.0, gt=0, description="Timeout (seconden) voor de World Bank request")
    store_data_path: Path = Field(DEFAULT_STORE_DATA, description="Pad naar de catalogus JSON")
    log_level: str = Field("INFO", description="Logniveau, bijv. DEBUG of INFO")

    @property
    def profile(self) -> RenderProfile:
        return PROFILES[self.render_profile]

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Bouw settings uit environment variabelen; expliciete overrides winnen."""
        env = {
            "render_profile": os.environ.get("OPENDATA_RENDER_PROFILE"),
            "http_timeout": os.environ.get("OPENDATA_HTTP_TIMEOUT"),
            "store_data_path": os.environ.get("STORE_DATA_PATH"),
            "log_level": os.environ.get("LOG_LEVEL"),
        }
        values = {k: v for k, v in env.items() if v}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def configure_logging(level: str = "INFO") -> None:
    # stdout is het MCP stdio-kanaal, dus logs naar stderr
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
