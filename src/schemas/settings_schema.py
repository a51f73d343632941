"""Site-wide slideshow settings.

Loaded once from YAML when the site boots, read-only afterwards.  The only
setting a site owner normally touches is ``background_color``; the asset
URLs and user-facing strings are exposed so a deployment can relocate the
client bundle or translate the notices.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .slideshow_schema import BackgroundColor


class SlideshowSettings(BaseModel):
    """Process-wide slideshow configuration."""

    background_color: BackgroundColor = Field(
        default="black",
        description="Slideshow window background: 'black' or 'white'",
    )

    # --- client assets ---
    assets_base_url: str = Field(
        default="/static/slideshow",
        description="URL prefix the client script, stylesheet and spinner are served from",
    )
    cycle_version: str = "2.9999.8"
    script_version: str = "20121214.1"
    spinner_url: Optional[str] = Field(
        default=None,
        description="Loading spinner image. Falls back to <assets_base_url>/img/slideshow-loader.gif.",
    )

    # --- user-facing strings ---
    noscript_text: str = "This slideshow requires JavaScript."
    feed_link_text: str = "Click to view slideshow."
    gallery_type_label: str = "Slideshow"

    @field_validator("background_color", mode="before")
    @classmethod
    def _sanitize_color(cls, value):
        # Anything but an exact 'white' is treated as the default.
        return "white" if value == "white" else "black"

    @field_validator("assets_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def asset_url(self, relative: str) -> str:
        """Absolute URL for a file inside the client bundle."""
        return f"{self.assets_base_url}/{relative.lstrip('/')}"

    @property
    def spinner_url_resolved(self) -> str:
        return self.spinner_url or self.asset_url("img/slideshow-loader.gif")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SlideshowSettings":
        """Load settings from a YAML configuration file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Slideshow settings file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    def to_yaml(self, path: str | Path) -> None:
        """Save settings to a YAML configuration file."""
        path = Path(path)
        data = self.model_dump(exclude_none=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
