"""Pydantic models for slideshow macro invocations, configuration and payloads.

The lifecycle of one render is:

    MacroInvocation -> SlideshowConfig -> (content store query)
        -> list[Slide] -> RenderPayload -> attribute-safe string

Nothing here is persisted; every object lives for a single macro call.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_TRANSITION = "fade"
DEFAULT_ORDERBY = "menu_order, id"


class SortOrder(str, Enum):
    """Direction requested by the ``order`` attribute."""

    ASC = "ASC"
    DESC = "DESC"
    RAND = "RAND"


BackgroundColor = Literal["black", "white"]


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------

class MacroInvocation(BaseModel):
    """One ``[slideshow]`` (or ``[gallery type="slideshow"]``) call."""

    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Raw macro attributes, untrusted",
    )
    post_id: Optional[int] = Field(
        default=None,
        description="Id of the document the macro appears in",
    )
    instance: int = Field(
        default=1,
        ge=1,
        description="Per-site invocation counter value, used for the DOM handle",
    )


# ---------------------------------------------------------------------------
# Normalized configuration
# ---------------------------------------------------------------------------

class SlideshowConfig(BaseModel):
    """Validated, defaulted configuration derived from a MacroInvocation.

    Build it through ``src.slideshow.attributes.normalize`` rather than
    directly; the normalizer enforces the ``orderby`` allow-list.
    """

    trans: str = DEFAULT_TRANSITION
    order: SortOrder = SortOrder.ASC
    orderby: str = DEFAULT_ORDERBY
    post_id: int = 0
    include: list[int] = Field(default_factory=list)
    exclude: list[int] = Field(default_factory=list)
    autostart: bool = True

    @property
    def post_parent(self) -> Optional[int]:
        """Parent restriction for the media query.

        An explicit include list wins over the implicit "attached to this
        document" restriction, so ``None`` (no restriction) is returned then.
        """
        if self.include:
            return None
        return self.post_id


# ---------------------------------------------------------------------------
# Slides
# ---------------------------------------------------------------------------

class Slide(BaseModel):
    """One image plus its display metadata.

    ``title``, ``alt`` and ``caption`` are already escaped for inclusion in an
    HTML attribute by the time a Slide is built.
    """

    src: str = Field(description="Full-size image URL")
    id: str = Field(description="Media item id as a string")
    title: str = ""
    alt: str = ""
    caption: str = ""


class RenderPayload(BaseModel):
    """Everything the markup renderer and the client script need."""

    selector: str = Field(description="Unique DOM handle, e.g. 'gallery-12-1'")
    gallery: list[Slide] = Field(default_factory=list)
    trans: str = DEFAULT_TRANSITION
    autostart: bool = True
    color: BackgroundColor = "black"

    @field_validator("trans")
    @classmethod
    def _trans_not_blank(cls, value: str) -> str:
        return value or DEFAULT_TRANSITION

    @property
    def element_id(self) -> str:
        return f"{self.selector}-slideshow"
