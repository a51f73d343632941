"""Pydantic models for media items and content store queries."""

from typing import Optional

from pydantic import BaseModel, Field

from .slideshow_schema import SortOrder


class MediaItem(BaseModel):
    """A media record as returned by the content store."""

    id: int
    post_type: str = "attachment"
    mime_type: str = "image/jpeg"
    parent_id: Optional[int] = Field(
        default=None,
        description="Document the item is attached to, if any",
    )
    title: str = ""
    excerpt: str = Field(default="", description="Caption text, may contain HTML")
    image_url: str = Field(default="", description="Full-size image URL")
    alt_text: str = ""
    menu_order: int = 0
    date: str = Field(default="", description="ISO-8601 publish date")
    modified: str = ""
    name: str = Field(default="", description="URL slug")
    author: int = 0
    comment_count: int = 0


class MediaQuery(BaseModel):
    """Query sent to the content store.

    ``post_parent=None`` means "no parent restriction", which is distinct from
    restricting to a parent id.  An empty ``include`` list likewise means "no
    include restriction".  ``limit=None`` fetches every match.
    """

    post_type: str = "attachment"
    mime_type: str = "image"
    post_parent: Optional[int] = None
    include: list[int] = Field(default_factory=list)
    exclude: list[int] = Field(default_factory=list)
    order: SortOrder = SortOrder.ASC
    orderby: str = "menu_order, id"
    limit: Optional[int] = None
