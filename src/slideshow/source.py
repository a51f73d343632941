"""Resolve a SlideshowConfig into an ordered list of slides."""

import logging
from typing import Optional

from src.host.content_store import ContentStore
from src.host.hooks import HookRegistry
from src.schemas.media_schema import MediaItem, MediaQuery
from src.schemas.slideshow_schema import Slide, SlideshowConfig
from src.utils.html_utils import clean_url, escape_attr, strip_tags, texturize

logger = logging.getLogger(__name__)

# Filter applied to every caption: (caption, item_id) -> caption
CAPTION_FILTER = "slideshow_slide_caption"


def build_query(config: SlideshowConfig) -> MediaQuery:
    """All image attachments selected by ``config``, unpaginated."""
    return MediaQuery(
        post_type="attachment",
        mime_type="image",
        post_parent=config.post_parent,
        include=config.include,
        exclude=config.exclude,
        order=config.order,
        orderby=config.orderby,
        limit=None,
    )


def to_slide(item: MediaItem, hooks: Optional[HookRegistry] = None) -> Slide:
    """Map a media item to a Slide, escaping each text field on its own."""
    caption = texturize(strip_tags(item.excerpt))
    if hooks is not None:
        caption = hooks.apply_filters(CAPTION_FILTER, caption, item.id)

    return Slide(
        src=clean_url(item.image_url),
        id=str(item.id),
        title=escape_attr(item.title),
        alt=escape_attr(item.alt_text),
        caption=escape_attr(caption or ""),
    )


def fetch_slides(
    config: SlideshowConfig,
    store: ContentStore,
    hooks: Optional[HookRegistry] = None,
) -> list[Slide]:
    """Query ``store`` and return the slides in playback order.

    A failing store is treated like one with no matching media.
    """
    query = build_query(config)
    try:
        items = store.query(query)
    except Exception as e:
        logger.warning(f"Media query failed, rendering no slideshow: {e}")
        return []

    slides = [to_slide(item, hooks) for item in items]
    logger.debug(f"Resolved {len(slides)} slide(s) for post {config.post_id}")
    return slides
