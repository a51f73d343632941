"""The host's stock ``[gallery]`` macro.

Renders attached images as a plain thumbnail grid.  Before doing any work it
offers the ``post_gallery`` filter a chance to produce the output instead;
the first filter returning a non-empty string wins.
"""

import logging
from typing import Optional

from src.schemas.media_schema import MediaQuery
from src.schemas.slideshow_schema import SortOrder
from src.utils.html_utils import clean_url, escape_attr, escape_html, strip_tags

from .shortcodes import mark_default_handler

logger = logging.getLogger(__name__)

GALLERY_OUTPUT_FILTER = "post_gallery"
GALLERY_TYPES_FILTER = "gallery_types"


def _int_list(value: str) -> list[int]:
    return [int(p) for p in value.replace(",", " ").split() if p.isdigit()]


@mark_default_handler
def gallery_shortcode(attrs: dict[str, str], content: Optional[str], request) -> str:
    """Default gallery handler: a grid of figures."""
    attrs = attrs or {}
    if request is None:
        logger.warning("[gallery] expanded without a request context, rendering nothing")
        return ""
    site = request.site

    output = site.hooks.first_result(GALLERY_OUTPUT_FILTER, "", attrs, request)
    if output:
        return output

    include = _int_list(attrs.get("include", ""))
    order = attrs.get("order", "ASC").upper()
    try:
        parent = int(attrs.get("id") or request.post_id or 0)
    except ValueError:
        parent = request.post_id or 0
    try:
        columns = max(1, int(attrs.get("columns", 3)))
    except ValueError:
        columns = 3

    query = MediaQuery(
        post_parent=None if include else parent,
        include=include,
        exclude=_int_list(attrs.get("exclude", "")),
        order=SortOrder.DESC if order == "DESC" else SortOrder.ASC,
    )
    items = site.store.query(query)
    if not items:
        return ""

    instance = site.next_instance("gallery")
    parts = [f'<div id="gallery-{instance}" class="gallery gallery-columns-{columns}">']
    for item in items:
        caption = strip_tags(item.excerpt)
        parts.append('<figure class="gallery-item">')
        parts.append(
            f'<img src="{escape_attr(clean_url(item.image_url))}" '
            f'alt="{escape_attr(item.alt_text)}" title="{escape_attr(item.title)}">'
        )
        if caption:
            parts.append(f'<figcaption class="gallery-caption">{escape_html(caption, quote=False)}</figcaption>')
        parts.append("</figure>")
    parts.append("</div>")
    return "\n".join(parts)
