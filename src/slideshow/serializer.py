"""Serialize a slide list for embedding in a double-quoted HTML attribute.

Two independent steps:

1. ``encode_gallery`` turns the slides into JSON.  With ``hex_escape`` it also
   rewrites ``< > & ' "`` inside strings as JSON unicode escapes, so the JSON
   itself contains none of those characters.  Without it they stay raw.
2. ``escape_attr_value`` HTML-escapes the result, *always* re-encoding ``&``
   even when it already starts an entity.

Slide text fields arrive attribute-escaped (``&quot;`` and friends).  If
step 2 skipped entities, a JSON string holding ``&quot;`` would reach the
browser as a bare ``"`` and break the payload.  Re-encoding every ``&`` makes
``html.unescape(step2(x)) == x`` hold for any ``x``, whichever encoder variant
produced it.
"""

import json
import re
from typing import Iterable

from src.schemas.slideshow_schema import RenderPayload, Slide
from src.utils.html_utils import check_invalid_utf8, escape_html

# A JSON escape sequence (consumed whole) or a character to hex-escape.
_ESCAPE_OR_SPECIAL = re.compile(r"""\\(.)|([<>&'])""", re.DOTALL)


def _hex_escape(match: re.Match) -> str:
    escaped, special = match.groups()
    if escaped is not None:
        return "\\u0022" if escaped == '"' else match.group(0)
    return "\\u%04X" % ord(special)


def hex_escape_json(encoded: str) -> str:
    """Rewrite ``< > & ' "`` inside JSON strings as unicode escapes."""
    return _ESCAPE_OR_SPECIAL.sub(_hex_escape, encoded)


def encode_gallery(slides: Iterable[Slide], hex_escape: bool = True) -> str:
    """JSON-encode slides in playback order."""
    data = [slide.model_dump() for slide in slides]
    encoded = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    if hex_escape:
        encoded = hex_escape_json(encoded)
    return encoded


def escape_attr_value(text: str) -> str:
    """Escape ``& < > " '`` for a double-quoted attribute, double-encoding ``&``."""
    return escape_html(check_invalid_utf8(text), quote=True)


def serialize(payload: RenderPayload, hex_escape: bool = True) -> str:
    """Attribute-safe ``data-gallery`` value for ``payload``."""
    return escape_attr_value(encode_gallery(payload.gallery, hex_escape=hex_escape))
