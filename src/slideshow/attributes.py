"""Macro attribute normalization.

Turns the loose, untrusted ``[slideshow ...]`` attribute mapping into a
validated ``SlideshowConfig``.  Every malformed value degrades to its default
instead of raising, so a bad macro never breaks the surrounding document.
"""

import logging
import re
from typing import Mapping, Optional

from src.schemas.slideshow_schema import (
    DEFAULT_ORDERBY,
    DEFAULT_TRANSITION,
    MacroInvocation,
    SlideshowConfig,
    SortOrder,
)

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTES: dict[str, str] = {
    "trans": DEFAULT_TRANSITION,
    "order": "ASC",
    "orderby": DEFAULT_ORDERBY,
    "id": "",
    "include": "",
    "exclude": "",
    "autostart": "true",
}

# Columns a media query may be ordered by.
ORDERBY_COLUMNS = frozenset({
    "menu_order",
    "id",
    "date",
    "modified",
    "title",
    "name",
    "author",
    "parent",
    "mime_type",
    "comment_count",
    "rand",
    "none",
})

# Storage-level column names accepted as aliases.
COLUMN_ALIASES = {
    "post_date": "date",
    "post_modified": "modified",
    "post_title": "title",
    "post_name": "name",
    "post_author": "author",
    "post_parent": "parent",
    "post_mime_type": "mime_type",
}

_DIRECTIONS = frozenset({"asc", "desc"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})
_SEPARATORS = re.compile(r"[\s,]+")


def sanitize_orderby(value: Optional[str]) -> str:
    """Validate an orderby expression against the column allow-list.

    Accepts comma and/or whitespace separated column names, each optionally
    followed by ASC or DESC.  ``post_``-prefixed names (``post_date``,
    ``post_title``, ...) are read as their ORDERBY_COLUMNS equivalents.
    Returns the canonical form (lower-case clauses joined by ", "), or "" if
    any token is not allow-listed.

    >>> sanitize_orderby("menu_order ID")
    'menu_order, id'
    >>> sanitize_orderby("title DESC, date")
    'title desc, date'
    >>> sanitize_orderby("post_date DESC")
    'date desc'
    >>> sanitize_orderby("id; DROP TABLE posts")
    ''
    """
    if not value:
        return ""
    clauses: list[str] = []
    for token in _SEPARATORS.split(value.strip()):
        if not token:
            continue
        word = token.lower()
        word = COLUMN_ALIASES.get(word, word)
        if word in _DIRECTIONS:
            # A direction must follow a column that has none yet.
            if not clauses or " " in clauses[-1]:
                return ""
            clauses[-1] = f"{clauses[-1]} {word}"
        elif word in ORDERBY_COLUMNS:
            clauses.append(word)
        else:
            return ""
    return ", ".join(clauses)


def parse_id_list(value: Optional[str]) -> list[int]:
    """Parse "1, 2 3" into [1, 2, 3], dropping anything non-numeric."""
    if not value:
        return []
    ids = []
    for token in _SEPARATORS.split(str(value).strip()):
        if token.isdigit():
            ids.append(int(token))
    return ids


def parse_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None or not str(value).strip():
        return default
    return str(value).strip().lower() not in _FALSE_VALUES


def _parse_int(value: Optional[str]) -> int:
    match = re.match(r"\s*(\d+)", str(value or ""))
    return int(match.group(1)) if match else 0


def merge_attributes(raw: Optional[Mapping[str, str]], defaults: Mapping[str, str]) -> dict[str, str]:
    """Fill unset keys from ``defaults``; keys not in ``defaults`` are dropped."""
    supplied = {
        str(k).lower(): str(v)
        for k, v in (raw or {}).items()
        if v is not None
    }
    return {key: supplied.get(key, default) for key, default in defaults.items()}


def normalize(
    raw: Optional[Mapping[str, str]],
    defaults: Optional[Mapping[str, str]] = None,
) -> SlideshowConfig:
    """Build a SlideshowConfig from raw macro attributes.

    ``defaults`` overrides entries of DEFAULT_ATTRIBUTES; the host passes the
    current document id as ``{"id": ...}`` there.
    """
    attrs = merge_attributes(raw, {**DEFAULT_ATTRIBUTES, **(defaults or {})})

    order_value = attrs["order"].strip().lower()
    if order_value == "rand":
        order = SortOrder.RAND
        attrs["orderby"] = "none"
    elif order_value == "desc":
        order = SortOrder.DESC
    else:
        order = SortOrder.ASC

    orderby = sanitize_orderby(attrs["orderby"])
    if not orderby:
        logger.debug(f"Rejected orderby {attrs['orderby']!r}, using '{DEFAULT_ORDERBY}'")
        orderby = DEFAULT_ORDERBY

    return SlideshowConfig(
        trans=attrs["trans"].strip() or DEFAULT_TRANSITION,
        order=order,
        orderby=orderby,
        post_id=_parse_int(attrs["id"]),
        include=parse_id_list(attrs["include"]),
        exclude=parse_id_list(attrs["exclude"]),
        autostart=parse_bool(attrs["autostart"]),
    )


def normalize_invocation(invocation: MacroInvocation) -> SlideshowConfig:
    """Normalize an invocation, defaulting ``id`` to the enclosing document."""
    defaults = {"id": str(invocation.post_id or 0)}
    return normalize(invocation.attributes, defaults)
