"""HTML text helpers shared by the host runtime and the slideshow renderer.

Two escaping flavours live here on purpose:

- ``escape_attr`` leaves existing entities alone (``&amp;`` stays ``&amp;``).
  Use it for single text values that may already be partially encoded.
- ``escape_html`` always re-encodes ``&`` (stdlib ``html.escape``).  Use it
  whenever the input is a machine-produced string that must decode back to
  exactly itself.
"""

import logging
import re
from html import escape
from urllib.parse import urlsplit

from lxml import html as lxml_html
from lxml.etree import ParserError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------

# A '&' that does not start a named, decimal or hex character reference.
_BARE_AMPERSAND = re.compile(r"&(?!(?:[a-zA-Z][a-zA-Z0-9]*|#[0-9]+|#[xX][0-9a-fA-F]+);)")


def check_invalid_utf8(text: str) -> str:
    """Replace lone surrogates so the text can always be encoded as UTF-8."""
    return text.encode("utf-8", errors="replace").decode("utf-8")


def escape_attr(text: str) -> str:
    """Escape text for an HTML attribute value without double-encoding.

    ``<``, ``>``, ``"`` and ``'`` are always escaped; ``&`` is escaped only
    when it is not already the start of a character reference.
    """
    if not text:
        return ""
    text = check_invalid_utf8(str(text))
    text = _BARE_AMPERSAND.sub("&amp;", text)
    return (
        text.replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def escape_html(text: str, quote: bool = True) -> str:
    """Escape every special character, re-encoding any existing entities."""
    return escape(check_invalid_utf8(str(text)), quote=quote)


# ---------------------------------------------------------------------------
# Tag stripping
# ---------------------------------------------------------------------------

def strip_tags(text: str) -> str:
    """Return the text content of an HTML fragment, dropping all markup.

    Character references are always decoded, with or without markup.
    """
    if not text:
        return ""
    try:
        fragment = lxml_html.fragment_fromstring(text, create_parent="div")
    except (ParserError, ValueError) as e:
        logger.debug(f"Could not parse HTML fragment, dropping it: {e}")
        return ""
    return fragment.text_content()


# ---------------------------------------------------------------------------
# Typography
# ---------------------------------------------------------------------------

# Tags whose content must never be rewritten.
_NO_TEXTURIZE_TAGS = ("pre", "code", "kbd", "style", "script", "tt")
_TAG_SPLIT = re.compile(r"(<[^>]*>)")
_TAG_NAME = re.compile(r"^</?\s*([a-zA-Z][a-zA-Z0-9]*)")

_STATIC_REPLACEMENTS = [
    ("---", "\N{EM DASH}"),
    (" -- ", " \N{EM DASH} "),
    ("--", "\N{EN DASH}"),
    (" - ", " \N{EN DASH} "),
    ("...", "\N{HORIZONTAL ELLIPSIS}"),
    ("``", "\N{LEFT DOUBLE QUOTATION MARK}"),
    ("''", "\N{RIGHT DOUBLE QUOTATION MARK}"),
    (" (tm)", " \N{TRADE MARK SIGN}"),
]

_DYNAMIC_REPLACEMENTS = [
    # '90s
    (re.compile(r"'(?=\d\d(?:s|\b))"), "\N{RIGHT SINGLE QUOTATION MARK}"),
    # opening quotes after start of text, whitespace or an opening bracket
    (re.compile(r"""(^|[\s(\[{"-])'"""), "\\1\N{LEFT SINGLE QUOTATION MARK}"),
    (re.compile(r'(^|[\s(\[{-])"(?=\S)'), "\\1\N{LEFT DOUBLE QUOTATION MARK}"),
    # 9" -> 9 double prime, 9' -> 9 prime
    (re.compile(r'(?<=\d)"(?!\w)'), "\N{DOUBLE PRIME}"),
    (re.compile(r"(?<=\d)'(?!\w)"), "\N{PRIME}"),
    # apostrophes and closing quotes
    (re.compile(r"'"), "\N{RIGHT SINGLE QUOTATION MARK}"),
    (re.compile(r'"'), "\N{RIGHT DOUBLE QUOTATION MARK}"),
    # 1920x1080
    (re.compile(r"\b(\d+)x(\d+)\b"), "\\1\N{MULTIPLICATION SIGN}\\2"),
]


def _texturize_text(segment: str) -> str:
    for old, new in _STATIC_REPLACEMENTS:
        segment = segment.replace(old, new)
    for pattern, repl in _DYNAMIC_REPLACEMENTS:
        segment = pattern.sub(repl, segment)
    return segment


def texturize(text: str) -> str:
    """Apply typographic substitutions (smart quotes, dashes, ellipses).

    Markup is passed through untouched, as is anything inside pre, code,
    kbd, style, script and tt elements.
    """
    if not text:
        return ""

    parts = _TAG_SPLIT.split(text)
    protected_depth = 0
    out: list[str] = []
    for part in parts:
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            match = _TAG_NAME.match(part)
            name = match.group(1).lower() if match else ""
            if name in _NO_TEXTURIZE_TAGS and not part.endswith("/>"):
                if part.startswith("</"):
                    protected_depth = max(0, protected_depth - 1)
                else:
                    protected_depth += 1
            out.append(part)
        elif protected_depth:
            out.append(part)
        else:
            out.append(_texturize_text(part))
    return "".join(out)


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

_ALLOWED_SCHEMES = {"http", "https"}


def clean_url(url: str) -> str:
    """Return ``url`` if it is safe to hand to a browser, else ``""``.

    Absolute http(s) URLs, protocol-relative URLs, root-relative paths and
    bare fragments or query strings are accepted.  Control characters are
    removed and spaces encoded first, so ``java\\tscript:`` tricks do not
    survive.
    """
    if not url:
        return ""
    url = re.sub(r"[\x00-\x1f\x7f]", "", url).strip().replace(" ", "%20")
    if url.startswith(("/", "#", "?")):
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if parts.scheme.lower() in _ALLOWED_SCHEMES and parts.netloc:
        return url
    return ""
