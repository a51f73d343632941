"""Macro (shortcode) registry and expansion.

Document bodies may contain macros such as::

    [slideshow trans="scrollHorz" order="rand"]
    [gallery type="slideshow" include="4,5,6"]
    [caption]Some text[/caption]

``ShortcodeRegistry.do_shortcode`` replaces every occurrence of a registered
tag with the output of its handler.  Unregistered tags are left alone, and a
doubled bracket (``[[slideshow]]``) escapes a tag so it prints literally.

Handlers are called as ``handler(attrs, content, request)`` and return a
string (``None`` is treated as empty output).  ``request`` is ``None`` when
``do_shortcode`` is called without one.
"""

import logging
import re
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ShortcodeHandler = Callable[[dict[str, str], Optional[str], Any], Optional[str]]

DEFAULT_HANDLER_ATTR = "__default_handler__"

_INVALID_TAG_CHARS = re.compile(r"[<>&/\[\]\x00-\x20=]")

_ATTR_PATTERN = re.compile(
    r"""([\w-]+)\s*=\s*"([^"]*)"(?:\s|$)"""
    r"""|([\w-]+)\s*=\s*'([^']*)'(?:\s|$)"""
    r"""|([\w-]+)\s*=\s*([^\s'"]+)(?:\s|$)"""
    r"""|"([^"]*)"(?:\s|$)"""
    r"""|'([^']*)'(?:\s|$)"""
    r"""|(\S+)(?:\s|$)"""
)


# ---------------------------------------------------------------------------
# Default-handler marker
# ---------------------------------------------------------------------------

def mark_default_handler(handler: Callable) -> Callable:
    """Tag ``handler`` as the host's stock implementation of a macro.

    Extensions may only intercept a macro whose handler still carries the
    mark.  Wrapping or replacing the handler drops it.
    """
    setattr(handler, DEFAULT_HANDLER_ATTR, True)
    return handler


def is_default_handler(handler: Optional[Callable]) -> bool:
    return getattr(handler, DEFAULT_HANDLER_ATTR, False) is True


# ---------------------------------------------------------------------------
# Attribute parsing
# ---------------------------------------------------------------------------

def parse_shortcode_attrs(text: str) -> dict[str, str]:
    """Parse the attribute part of a macro tag.

    Named attributes may be double-quoted, single-quoted or bare; keys are
    lower-cased.  Positional values are stored under their index ("0", "1",
    ...).
    """
    attrs: dict[str, str] = {}
    text = text.replace("\N{NO-BREAK SPACE}", " ").replace("\N{ZERO WIDTH SPACE}", " ")
    positional = 0
    for match in _ATTR_PATTERN.finditer(text):
        groups = match.groups()
        if groups[0] is not None:
            attrs[groups[0].lower()] = groups[1]
        elif groups[2] is not None:
            attrs[groups[2].lower()] = groups[3]
        elif groups[4] is not None:
            attrs[groups[4].lower()] = groups[5]
        else:
            value = next(g for g in groups[6:] if g is not None)
            attrs[str(positional)] = value
            positional += 1
    return attrs


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class ShortcodeRegistry:
    """Mapping of macro names to handlers for one site."""

    def __init__(self) -> None:
        self._tags: dict[str, ShortcodeHandler] = {}

    def add_shortcode(self, tag: str, handler: ShortcodeHandler) -> None:
        """Bind ``handler`` to ``tag``, replacing any existing binding."""
        if not tag or not tag.strip():
            raise ValueError("Shortcode tag must not be empty")
        if _INVALID_TAG_CHARS.search(tag):
            raise ValueError(f"Invalid shortcode tag '{tag}'")
        if tag in self._tags:
            logger.debug(f"Rebinding shortcode '{tag}'")
        self._tags[tag] = handler

    def remove_shortcode(self, tag: str) -> None:
        self._tags.pop(tag, None)

    def get(self, tag: str) -> Optional[ShortcodeHandler]:
        return self._tags.get(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self._tags

    @property
    def tags(self) -> list[str]:
        return list(self._tags)

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def _pattern(self, names: list[str]) -> re.Pattern:
        alternation = "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True))
        return re.compile(
            r"\[(\[?)"                              # 1: escaping [
            rf"({alternation})"                     # 2: tag name
            r"(?![\w-])"
            r"([^\]/]*(?:/(?!\])[^\]/]*)*?)"        # 3: attributes
            r"(?:(/)\]"                             # 4: self-closing
            r"|\](?:([^\[]*(?:\[(?!/\2\])[^\[]*)*)" # 5: enclosed content
            r"(\[/\2\]))?)"                         # 6: closing tag
            r"(\]?)",                               # 7: escaping ]
            re.DOTALL,
        )

    def do_shortcode(self, content: str, request: Any = None) -> str:
        """Expand every registered macro in ``content``."""
        if not content or "[" not in content or not self._tags:
            return content
        names = [name for name in self._tags if f"[{name}" in content]
        if not names:
            return content

        def expand(match: re.Match) -> str:
            if match.group(1) == "[" and match.group(7) == "]":
                return match.group(0)[1:-1]
            tag = match.group(2)
            handler = self._tags.get(tag)
            if handler is None:
                return match.group(0)
            attrs = parse_shortcode_attrs(match.group(3))
            inner = match.group(5) if match.group(6) else None
            output = handler(attrs, inner, request)
            return match.group(1) + (output or "") + match.group(7)

        return self._pattern(names).sub(expand, content)
