"""Per-response script and stylesheet queue.

Extensions enqueue assets while a page renders; the page template then asks
the pipeline for the tags to emit in the head and before the closing body.
Enqueuing the same handle twice is ignored.  Dependencies are emitted before
the assets that need them, pulling in registered-but-not-enqueued handles
(e.g. ``jquery``) on demand.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from src.utils.html_utils import escape_attr

logger = logging.getLogger(__name__)


@dataclass
class Asset:
    """A script or stylesheet known to the pipeline."""

    handle: str
    src: str
    kind: Literal["script", "style"] = "script"
    deps: list[str] = field(default_factory=list)
    version: Optional[str] = None
    in_footer: bool = False
    media: str = "all"

    @property
    def url(self) -> str:
        if not self.version:
            return self.src
        sep = "&" if "?" in self.src else "?"
        return f"{self.src}{sep}ver={self.version}"


class AssetPipeline:
    """Queue of assets requested while rendering one response."""

    def __init__(self, registered: Optional[dict[str, Asset]] = None) -> None:
        self.registered: dict[str, Asset] = dict(registered or {})
        self.scripts: dict[str, Asset] = {}
        self.styles: dict[str, Asset] = {}
        self.script_data: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def enqueue_script(
        self,
        handle: str,
        src: str,
        deps: Optional[list[str]] = None,
        version: Optional[str] = None,
        in_footer: bool = False,
    ) -> None:
        if handle in self.scripts:
            logger.debug(f"Script '{handle}' already enqueued")
            return
        self.scripts[handle] = Asset(handle, src, "script", list(deps or []), version, in_footer)

    def enqueue_style(
        self,
        handle: str,
        src: str,
        deps: Optional[list[str]] = None,
        version: Optional[str] = None,
        media: str = "all",
    ) -> None:
        if handle in self.styles:
            logger.debug(f"Style '{handle}' already enqueued")
            return
        self.styles[handle] = Asset(handle, src, "style", list(deps or []), version, media=media)

    def localize_script(self, handle: str, object_name: str, data: dict[str, Any]) -> None:
        """Expose ``data`` to the client as a global ``object_name`` before ``handle`` runs."""
        self.script_data.setdefault(handle, {})[object_name] = data

    def is_enqueued(self, handle: str, kind: Literal["script", "style"] = "script") -> bool:
        queue = self.scripts if kind == "script" else self.styles
        return handle in queue

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _resolve(self, queue: dict[str, Asset]) -> list[Asset]:
        """Dependency-ordered list of assets to print."""
        ordered: list[Asset] = []
        seen: set[str] = set()

        def visit(handle: str, trail: tuple[str, ...]) -> None:
            if handle in seen or handle in trail:
                return
            asset = queue.get(handle) or self.registered.get(handle)
            if asset is None:
                logger.warning(f"Unknown asset dependency '{handle}', skipping")
                return
            for dep in asset.deps:
                visit(dep, trail + (handle,))
            seen.add(handle)
            ordered.append(asset)

        for handle in queue:
            visit(handle, ())
        return ordered

    def _script_tags(self, assets: list[Asset]) -> list[str]:
        tags = []
        for asset in assets:
            for name, data in self.script_data.get(asset.handle, {}).items():
                payload = json.dumps(data).replace("</", "<\\/")
                tags.append(f"<script>var {name} = {payload};</script>")
            tags.append(f'<script src="{escape_attr(asset.url)}"></script>')
        return tags

    def render_head(self) -> str:
        """Stylesheet links and header scripts."""
        tags = [
            f'<link rel="stylesheet" id="{escape_attr(a.handle)}-css" '
            f'href="{escape_attr(a.url)}" media="{escape_attr(a.media)}">'
            for a in self._resolve(self.styles)
        ]
        scripts = [a for a in self._resolve(self.scripts) if not a.in_footer]
        tags.extend(self._script_tags(scripts))
        return "\n".join(tags)

    def render_footer(self) -> str:
        """Scripts queued for the end of the body."""
        scripts = [a for a in self._resolve(self.scripts) if a.in_footer]
        return "\n".join(self._script_tags(scripts))
