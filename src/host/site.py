"""Process- and response-scoped host state.

``Site`` lives for the whole process: it owns the hook and shortcode
registries, the content store, and one-time decisions made at boot.
``RequestContext`` lives for one response: it carries the view flags (feed,
home, right-to-left), the current document, and the asset queue.  A fresh
RequestContext is created per response, so nothing response-scoped leaks
between requests.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from src.utils.html_utils import escape_html

from .assets import Asset, AssetPipeline
from .content_store import ContentStore, InMemoryContentStore
from .gallery import GALLERY_TYPES_FILTER, gallery_shortcode
from .hooks import HookRegistry
from .shortcodes import ShortcodeRegistry

logger = logging.getLogger(__name__)

DEFAULT_VENDOR_SCRIPTS = {
    "jquery": "/static/vendor/jquery.min.js",
}


@dataclass
class RequestContext:
    """State for rendering one response."""

    site: "Site"
    post_id: Optional[int] = None
    is_feed: bool = False
    is_home: bool = False
    is_rtl: bool = False
    assets: AssetPipeline = field(default_factory=AssetPipeline)
    _claimed: set[str] = field(default_factory=set, init=False, repr=False)

    def claim(self, key: str) -> bool:
        """Return True the first time ``key`` is claimed in this response."""
        if key in self._claimed:
            return False
        self._claimed.add(key)
        return True


class Site:
    """Process-wide host runtime."""

    def __init__(
        self,
        store: Optional[ContentStore] = None,
        theme_supports: Iterable[str] = (),
        vendor_scripts: Optional[dict[str, str]] = None,
    ) -> None:
        self.store: ContentStore = store or InMemoryContentStore()
        self.hooks = HookRegistry()
        self.shortcodes = ShortcodeRegistry()
        self.theme_supports: set[str] = set(theme_supports)
        self.vendor_scripts = dict(DEFAULT_VENDOR_SCRIPTS if vendor_scripts is None else vendor_scripts)
        self.plugins: dict[str, Any] = {}
        self.booted = False
        self._claimed: set[str] = set()
        self._instances: dict[str, int] = {}

        self.shortcodes.add_shortcode("gallery", gallery_shortcode)

    # ------------------------------------------------------------------
    # Process-scoped state
    # ------------------------------------------------------------------

    def claim(self, key: str) -> bool:
        """Return True the first time ``key`` is claimed in this process."""
        if key in self._claimed:
            return False
        self._claimed.add(key)
        return True

    def next_instance(self, name: str) -> int:
        self._instances[name] = self._instances.get(name, 0) + 1
        return self._instances[name]

    def current_theme_supports(self, feature: str) -> bool:
        return feature in self.theme_supports

    def boot(self) -> "Site":
        """Run the ``init`` action once so extensions can register themselves."""
        if self.booted:
            return self
        self.booted = True
        self.hooks.do_action("init", self)
        logger.debug(f"Site booted with shortcodes: {', '.join(self.shortcodes.tags)}")
        return self

    def gallery_types(self) -> dict[str, str]:
        """Gallery display types offered to authors."""
        return self.hooks.apply_filters(GALLERY_TYPES_FILTER, {"default": "Thumbnail Grid"})

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def new_request(
        self,
        post_id: Optional[int] = None,
        is_feed: bool = False,
        is_home: bool = False,
        is_rtl: bool = False,
    ) -> RequestContext:
        registered = {
            handle: Asset(handle, src) for handle, src in self.vendor_scripts.items()
        }
        return RequestContext(
            site=self,
            post_id=post_id,
            is_feed=is_feed,
            is_home=is_home,
            is_rtl=is_rtl,
            assets=AssetPipeline(registered),
        )

    def render_document(self, body: str, request: RequestContext) -> str:
        """Expand every macro in a document body."""
        return self.shortcodes.do_shortcode(body, request)

    def render_page(self, body: str, request: RequestContext, title: str = "") -> str:
        """Render a full HTML page around a document body, assets included."""
        self.hooks.do_action("enqueue_scripts", request)
        content = self.render_document(body, request)
        direction = ' dir="rtl"' if request.is_rtl else ""
        head = request.assets.render_head()
        footer = request.assets.render_footer()
        return (
            f"<!DOCTYPE html>\n<html{direction}>\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{escape_html(title)}</title>\n{head}\n</head>\n<body>\n{content}\n{footer}\n</body>\n</html>\n"
        )
