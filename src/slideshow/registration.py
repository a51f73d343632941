"""Claim the ``[slideshow]`` macro and hook into ``[gallery type="slideshow"]``.

Usage::

    site = Site(store)
    register(site, settings)
    site.boot()

``SlideshowShortcode.resolve`` decides once per site what to take over:

- ``slideshow`` is bound only if no other handler owns the name.
- ``gallery`` output is intercepted only while the name is still bound to the
  host's stock handler (see ``mark_default_handler``).  A replacement gallery
  installed by someone else is left alone.
"""

import logging
from typing import Any, Optional

from src.host.gallery import GALLERY_OUTPUT_FILTER, GALLERY_TYPES_FILTER
from src.host.shortcodes import is_default_handler
from src.schemas.settings_schema import SlideshowSettings
from src.schemas.slideshow_schema import MacroInvocation, RenderPayload

from .attributes import normalize_invocation
from .renderer import render, request_assets
from .source import fetch_slides

logger = logging.getLogger(__name__)

PLUGIN_NAME = "slideshow"
REGISTRATION_CLAIM = "slideshow-registration"


class SlideshowShortcode:
    """The slideshow extension for one site."""

    tag = "slideshow"
    gallery_tag = "gallery"
    gallery_type = "slideshow"

    # Runs after every ordinary post_gallery filter.
    gallery_filter_priority = 1002
    gallery_types_priority = 10
    enqueue_priority = 1

    def __init__(self, site, settings: Optional[SlideshowSettings] = None) -> None:
        self.site = site
        self.settings = settings or SlideshowSettings()
        self.instance_count = 0
        self.resolved = False
        self.owns_shortcode = False
        self.intercepts_gallery = False
        self.needs_scripts = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def resolve(self) -> bool:
        """Register handlers and filters; returns whether scripts are needed.

        Safe to call repeatedly: only the first call on a site has any effect.
        """
        if self.resolved:
            return self.needs_scripts
        self.resolved = True
        if not self.site.claim(REGISTRATION_CLAIM):
            logger.debug("Slideshow already registered on this site")
            return False

        shortcodes = self.site.shortcodes
        hooks = self.site.hooks

        if self.tag not in shortcodes:
            shortcodes.add_shortcode(self.tag, self.shortcode_callback)
            self.owns_shortcode = True
            self.needs_scripts = True
        else:
            logger.info(f"[{self.tag}] is handled elsewhere; not registering")

        if is_default_handler(shortcodes.get(self.gallery_tag)):
            hooks.add_filter(GALLERY_OUTPUT_FILTER, self.post_gallery, self.gallery_filter_priority, 3)
            hooks.add_filter(GALLERY_TYPES_FILTER, self.add_gallery_type, self.gallery_types_priority)
            self.intercepts_gallery = True
            self.needs_scripts = True
        elif self.gallery_tag in shortcodes:
            logger.info(f"[{self.gallery_tag}] has been replaced; not intercepting it")

        if self.needs_scripts:
            hooks.add_action("enqueue_scripts", self.maybe_enqueue_scripts, self.enqueue_priority)

        return self.needs_scripts

    @classmethod
    def init(cls, site, settings: Optional[SlideshowSettings] = None) -> "SlideshowShortcode":
        instance = cls(site, settings)
        instance.resolve()
        site.plugins.setdefault(PLUGIN_NAME, instance)
        return instance

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def post_gallery(self, value: str, attr: Optional[dict[str, str]], request=None) -> str:
        """``post_gallery`` filter: render ``[gallery type="slideshow"]``.

        Output already produced by an earlier filter is passed through.
        """
        if value:
            return value
        if attr and attr.get("type") == self.gallery_type:
            return self.shortcode_callback(attr, None, request)
        return value

    def add_gallery_type(self, types: Optional[dict[str, str]] = None) -> dict[str, str]:
        types = dict(types or {})
        types[self.gallery_type] = self.settings.gallery_type_label
        return types

    def maybe_enqueue_scripts(self, request) -> None:
        """Listing pages that load more posts in place need the assets up front."""
        if request.is_home and self.site.current_theme_supports("infinite-scroll"):
            request_assets(request, self.settings, self.site.hooks)

    # ------------------------------------------------------------------
    # Macro handler
    # ------------------------------------------------------------------

    def shortcode_callback(
        self,
        attr: Optional[dict[str, Any]],
        content: Optional[str] = None,
        request=None,
    ) -> str:
        """Render one ``[slideshow]``. Returns "" when no images match."""
        if request is None:
            request = self.site.new_request()

        invocation = MacroInvocation(
            attributes={str(k): str(v) for k, v in (attr or {}).items() if v is not None},
            post_id=request.post_id,
            instance=self.instance_count + 1,
        )
        config = normalize_invocation(invocation)

        slides = fetch_slides(config, self.site.store, self.site.hooks)
        if not slides:
            logger.debug(f"No images for slideshow in post {config.post_id}")
            return ""
        self.instance_count = invocation.instance

        payload = RenderPayload(
            selector=f"gallery-{config.post_id}-{invocation.instance}",
            gallery=slides,
            trans=config.trans,
            autostart=config.autostart,
            color=self.settings.background_color,
        )

        permalink = ""
        if request.is_feed:
            permalink = self.site.store.permalink(request.post_id or config.post_id)
        return render(payload, request, self.settings, self.site.hooks, permalink)


def register(site, settings: Optional[SlideshowSettings] = None) -> None:
    """Arrange for the slideshow to initialize when ``site`` boots."""
    site.hooks.add_action("init", lambda booted_site: SlideshowShortcode.init(booted_site, settings))
