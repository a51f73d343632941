"""Slideshow markup and client asset requests.

The rendered widget is an empty container the client script fills in::

    <p class="jetpack-slideshow-noscript robots-nocontent">...</p>
    <div id="gallery-12-1-slideshow"
         class="slideshow-window jetpack-slideshow slideshow-black"
         data-trans="fade" data-autostart="true" data-gallery="[...]"></div>

``data-trans``, ``data-autostart``, ``data-gallery``, the ``-slideshow`` id
suffix and the ``slideshow-<color>`` class are the contract with the client
script and must not change.
"""

import logging
from typing import Optional

from src.host.hooks import HookRegistry
from src.schemas.settings_schema import SlideshowSettings
from src.schemas.slideshow_schema import RenderPayload
from src.utils.html_utils import clean_url, escape_attr, escape_html

from .serializer import serialize

logger = logging.getLogger(__name__)

ASSETS_CLAIM = "slideshow-assets"
JS_SETTINGS_FILTER = "slideshow_js_settings"
JS_SETTINGS_OBJECT = "jetpackSlideshowSettings"

CYCLE_HANDLE = "jquery-cycle"
SCRIPT_HANDLE = "jetpack-slideshow"
STYLE_HANDLE = "jetpack-slideshow"


def request_assets(request, settings: SlideshowSettings, hooks: Optional[HookRegistry] = None) -> bool:
    """Enqueue the slideshow script, stylesheet and client settings.

    Runs at most once per response; returns False when the assets were
    already requested.
    """
    if not request.claim(ASSETS_CLAIM):
        return False

    assets = request.assets
    assets.enqueue_script(
        CYCLE_HANDLE,
        settings.asset_url("js/jquery.cycle.js"),
        ["jquery"],
        settings.cycle_version,
        in_footer=True,
    )
    assets.enqueue_script(
        SCRIPT_HANDLE,
        settings.asset_url("js/slideshow-shortcode.js"),
        [CYCLE_HANDLE],
        settings.script_version,
        in_footer=True,
    )
    if request.is_rtl:
        assets.enqueue_style(STYLE_HANDLE, settings.asset_url("css/rtl/slideshow-shortcode-rtl.css"))
    else:
        assets.enqueue_style(STYLE_HANDLE, settings.asset_url("css/slideshow-shortcode.css"))

    js_settings = {"spinner": settings.spinner_url_resolved}
    if hooks is not None:
        js_settings = hooks.apply_filters(JS_SETTINGS_FILTER, js_settings)
    assets.localize_script(SCRIPT_HANDLE, JS_SETTINGS_OBJECT, js_settings)

    logger.debug("Slideshow assets requested")
    return True


def render_feed_link(payload: RenderPayload, permalink: str, settings: SlideshowSettings) -> str:
    """Plain link to the slideshow, for feed readers that cannot run scripts."""
    href = clean_url(f"{permalink}#{payload.element_id}")
    return f'<a href="{escape_attr(href)}">{escape_html(settings.feed_link_text)}</a>'


def render_widget(payload: RenderPayload, settings: SlideshowSettings) -> str:
    """Noscript notice plus the data-carrying container element."""
    notice = (
        '<p class="jetpack-slideshow-noscript robots-nocontent">'
        f"{escape_html(settings.noscript_text)}</p>"
    )
    container = (
        f'<div id="{escape_attr(payload.element_id)}" '
        f'class="slideshow-window jetpack-slideshow slideshow-{escape_attr(payload.color)}" '
        f'data-trans="{escape_attr(payload.trans)}" '
        f'data-autostart="{"true" if payload.autostart else "false"}" '
        f'data-gallery="{serialize(payload)}"></div>'
    )
    return notice + container


def render(
    payload: RenderPayload,
    request,
    settings: SlideshowSettings,
    hooks: Optional[HookRegistry] = None,
    permalink: str = "",
) -> str:
    """Markup for one slideshow, or "" when there is nothing to show."""
    if not payload.gallery:
        return ""

    if request.is_feed:
        return render_feed_link(payload, permalink, settings)

    request_assets(request, settings, hooks)
    return render_widget(payload, settings)
