from .assets import Asset, AssetPipeline
from .content_store import ContentStore, ContentStoreError, InMemoryContentStore, load_store
from .gallery import gallery_shortcode
from .hooks import Hook, HookRegistry
from .shortcodes import (
    ShortcodeRegistry,
    is_default_handler,
    mark_default_handler,
    parse_shortcode_attrs,
)
from .site import RequestContext, Site

__all__ = [
    "Asset",
    "AssetPipeline",
    "ContentStore",
    "ContentStoreError",
    "InMemoryContentStore",
    "load_store",
    "gallery_shortcode",
    "Hook",
    "HookRegistry",
    "ShortcodeRegistry",
    "is_default_handler",
    "mark_default_handler",
    "parse_shortcode_attrs",
    "RequestContext",
    "Site",
]
