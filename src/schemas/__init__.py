from .slideshow_schema import (
    DEFAULT_ORDERBY, DEFAULT_TRANSITION, BackgroundColor, SortOrder,
    MacroInvocation, SlideshowConfig, Slide, RenderPayload,
)
from .media_schema import MediaItem, MediaQuery
from .settings_schema import SlideshowSettings

__all__ = [
    "DEFAULT_ORDERBY",
    "DEFAULT_TRANSITION",
    "BackgroundColor",
    "SortOrder",
    "MacroInvocation",
    "SlideshowConfig",
    "Slide",
    "RenderPayload",
    "MediaItem",
    "MediaQuery",
    "SlideshowSettings",
]
