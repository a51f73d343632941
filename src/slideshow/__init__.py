"""Image slideshow macro.

Pipeline per invocation: attributes -> source -> serializer -> renderer.
``registration`` wires the pipeline into a host Site.
"""

from .attributes import DEFAULT_ATTRIBUTES, normalize, normalize_invocation, sanitize_orderby
from .registration import SlideshowShortcode, register
from .renderer import render, request_assets
from .serializer import encode_gallery, escape_attr_value, serialize
from .source import CAPTION_FILTER, fetch_slides

__all__ = [
    "DEFAULT_ATTRIBUTES",
    "normalize",
    "normalize_invocation",
    "sanitize_orderby",
    "SlideshowShortcode",
    "register",
    "render",
    "request_assets",
    "encode_gallery",
    "escape_attr_value",
    "serialize",
    "CAPTION_FILTER",
    "fetch_slides",
]
