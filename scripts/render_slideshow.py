#!/usr/bin/env python3
"""Render a document containing [slideshow] / [gallery] macros to HTML.

Media comes from a YAML or JSON fixture; the slideshow settings from YAML.

Usage:
    # Fragment only (what a page template would embed):
    python scripts/render_slideshow.py samples/post.md --media samples/media.yaml --post-id 12

    # Full page with script and stylesheet tags, written to a file:
    python scripts/render_slideshow.py samples/post.md --media samples/media.yaml \
        --settings config/slideshow.yaml --post-id 12 --page -o workspace/post.html

    # Feed rendering (link instead of widget):
    python scripts/render_slideshow.py samples/post.md --media samples/media.yaml --post-id 12 --feed
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.host.content_store import load_store
from src.host.site import Site
from src.schemas.settings_schema import SlideshowSettings
from src.slideshow.registration import register
from src.utils.file_utils import write_text


def main():
    parser = argparse.ArgumentParser(description="Expand slideshow macros in a document")
    parser.add_argument("document", type=Path, help="Text/markdown file containing macros")
    parser.add_argument("--media", type=Path, required=True,
                        help="Media fixture (.yaml/.yml/.json)")
    parser.add_argument("--settings", type=Path, default=None,
                        help="Slideshow settings YAML (default: built-in defaults)")
    parser.add_argument("--post-id", type=int, default=None,
                        help="Id of the document the macros appear in")
    parser.add_argument("--feed", action="store_true", help="Render as a syndication feed")
    parser.add_argument("--home", action="store_true", help="Render as the home/listing view")
    parser.add_argument("--rtl", action="store_true", help="Right-to-left page")
    parser.add_argument("--infinite-scroll", action="store_true",
                        help="Theme supports infinite scroll")
    parser.add_argument("--page", action="store_true",
                        help="Wrap output in a full HTML page with asset tags")
    parser.add_argument("--list-gallery-types", action="store_true",
                        help="Print the available gallery types and exit")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output HTML path (default: stdout)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate inputs
    if not args.document.exists():
        print(f"Error: Document not found: {args.document}", file=sys.stderr)
        sys.exit(1)

    if not args.media.exists():
        print(f"Error: Media fixture not found: {args.media}", file=sys.stderr)
        sys.exit(1)

    if args.settings and not args.settings.exists():
        print(f"Error: Settings file not found: {args.settings}", file=sys.stderr)
        sys.exit(1)

    settings = SlideshowSettings.from_yaml(args.settings) if args.settings else SlideshowSettings()
    store = load_store(args.media)

    theme_supports = ["infinite-scroll"] if args.infinite_scroll else []
    site = Site(store, theme_supports=theme_supports)
    register(site, settings)
    site.boot()

    if args.list_gallery_types:
        for key, label in site.gallery_types().items():
            print(f"{key}\t{label}")
        return

    request = site.new_request(
        post_id=args.post_id,
        is_feed=args.feed,
        is_home=args.home,
        is_rtl=args.rtl,
    )
    body = args.document.read_text(encoding="utf-8")

    if args.page:
        html = site.render_page(body, request, title=args.document.stem)
    else:
        html = site.render_document(body, request)

    if args.output:
        write_text(html, args.output)
        print(f"Rendered: {args.output}")
    else:
        sys.stdout.write(html)


if __name__ == "__main__":
    main()
