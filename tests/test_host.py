"""Tests for the host runtime: hooks, shortcodes, content store, assets."""

import json
import random

import pytest

from src.host.assets import AssetPipeline, Asset
from src.host.content_store import InMemoryContentStore, load_store
from src.host.gallery import gallery_shortcode
from src.host.hooks import HookRegistry
from src.host.shortcodes import (
    ShortcodeRegistry,
    is_default_handler,
    mark_default_handler,
    parse_shortcode_attrs,
)
from src.host.site import Site
from src.schemas.media_schema import MediaItem, MediaQuery
from src.schemas.slideshow_schema import SortOrder


def _items():
    return [
        MediaItem(id=1, parent_id=10, title="Charlie", menu_order=2, date="2024-01-03"),
        MediaItem(id=2, parent_id=10, title="alpha", menu_order=1, date="2024-01-01"),
        MediaItem(id=3, parent_id=10, title="Bravo", menu_order=1, date="2024-01-02"),
        MediaItem(id=4, parent_id=20, title="Delta", menu_order=0),
        MediaItem(id=5, parent_id=10, title="Doc", mime_type="application/pdf"),
        MediaItem(id=6, parent_id=10, title="Page", post_type="page"),
    ]


class TestHookRegistry:
    def test_priority_order(self):
        hooks = HookRegistry()
        hooks.add_filter("f", lambda v: v + "b", priority=20)
        hooks.add_filter("f", lambda v: v + "a", priority=10)
        hooks.add_filter("f", lambda v: v + "c", priority=20)
        assert hooks.apply_filters("f", "x") == "xabc"

    def test_accepted_args(self):
        hooks = HookRegistry()
        hooks.add_filter("f", lambda v: v.upper())
        hooks.add_filter("f", lambda v, suffix: v + suffix, accepted_args=2)
        assert hooks.apply_filters("f", "a", "!", "ignored") == "A!"

    def test_unknown_hook_returns_value(self):
        assert HookRegistry().apply_filters("nothing", 5) == 5

    def test_first_result_stops_at_first_output(self):
        hooks = HookRegistry()
        calls = []

        def empty(value):
            calls.append("empty")
            return value

        def first(value):
            calls.append("first")
            return "first"

        def second(value):
            calls.append("second")
            return "second"

        hooks.add_filter("out", empty, 1)
        hooks.add_filter("out", first, 2)
        hooks.add_filter("out", second, 3)
        assert hooks.first_result("out", "") == "first"
        assert calls == ["empty", "first"]

    def test_first_result_keeps_existing_value(self):
        hooks = HookRegistry()
        hooks.add_filter("out", lambda v: "replaced")
        assert hooks.first_result("out", "existing") == "existing"

    def test_remove_filter(self):
        hooks = HookRegistry()
        cb = lambda v: v + 1  # noqa: E731
        hooks.add_filter("f", cb)
        assert hooks.has_filter("f", cb)
        assert hooks.remove_filter("f", cb)
        assert not hooks.has_filter("f")
        assert hooks.apply_filters("f", 1) == 1

    def test_do_action(self):
        hooks = HookRegistry()
        seen = []
        hooks.add_action("init", seen.append)
        hooks.do_action("init", "site")
        assert seen == ["site"]

    def test_remove_action(self):
        hooks = HookRegistry()
        seen = []
        hooks.add_action("init", seen.append, 5)
        assert not hooks.remove_action("init", seen.append, priority=10)
        assert hooks.remove_action("init", seen.append, priority=5)
        hooks.do_action("init", "site")
        assert seen == []
        assert not hooks.has_action("init")


class TestShortcodeAttrs:
    def test_quoting_styles(self):
        attrs = parse_shortcode_attrs(' trans="fade" order=\'rand\' include=1,2 "quoted" bare')
        assert attrs == {
            "trans": "fade",
            "order": "rand",
            "include": "1,2",
            "0": "quoted",
            "1": "bare",
        }

    def test_keys_lowercased(self):
        assert parse_shortcode_attrs('TRANS="x"') == {"trans": "x"}

    def test_empty(self):
        assert parse_shortcode_attrs("") == {}


class TestShortcodeRegistry:
    def _registry(self):
        registry = ShortcodeRegistry()
        registry.add_shortcode("hello", lambda attrs, content, request: f"<b>{attrs.get('name', '')}</b>")
        registry.add_shortcode("wrap", lambda attrs, content, request: f"<i>{content}</i>")
        return registry

    def test_expand(self):
        out = self._registry().do_shortcode('Hi [hello name="Bob"]!')
        assert out == "Hi <b>Bob</b>!"

    def test_enclosing(self):
        assert self._registry().do_shortcode("[wrap]inner[/wrap]") == "<i>inner</i>"

    def test_escaped_tag(self):
        assert self._registry().do_shortcode("[[hello]]") == "[hello]"

    def test_unregistered_untouched(self):
        text = "[nope] and [hellothere] and [hello-world]"
        assert self._registry().do_shortcode(text) == text

    def test_request_passed_through(self):
        registry = ShortcodeRegistry()
        registry.add_shortcode("who", lambda attrs, content, request: str(request))
        assert registry.do_shortcode("[who]", request="req-1") == "req-1"

    def test_none_output(self):
        registry = ShortcodeRegistry()
        registry.add_shortcode("quiet", lambda attrs, content, request: None)
        assert registry.do_shortcode("a[quiet]b") == "ab"

    @pytest.mark.parametrize("tag", ["", "bad tag", "a/b", "x]"])
    def test_invalid_tag(self, tag):
        with pytest.raises(ValueError):
            ShortcodeRegistry().add_shortcode(tag, lambda *a: "")

    def test_default_marker(self):
        assert is_default_handler(gallery_shortcode)

        def wrapper(attrs, content, request):
            return gallery_shortcode(attrs, content, request)

        assert not is_default_handler(wrapper)
        assert not is_default_handler(None)
        assert is_default_handler(mark_default_handler(wrapper))


class TestContentStore:
    def test_filters_parent_and_mime(self):
        store = InMemoryContentStore(_items())
        found = store.query(MediaQuery(post_parent=10))
        assert [i.id for i in found] == [2, 3, 1]

    def test_no_parent_restriction(self):
        store = InMemoryContentStore(_items())
        found = store.query(MediaQuery(post_parent=None))
        assert {i.id for i in found} == {1, 2, 3, 4}

    def test_include_and_exclude(self):
        store = InMemoryContentStore(_items())
        assert [i.id for i in store.query(MediaQuery(include=[4, 1]))] == [4, 1]
        assert [i.id for i in store.query(MediaQuery(post_parent=10, exclude=[3]))] == [2, 1]

    def test_desc_order(self):
        store = InMemoryContentStore(_items())
        found = store.query(MediaQuery(post_parent=10, order=SortOrder.DESC, orderby="title"))
        assert [i.title for i in found] == ["Charlie", "Bravo", "alpha"]

    def test_clause_direction_overrides_query(self):
        store = InMemoryContentStore(_items())
        found = store.query(MediaQuery(post_parent=10, orderby="menu_order desc, id"))
        assert [i.id for i in found] == [1, 2, 3]

    def test_none_keeps_store_order(self):
        store = InMemoryContentStore(_items())
        found = store.query(MediaQuery(post_parent=10, orderby="none"))
        assert [i.id for i in found] == [1, 2, 3]

    def test_random_is_permutation(self):
        store = InMemoryContentStore(_items(), rng=random.Random(3))
        found = store.query(MediaQuery(post_parent=10, order=SortOrder.RAND, orderby="none"))
        assert sorted(i.id for i in found) == [1, 2, 3]

    def test_add_item(self):
        store = InMemoryContentStore(_items())
        store.add(MediaItem(id=7, parent_id=10, menu_order=0))
        found = store.query(MediaQuery(post_parent=10))
        assert [i.id for i in found] == [7, 2, 3, 1]

    def test_limit(self):
        store = InMemoryContentStore(_items())
        assert len(store.query(MediaQuery(post_parent=10, limit=2))) == 2

    def test_permalink(self):
        store = InMemoryContentStore(permalink_template="https://example.com/?p={id}")
        assert store.permalink(12) == "https://example.com/?p=12"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "media.yaml"
        path.write_text(
            "permalink_template: /posts/{id}\n"
            "media:\n"
            "  - id: 1\n"
            "    parent_id: 5\n"
            "    image_url: https://example.com/1.jpg\n"
        )
        store = load_store(path)
        assert store.items[0].image_url == "https://example.com/1.jpg"
        assert store.permalink(5) == "/posts/5"

    def test_load_json_list(self, tmp_path):
        path = tmp_path / "media.json"
        path.write_text(json.dumps([{"id": 7, "parent_id": 1}]))
        store = load_store(path)
        assert [i.id for i in store.items] == [7]

    def test_load_rejects_scalar(self, tmp_path):
        path = tmp_path / "media.yaml"
        path.write_text("just a string\n")
        with pytest.raises(ValueError):
            load_store(path)

    def test_load_rejects_unknown_format(self, tmp_path):
        path = tmp_path / "media.txt"
        path.write_text("[]")
        with pytest.raises(ValueError, match="Unsupported data file format"):
            load_store(path)


class TestAssetPipeline:
    def _pipeline(self):
        return AssetPipeline({"jquery": Asset("jquery", "/vendor/jquery.js")})

    def test_duplicate_enqueue_ignored(self):
        assets = self._pipeline()
        assets.enqueue_script("a", "/a.js")
        assets.enqueue_script("a", "/other.js")
        assert assets.scripts["a"].src == "/a.js"

    def test_dependency_order(self):
        assets = self._pipeline()
        assets.enqueue_script("app", "/app.js", ["lib"], "2", in_footer=True)
        assets.enqueue_script("lib", "/lib.js", ["jquery"], "1", in_footer=True)
        assets.localize_script("app", "appSettings", {"url": "</script>"})
        head = assets.render_head()
        footer = assets.render_footer()

        assert '<script src="/vendor/jquery.js"></script>' in head
        assert footer.index("/lib.js?ver=1") < footer.index("appSettings") < footer.index("/app.js?ver=2")
        assert "</script>\"" not in footer
        assert "<\\/script>" in footer

    def test_styles_in_head(self):
        assets = self._pipeline()
        assets.enqueue_style("theme", "/theme.css?x=1", version="3")
        head = assets.render_head()
        assert 'href="/theme.css?x=1&amp;ver=3"' in head
        assert 'id="theme-css"' in head

    def test_unknown_dependency_skipped(self):
        assets = AssetPipeline()
        assets.enqueue_script("app", "/app.js", ["missing"])
        assert "/app.js" in assets.render_head()


class TestSite:
    def test_gallery_registered_by_default(self):
        site = Site()
        assert site.shortcodes.get("gallery") is gallery_shortcode

    def test_boot_runs_init_once(self):
        site = Site()
        seen = []
        site.hooks.add_action("init", seen.append)
        site.boot()
        site.boot()
        assert seen == [site]

    def test_claim_is_per_scope(self):
        site = Site()
        assert site.claim("x")
        assert not site.claim("x")
        first, second = site.new_request(), site.new_request()
        assert first.claim("x")
        assert not first.claim("x")
        assert second.claim("x")

    def test_default_gallery_grid(self):
        site = Site(InMemoryContentStore(_items()))
        request = site.new_request(post_id=10)
        out = site.render_document('[gallery columns="2"]', request)
        assert out.startswith('<div id="gallery-1" class="gallery gallery-columns-2">')
        assert out.count("<figure") == 3

    def test_default_gallery_empty(self):
        site = Site(InMemoryContentStore(_items()))
        assert site.render_document("[gallery]", site.new_request(post_id=99)) == ""

    def test_gallery_types_default(self):
        assert Site().gallery_types() == {"default": "Thumbnail Grid"}
