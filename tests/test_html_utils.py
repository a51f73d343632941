"""Tests for HTML text helpers."""

import pytest

from src.utils.html_utils import (
    check_invalid_utf8,
    clean_url,
    escape_attr,
    escape_html,
    strip_tags,
    texturize,
)


class TestEscaping:
    def test_escape_attr_specials(self):
        assert escape_attr('<a title="x">it\'s</a>') == "&lt;a title=&quot;x&quot;&gt;it&#x27;s&lt;/a&gt;"

    def test_escape_attr_keeps_entities(self):
        assert escape_attr("Tom &amp; Jerry &#8211; &#x2014; & more") == (
            "Tom &amp; Jerry &#8211; &#x2014; &amp; more"
        )

    def test_escape_attr_empty(self):
        assert escape_attr("") == ""
        assert escape_attr(None) == ""

    def test_escape_html_reencodes(self):
        assert escape_html("&amp;") == "&amp;amp;"
        assert escape_html("'", quote=False) == "'"

    def test_invalid_utf8_replaced(self):
        assert check_invalid_utf8("ok\ud800") == "ok?"


class TestStripTags:
    def test_removes_markup(self):
        assert strip_tags("A <strong>bold</strong> <a href='#'>move</a>") == "A bold move"

    def test_plain_text_unchanged(self):
        assert strip_tags("no tags & fine") == "no tags & fine"

    def test_empty(self):
        assert strip_tags("") == ""

    def test_entities_decoded_with_or_without_markup(self):
        assert strip_tags("AT&amp;T <b>x</b>") == "AT&T x"
        assert strip_tags("AT&amp;T") == "AT&T"
        assert strip_tags("5 &lt; 6") == "5 < 6"


class TestTexturize:
    @pytest.mark.parametrize("text,expected", [
        ("wait...", "wait\N{HORIZONTAL ELLIPSIS}"),
        ("a -- b", "a \N{EM DASH} b"),
        ("1--2", "1\N{EN DASH}2"),
        ("it's", "it\N{RIGHT SINGLE QUOTATION MARK}s"),
        ('"hi"', "\N{LEFT DOUBLE QUOTATION MARK}hi\N{RIGHT DOUBLE QUOTATION MARK}"),
        ("1920x1080", "1920\N{MULTIPLICATION SIGN}1080"),
        ("the '90s", "the \N{RIGHT SINGLE QUOTATION MARK}90s"),
    ])
    def test_replacements(self, text, expected):
        assert texturize(text) == expected

    def test_code_untouched(self):
        text = "say <code>a -- b...</code> ok..."
        assert texturize(text) == "say <code>a -- b...</code> ok\N{HORIZONTAL ELLIPSIS}"

    def test_tags_untouched(self):
        assert texturize('<a href="x">y</a>') == '<a href="x">y</a>'


class TestCleanUrl:
    @pytest.mark.parametrize("url", [
        "https://example.com/a.jpg",
        "http://example.com/?a=1&b=2",
        "/uploads/a.jpg",
        "//cdn.example.com/a.jpg",
        "#frag",
    ])
    def test_accepts(self, url):
        assert clean_url(url) == url

    @pytest.mark.parametrize("url", [
        "javascript:alert(1)",
        "java\tscript:alert(1)",
        "data:text/html;base64,xx",
        "example.com/no-scheme",
        "",
    ])
    def test_rejects(self, url):
        assert clean_url(url) == ""

    def test_encodes_spaces(self):
        assert clean_url(" https://example.com/a b.jpg ") == "https://example.com/a%20b.jpg"
