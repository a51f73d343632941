"""Tests for macro attribute normalization."""

import pytest

from src.schemas.slideshow_schema import DEFAULT_ORDERBY, MacroInvocation, SortOrder
from src.slideshow.attributes import (
    merge_attributes,
    normalize,
    normalize_invocation,
    parse_bool,
    parse_id_list,
    sanitize_orderby,
)


class TestSanitizeOrderby:
    def test_default_expression_is_canonical(self):
        assert sanitize_orderby("menu_order ID") == DEFAULT_ORDERBY
        assert sanitize_orderby("menu_order, id") == DEFAULT_ORDERBY

    def test_directions(self):
        assert sanitize_orderby("title DESC, date asc") == "title desc, date asc"

    def test_none_and_rand_allowed(self):
        assert sanitize_orderby("none") == "none"
        assert sanitize_orderby("RAND") == "rand"

    @pytest.mark.parametrize("value", [
        "id; DROP TABLE posts",
        "title, (SELECT password FROM users)",
        "post_password",
        "menu_order -- comment",
        "1=1",
        "desc",
        "title desc desc",
    ])
    def test_rejects_non_allowlisted(self, value):
        assert sanitize_orderby(value) == ""

    def test_post_prefixed_aliases(self):
        assert sanitize_orderby("post_date DESC, post_title") == "date desc, title"
        assert sanitize_orderby("POST_MODIFIED") == "modified"

    def test_alias_reaches_config(self):
        assert normalize({"orderby": "post_date DESC"}).orderby == "date desc"

    def test_empty(self):
        assert sanitize_orderby("") == ""
        assert sanitize_orderby(None) == ""


class TestHelpers:
    def test_parse_id_list(self):
        assert parse_id_list("1, 2 3,,4") == [1, 2, 3, 4]
        assert parse_id_list("5,abc,-6,7") == [5, 7]
        assert parse_id_list("") == []

    def test_parse_bool(self):
        assert parse_bool("true") is True
        assert parse_bool("FALSE") is False
        assert parse_bool("0") is False
        assert parse_bool("off") is False
        assert parse_bool("") is True
        assert parse_bool(None, default=False) is False

    def test_merge_drops_unknown_keys(self):
        merged = merge_attributes({"trans": "scrollHorz", "speed": "3"}, {"trans": "fade", "order": "ASC"})
        assert merged == {"trans": "scrollHorz", "order": "ASC"}

    def test_merge_keys_case_insensitive(self):
        merged = merge_attributes({"TRANS": "wipe"}, {"trans": "fade"})
        assert merged == {"trans": "wipe"}


class TestNormalize:
    def test_defaults(self):
        config = normalize({})
        assert config.trans == "fade"
        assert config.order == SortOrder.ASC
        assert config.orderby == DEFAULT_ORDERBY
        assert config.autostart is True
        assert config.include == []
        assert config.exclude == []

    @pytest.mark.parametrize("order", ["rand", "RAND", "Rand", " rand "])
    def test_rand_forces_orderby_none(self, order):
        config = normalize({"order": order, "orderby": "title DESC"})
        assert config.order == SortOrder.RAND
        assert config.orderby == "none"

    def test_desc(self):
        assert normalize({"order": "desc"}).order == SortOrder.DESC

    def test_unknown_order_is_asc(self):
        assert normalize({"order": "sideways"}).order == SortOrder.ASC

    def test_injection_replaced_by_default(self):
        config = normalize({"orderby": "menu_order; DELETE FROM posts"})
        assert config.orderby == DEFAULT_ORDERBY

    def test_valid_orderby_kept(self):
        assert normalize({"orderby": "date DESC"}).orderby == "date desc"

    def test_include_wins_over_id(self):
        config = normalize({"include": "4,5", "id": "12"})
        assert config.post_id == 12
        assert config.include == [4, 5]
        assert config.post_parent is None

    def test_id_restricts_parent(self):
        config = normalize({"id": "12"})
        assert config.post_parent == 12

    def test_host_default_id(self):
        config = normalize({}, {"id": "7"})
        assert config.post_id == 7

    def test_explicit_id_beats_host_default(self):
        config = normalize({"id": "9"}, {"id": "7"})
        assert config.post_id == 9

    def test_garbage_id(self):
        assert normalize({"id": "abc"}).post_id == 0

    def test_autostart_false(self):
        assert normalize({"autostart": "false"}).autostart is False

    def test_blank_trans(self):
        assert normalize({"trans": "  "}).trans == "fade"

    def test_invocation_uses_document_id(self):
        config = normalize_invocation(MacroInvocation(attributes={}, post_id=33))
        assert config.post_id == 33
        assert config.post_parent == 33

    def test_invocation_with_include(self):
        invocation = MacroInvocation(attributes={"include": "1 2", "id": "8"}, post_id=33)
        config = normalize_invocation(invocation)
        assert config.post_parent is None
