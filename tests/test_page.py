"""Unit tests for the page model and visibility toggle."""

import pytest

from jobfilter.page import (
    ATTRIBUTES,
    CHILD_LIST,
    CLICK,
    NAVIGATE,
    Page,
    PageError,
    contains,
    display_value,
    hide,
    is_hidden,
    set_visible,
    show,
)

HTML = """
<html><body>
  <ul id="list"><li class="card">One</li><li class="card">Two</li></ul>
  <div id="sidebar"><span>Ad</span></div>
</body></html>
"""


@pytest.fixture
def page():
    return Page(HTML, url="https://example.com/jobs")


class TestVisibility:
    """Tests for hide/show on the inline style."""

    def test_hide_sets_display_none(self, page):
        card = page.select_one(".card")
        hide(card)

        assert card["style"] == "display: none"
        assert is_hidden(card)

    def test_show_removes_only_display(self, page):
        card = page.select_one(".card")
        card["style"] = "color: red; display: none"
        show(card)

        assert card["style"] == "color: red"
        assert display_value(card) is None

    def test_show_drops_empty_style_attribute(self, page):
        card = page.select_one(".card")
        hide(card)
        show(card)

        assert "style" not in card.attrs

    def test_hide_preserves_other_declarations(self, page):
        card = page.select_one(".card")
        card["style"] = "margin: 0; display: flex"
        hide(card)

        assert card["style"] == "margin: 0; display: none"

    def test_hide_is_idempotent(self, page):
        card = page.select_one(".card")
        hide(card)
        hide(card)

        assert card["style"] == "display: none"

    def test_show_on_untouched_card_is_noop(self, page):
        card = page.select_one(".card")
        show(card)

        assert "style" not in card.attrs

    def test_hide_keeps_semicolons_inside_values(self, page):
        card = page.select_one(".card")
        card["style"] = "background-image: url(data:image/png;base64,AAAA); color: red"
        hide(card)

        assert card["style"] == (
            "background-image: url(data:image/png;base64,AAAA); color: red; display: none"
        )

    def test_show_leaves_other_declarations_verbatim(self, page):
        card = page.select_one(".card")
        card["style"] = "--cardGap:4px;content: 'a;b'; display: none"
        show(card)

        assert card["style"] == "--cardGap:4px;content: 'a;b'"

    def test_hide_after_trailing_semicolon(self, page):
        card = page.select_one(".card")
        card["style"] = "color: red;"
        hide(card)

        assert card["style"] == "color: red; display: none"

    def test_important_display_counts_as_hidden(self, page):
        card = page.select_one(".card")
        card["style"] = "display: none !important"

        assert is_hidden(card)

    def test_set_visible(self, page):
        card = page.select_one(".card")
        set_visible(card, False)
        assert is_hidden(card)
        set_visible(card, True)
        assert not is_hidden(card)


class TestMutationObserver:
    """Tests for mutation delivery."""

    def test_append_html_reports_added_nodes(self, page):
        records = []
        observer = page.observer(records.extend)
        observer.observe(page.select_one("#list"))

        added = page.append_html(page.select_one("#list"), '<li class="card">Three</li>')

        assert len(records) == 1
        assert records[0].type == CHILD_LIST
        assert records[0].added_nodes == added
        assert len(page.select(".card")) == 3

    def test_remove_reports_removed_nodes(self, page):
        records = []
        page.observer(records.extend).observe(page.select_one("#list"))
        card = page.select_one(".card")

        page.remove(card)

        assert records[0].removed_nodes == [card]
        assert len(page.select(".card")) == 1

    def test_changes_outside_target_are_not_delivered(self, page):
        records = []
        page.observer(records.extend).observe(page.select_one("#list"))

        page.append_html(page.select_one("#sidebar"), "<span>Another ad</span>")

        assert records == []

    def test_subtree_changes_are_delivered(self, page):
        records = []
        page.observer(records.extend).observe(page.body)

        page.append_html(page.select_one("#list"), "<li>Three</li>")

        assert len(records) == 1

    def test_attribute_records_need_opt_in(self, page):
        plain, with_attrs = [], []
        page.observer(plain.extend).observe(page.body)
        page.observer(with_attrs.extend, attributes=True).observe(page.body)

        page.set_attribute(page.select_one(".card"), "data-x", "1")

        assert plain == []
        assert with_attrs[0].type == ATTRIBUTES
        assert with_attrs[0].attribute_name == "data-x"

    def test_replace_children(self, page):
        records = []
        page.observer(records.extend).observe(page.body)
        container = page.select_one("#list")

        page.replace_children(container, '<li class="card">New</li>')

        assert [li.get_text() for li in page.select(".card")] == ["New"]
        assert len(records[0].removed_nodes) == 2
        assert len(records[0].added_nodes) == 1

    def test_disconnect_stops_delivery(self, page):
        records = []
        observer = page.observer(records.extend)
        observer.observe(page.body)
        observer.disconnect()

        page.append_html(page.select_one("#list"), "<li>Three</li>")

        assert records == []
        assert not observer.is_connected
        assert page.observer_count == 0

    def test_observe_twice_registers_once(self, page):
        observer = page.observer(lambda records: None)
        observer.observe(page.body)
        observer.observe(page.select_one("#list"))

        assert page.observer_count == 1
        assert observer.target is page.select_one("#list")

    def test_observe_missing_target_raises(self, page):
        with pytest.raises(PageError):
            page.observer(lambda records: None).observe(None)

    def test_visibility_writes_are_not_mutations(self, page):
        records = []
        page.observer(records.extend, attributes=True).observe(page.body)

        hide(page.select_one(".card"))

        assert records == []


class TestEvents:
    """Tests for click and navigation dispatch."""

    def test_capture_listeners_run_before_bubble(self, page):
        calls = []
        page.add_event_listener(CLICK, lambda e: calls.append("bubble"))
        page.add_event_listener(CLICK, lambda e: calls.append("capture"), capture=True)

        page.click(page.select_one(".card"))

        assert calls == ["capture", "bubble"]

    def test_click_event_carries_target(self, page):
        events = []
        page.add_event_listener(CLICK, events.append)
        card = page.select_one(".card")

        page.click(card)

        assert events[0].target is card

    def test_remove_listener(self, page):
        calls = []
        remove = page.add_event_listener(CLICK, calls.append)
        remove()
        remove()

        page.click(page.select_one(".card"))

        assert calls == []

    def test_failing_listener_does_not_stop_others(self, page):
        calls = []

        def broken(event):
            raise RuntimeError("boom")

        page.add_event_listener(CLICK, broken, capture=True)
        page.add_event_listener(CLICK, calls.append)

        page.click(page.select_one(".card"))

        assert len(calls) == 1

    def test_navigate_updates_url(self, page):
        events = []
        page.add_event_listener(NAVIGATE, events.append)

        page.navigate("https://example.com/jobs?page=2")

        assert page.url == "https://example.com/jobs?page=2"
        assert events[0].url == "https://example.com/jobs?page=2"


class TestPageLoading:
    """Tests for Page construction helpers."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<html><body><p>Hi</p></body></html>", encoding="utf-8")

        page = Page.from_file(path, url="https://example.com")

        assert page.select_one("p").get_text() == "Hi"
        assert page.url == "https://example.com"

    def test_from_missing_file_raises(self, tmp_path):
        with pytest.raises(PageError):
            Page.from_file(tmp_path / "missing.html")

    def test_body_falls_back_to_root_for_fragments(self):
        page = Page("<div class='card'>x</div>")

        assert page.body.select_one(".card") is not None

    def test_contains_uses_identity(self, page):
        items = page.select(".card")

        assert contains(page.body, items[0])
        assert contains(items[0], items[0])
        assert not contains(items[0], items[1])
