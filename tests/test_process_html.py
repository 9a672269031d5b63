"""Tests for turning HTML response payloads into title + plain text."""

from __future__ import annotations

from conftest import ABOUT_HTML, html_page
from process_html import (
    NO_TITLE,
    ExtractedPage,
    clean_content,
    decode_payload,
    extract,
    extract_text,
    extract_title,
    parse_html,
    strip_non_content,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestExtractedPage:
    def test_empty_sentinel(self) -> None:
        page = ExtractedPage.empty("https://example.sg/x")
        assert page.is_empty
        assert page.title == "" and page.content == ""

    def test_needs_both_title_and_content(self) -> None:
        assert ExtractedPage("u", "Title", "").is_empty
        assert ExtractedPage("u", "", "Body").is_empty
        assert not ExtractedPage("u", "Title", "Body").is_empty


class TestCleanContent:
    def test_trims_and_drops_blank_lines(self) -> None:
        assert clean_content("  one  \n\n   \n\ttwo\n") == "one\ntwo"

    def test_windows_line_endings(self) -> None:
        assert clean_content("one\r\ntwo\r\n") == "one\ntwo"

    def test_blank_input(self) -> None:
        assert clean_content("\n \n") == ""


class TestDecodePayload:
    def test_uses_declared_charset(self) -> None:
        payload = "café".encode("latin-1")
        assert decode_payload(payload, "text/html; charset=ISO-8859-1") == "café"

    def test_quoted_charset(self) -> None:
        payload = "café".encode("latin-1")
        assert decode_payload(payload, 'text/html; charset="iso-8859-1"') == "café"

    def test_unknown_charset_falls_back_to_utf8(self) -> None:
        assert decode_payload("café".encode("utf-8"), "text/html; charset=klingon") == "café"

    def test_undecodable_bytes_are_dropped(self) -> None:
        assert decode_payload(b"ok\xff", "text/html") == "ok"


class TestTreeOperations:
    def test_script_and_style_removed_with_children(self) -> None:
        root = parse_html(
            "<html><body><p>keep</p><script><b>inner</b>bad()</script>"
            "<style>p {color: red}</style><p>also</p></body></html>"
        )
        strip_non_content(root)
        assert root.find(".//script") is None
        assert root.find(".//style") is None
        assert extract_text(root) == "keepalso"

    def test_text_after_removed_element_is_kept(self) -> None:
        root = parse_html("<html><body><p>a<script>x</script>b</p></body></html>")
        strip_non_content(root)
        assert extract_text(root) == "ab"

    def test_comments_are_not_text(self) -> None:
        root = parse_html("<html><body><p>a<!-- hidden -->b</p></body></html>")
        strip_non_content(root)
        assert extract_text(root) == "ab"

    def test_stripping_is_idempotent(self) -> None:
        root = parse_html(html_page("T", "<p>one</p><script>x</script>\n<p>two</p>"))
        once = clean_content(extract_text(strip_non_content(root)))
        twice = clean_content(extract_text(strip_non_content(root)))
        assert once == twice == "one\ntwo"

    def test_title_from_first_title_element(self) -> None:
        root = parse_html("<html><head><title>First</title><title>Second</title></head></html>")
        assert extract_title(root) == "First"

    def test_missing_title(self) -> None:
        root = parse_html("<html><body><p>no head</p></body></html>")
        assert extract_title(root) == NO_TITLE

    def test_empty_title_element_is_not_no_title(self) -> None:
        root = parse_html("<html><head><title></title></head><body>x</body></html>")
        assert extract_title(root) == ""

    def test_xml_declaration_is_tolerated(self) -> None:
        root = parse_html(
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<html><head><title>X</title></head><body><p>hi</p></body></html>"
        )
        assert root is not None
        assert extract_title(root) == "X"

    def test_broken_markup_degrades(self) -> None:
        root = parse_html("<html><body><p>unclosed <b>bold<div>text")
        assert root is not None
        assert "unclosed" in extract_text(root)


# ---------------------------------------------------------------------------
# extract()
# ---------------------------------------------------------------------------

class TestExtract:
    def test_about_page(self, make_record) -> None:
        record = make_record(body=ABOUT_HTML, content_type="text/html; charset=utf-8")
        page = extract(record)
        assert page == ExtractedPage("https://example.sg/about", "About Us", "Welcome")

    def test_missing_content_type_is_not_parsed(self, make_record) -> None:
        record = make_record(body=ABOUT_HTML, content_type=None)
        assert extract(record).is_empty
        assert record.payload_reads == 0

    def test_non_html_is_not_parsed(self, make_record) -> None:
        record = make_record(body="{}", content_type="application/json")
        assert extract(record).is_empty
        assert record.payload_reads == 0

    def test_xhtml_content_type_is_not_html(self, make_record) -> None:
        record = make_record(body=ABOUT_HTML, content_type="application/xhtml+xml")
        assert extract(record).is_empty

    def test_default_title(self, make_record) -> None:
        record = make_record(body="<html><body><p>Just text</p></body></html>")
        page = extract(record)
        assert page.title == NO_TITLE
        assert page.content == "Just text"

    def test_empty_payload_gives_empty_page(self, make_record) -> None:
        assert extract(make_record(body=b"")).is_empty

    def test_whitespace_only_body(self, make_record) -> None:
        record = make_record(body=html_page("Blank", "<p>   </p>\n<div>\n</div>"))
        page = extract(record)
        assert page.content == ""
        assert page.is_empty

    def test_multiline_body(self, make_record) -> None:
        body = html_page("Services", "<h1>Our services</h1>\n  <p>Catering</p>\n\n  <p>Delivery</p>")
        page = extract(make_record(body=body))
        assert page.content == "Our services\nCatering\nDelivery"
