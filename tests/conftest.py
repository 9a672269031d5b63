"""Shared fixtures: small in-memory WARC archives built with warcio's writer."""

from __future__ import annotations

from io import BytesIO

import pytest
from warcio.statusandheaders import StatusAndHeaders
from warcio.warcwriter import WARCWriter

from warc_records import RecordType


ABOUT_HTML = (
    "<html><head><title>About Us</title></head>"
    "<body><script>x=1</script><p>Welcome  </p></body></html>"
)


def html_page(title: str, body: str) -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def build_warc(records, gzip: bool = True) -> BytesIO:
    """Write records to an in-memory archive and rewind it.

    Each record is a dict with ``uri`` and optional ``body`` (str or bytes),
    ``content_type`` (``None`` omits the header) and ``rec_type``.
    A warcinfo record is always written first, as crawlers do.
    """
    buf = BytesIO()
    writer = WARCWriter(buf, gzip=gzip)
    writer.write_record(writer.create_warcinfo_record("test.warc.gz", {"software": "tests"}))

    for entry in records:
        rec_type = entry.get("rec_type", "response")
        body = entry.get("body", "")
        if isinstance(body, str):
            body = body.encode("utf-8")

        if rec_type == "response":
            headers = []
            content_type = entry.get("content_type", "text/html; charset=utf-8")
            if content_type is not None:
                headers.append(("Content-Type", content_type))
            http_headers = StatusAndHeaders("200 OK", headers, protocol="HTTP/1.0")
            record = writer.create_warc_record(
                entry["uri"], "response", payload=BytesIO(body), http_headers=http_headers
            )
        elif rec_type == "request":
            http_headers = StatusAndHeaders(
                "GET / HTTP/1.0", [("Host", "example.sg")], is_http_request=True
            )
            record = writer.create_warc_record(
                entry["uri"], "request", payload=BytesIO(b""), http_headers=http_headers
            )
        else:
            record = writer.create_warc_record(
                entry["uri"], rec_type, payload=BytesIO(body),
                warc_content_type="application/warc-fields",
            )
        writer.write_record(record)

    buf.seek(0)
    return buf


class FakeRecord:
    """Stand-in for ArchiveRecord with plain-dict headers."""

    def __init__(self, uri="https://example.sg/about", body=b"", content_type="text/html",
                 record_type=RecordType.RESPONSE):
        self.target_uri = uri
        self.record_type = record_type
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        self._headers = {} if content_type is None else {"content-type": content_type}
        self.payload_reads = 0

    def get_http_header(self, name):
        return self._headers.get(name.lower())

    def read_payload(self):
        self.payload_reads += 1
        return self._body


@pytest.fixture()
def make_warc():
    return build_warc


@pytest.fixture()
def make_record():
    return FakeRecord
