"""
Streaming access to the records of a WARC (or ARC) capture.

Records are decoded one at a time by warcio as the underlying stream is read,
so an uploaded archive never has to fit in memory.
"""

import logging
import zlib
from enum import Enum

from warcio.archiveiterator import ArchiveIterator
from warcio.recordloader import ArchiveLoadFailed
from warcio.statusandheaders import StatusAndHeadersParserException

from warc_errors import MalformedArchiveError

BUFF_SIZE = 16384

# Anything warcio or the gzip layer can raise while framing a record
DECODE_ERRORS = (ArchiveLoadFailed, StatusAndHeadersParserException, zlib.error, EOFError, OSError, ValueError)


class RecordType(Enum):
    RESPONSE = "response"
    REQUEST = "request"
    METADATA = "metadata"
    OTHER = "other"

    @classmethod
    def from_warc_type(cls, rec_type):
        """
        Map a WARC-Type value onto the record types the pipeline cares about.
        warcinfo, revisit, resource and friends all come back as OTHER.
        """
        if rec_type in ("response", "request", "metadata"):
            return cls(rec_type)
        return cls.OTHER


class ArchiveRecord:
    def __init__(self, record):
        """
        Wrap a warcio record.

        The payload is only readable until the reader advances to the next
        record, because both share the same underlying stream.

        :param record: a warcio ArcWarcRecord
        """
        self._record = record
        self._payload = None
        self.record_type = RecordType.from_warc_type(record.rec_type)
        self.rec_headers = record.rec_headers
        self.http_headers = record.http_headers
        self.target_uri = record.rec_headers.get_header("WARC-Target-URI")

    @property
    def header_fields(self):
        """Payload (HTTP) header pairs in the order they were recorded"""
        if not self.http_headers:
            return []
        return list(self.http_headers.headers)

    def get_http_header(self, name):
        """Case-insensitive lookup of a payload header, None when absent"""
        if not self.http_headers:
            return None
        return self.http_headers.get_header(name)

    def read_payload(self):
        """
        Read the HTTP payload, with transfer and content encodings removed.

        :return: the payload bytes
        :raises MalformedArchiveError: if the stream breaks while reading
        """
        if self._payload is None:
            try:
                self._payload = self._record.content_stream().read()
                # Drain trailers (chunked encoding) so a short record shows up as unread limit
                while self._record.raw_stream.read(BUFF_SIZE):
                    pass
            except DECODE_ERRORS as e:
                raise MalformedArchiveError(
                    f"Archive stream broke while reading payload of {self.target_uri}: {e}"
                ) from e
            check_record_complete(self._record)
        return self._payload

    def __repr__(self):
        return f"ArchiveRecord({self.record_type.value!r}, {self.target_uri!r})"


def check_record_complete(record):
    """
    warcio stops quietly when the stream ends before a record's declared
    Content-Length; the record's LimitReader is then left with bytes owed.

    :param record: a warcio ArcWarcRecord that has been read to its end
    :raises MalformedArchiveError: if the record was cut short
    """
    missing = getattr(record.raw_stream, "limit", 0)
    if missing > 0:
        uri = record.rec_headers.get_header("WARC-Target-URI")
        raise MalformedArchiveError(f"Archive truncated: record {uri} is missing {missing} bytes")


def check_member_complete(decompressor):
    """
    A gzip member cut off before its end decompresses without an error,
    so ask zlib whether it saw the end of the last member.

    :param decompressor: the zlib decompressor of the last record's member, None for plain archives
    :raises MalformedArchiveError: if the last gzip member is incomplete
    """
    if decompressor is not None and not getattr(decompressor, "eof", True):
        raise MalformedArchiveError("Archive truncated: last gzip member is incomplete")


def iter_archive_records(stream):
    """
    Lazily yield the records of an archive, in stream order.

    Gzipped and plain archives are both accepted. Reaching the end of the
    stream after a complete record ends the iteration; ending inside one is
    an error.

    :param stream: a readable binary file-like object
    :return: generator of ArchiveRecord
    :raises MalformedArchiveError: as soon as the stream stops parsing
    """
    count = 0
    record = None
    decompressor = None
    try:
        archive = ArchiveIterator(stream)
        for record in archive:
            count += 1
            # the iterator drops its reader once exhausted, so keep the member's decompressor
            decompressor = archive.reader.decompressor
            yield ArchiveRecord(record)
        if record is not None:
            check_record_complete(record)
            check_member_complete(decompressor)
    except DECODE_ERRORS as e:
        logging.error(f"Malformed archive after {count} records: {e}")
        raise MalformedArchiveError(f"Malformed archive after {count} records: {e}") from e
    except MalformedArchiveError as e:
        logging.error(f"Malformed archive after {count} records: {e}")
        raise
    logging.debug(f"Reached end of archive after {count} records")
