"""
Decide which archive records are worth parsing.

The URI checks are deliberately coarse: they match raw substrings, case
sensitively, anywhere in the URI, so e.g. "/reindexing/" is skipped too.
"""

import logging
from collections import namedtuple

from warc_records import RecordType

NON_CONTENT_INDICATORS = ["admin", "login", "error", "404", "401", "403", "ajax", "index"]

Classification = namedtuple("Classification", ["eligible", "reason"])

ELIGIBLE = "eligible"
NOT_RESPONSE = "not-response"
MISSING_URI = "missing-uri"
DUPLICATE_URI = "duplicate-uri"
NON_CONTENT_URI = "non-content-uri"
FILE_URI = "file-uri"


def is_file_uri(uri):
    """A dot in the last path segment is taken to mean a file, not a page"""
    return "." in uri.split("/")[-1]


def non_content_reason(uri):
    """
    :param uri: the raw target URI
    :return: the skip reason if the URI looks like boilerplate, else None
    """
    if any(indicator in uri for indicator in NON_CONTENT_INDICATORS):
        return NON_CONTENT_URI
    if is_file_uri(uri):
        return FILE_URI
    return None


def classify(record, seen):
    """
    Check whether a record should go through HTML extraction.

    :param record: an ArchiveRecord
    :param seen: URIs that already contributed to the corpus
    :return: Classification(eligible, reason)
    """
    if record.record_type != RecordType.RESPONSE:
        return Classification(False, NOT_RESPONSE)

    uri = record.target_uri
    if not uri:
        return Classification(False, MISSING_URI)

    if uri in seen:
        return Classification(False, DUPLICATE_URI)

    reason = non_content_reason(uri)
    if reason:
        logging.debug(f"Skipping {uri}: {reason}")
        return Classification(False, reason)

    return Classification(True, ELIGIBLE)
