import logging
from collections import Counter

from classify_record import DUPLICATE_URI, classify
from meaningful_content import is_meaningful
from process_html import extract
from warc_records import iter_archive_records

PAGE_BLOCK = "\n\n--- Page: {uri} ---\nTitle: {title}\n\nContent:{content}"


def format_page_block(page):
    return PAGE_BLOCK.format(uri=page.uri, title=page.title, content=page.content)


class CorpusBuilder:
    def __init__(self):
        """
        Collects page blocks in the order their URIs first qualify.
        One builder per extraction; never share it between archives.
        """
        self.seen = set()
        self._blocks = []

    def add(self, page):
        """
        Append a page unless it is empty or its URI already contributed.

        :param page: an ExtractedPage
        :return: True if the page was appended
        """
        if page.is_empty:
            return False
        if page.uri in self.seen:
            logging.debug(f"Dropping later copy of {page.uri}")
            return False
        self._blocks.append(format_page_block(page))
        self.seen.add(page.uri)
        return True

    @property
    def corpus(self):
        return "".join(self._blocks)

    def __len__(self):
        return len(self._blocks)


def extract_and_concatenate(stream, stats=None):
    """
    Run one archive through classification, HTML extraction and the
    meaningfulness filter, and concatenate what survives.

    :param stream: readable binary stream of a .warc or .warc.gz file
    :param stats: optional Counter that receives per-reason tallies
    :return: the annotated corpus ("" when nothing qualified)
    :raises MalformedArchiveError: if the archive cannot be read to the end
    """
    stats = Counter() if stats is None else stats
    builder = CorpusBuilder()

    for record in iter_archive_records(stream):
        stats["records"] += 1
        verdict = classify(record, builder.seen)
        if not verdict.eligible:
            stats[verdict.reason] += 1
            continue

        page = extract(record)
        if page.is_empty:
            stats["no-content"] += 1
            continue
        if not is_meaningful(page.title, page.content):
            logging.debug(f"Not meaningful: {page.uri} [{page.title}]")
            stats["not-meaningful"] += 1
            continue

        if builder.add(page):
            stats["appended"] += 1
            logging.debug(f"Added page: {page.uri}")
        else:
            stats[DUPLICATE_URI] += 1

    logging.info(f"Extracted {len(builder)} pages from {stats['records']} records: {dict(stats)}")
    return builder.corpus
