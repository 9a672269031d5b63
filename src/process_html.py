import codecs
import logging
import re
from dataclasses import dataclass

from lxml import etree

NO_TITLE = "No Title"

CHARSET_PATTERN = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)
XML_DECLARATION_PATTERN = re.compile(r"^\s*<\?xml[^>]*\?>")


@dataclass
class ExtractedPage:
    """Title and plain text pulled out of one HTML response"""
    uri: str
    title: str = ""
    content: str = ""

    @classmethod
    def empty(cls, uri):
        return cls(uri)

    @property
    def is_empty(self):
        return not (self.title and self.content)


def read_content_type(record):
    return record.get_http_header("Content-Type")


def decode_payload(payload, content_type):
    """
    Decode payload bytes using the charset named in the content type.
    Unknown or missing charsets fall back to UTF-8; undecodable bytes are dropped.

    :param payload: raw payload bytes
    :param content_type: the Content-Type header value
    :return: the payload as text
    """
    encoding = "utf-8"
    match = CHARSET_PATTERN.search(content_type or "")
    if match:
        try:
            encoding = codecs.lookup(match.group(1)).name
        except LookupError:
            logging.debug(f"Unknown charset {match.group(1)}, decoding as utf-8")
    return payload.decode(encoding, errors="ignore")


def fix_xml_declaration(content):
    """
    lxml refuses text input that still carries an encoding declaration,
    which XHTML pages often do. The payload is already decoded, so drop it.

    :param content: decoded page text
    :return: the text without a leading <?xml ...?> declaration
    """
    return XML_DECLARATION_PATTERN.sub("", content, count=1)


def parse_html(content):
    """
    Parse markup into an element tree.

    lxml recovers from most broken markup on its own; anything it still
    rejects is reported as None so the caller can skip the record.

    :param content: decoded page text
    :return: the root element, or None
    """
    try:
        return etree.HTML(fix_xml_declaration(content))
    except (etree.LxmlError, ValueError) as e:
        logging.debug(f"Could not parse markup: {e}")
        return None


def strip_non_content(root):
    """
    Remove script and style elements (with everything inside them) and
    comments. Text following a removed element stays in place.
    """
    etree.strip_elements(root, "script", "style", etree.Comment, with_tail=False)
    return root


def extract_text(root):
    body = root.find("body")
    if body is None:
        return ""
    return "".join(body.itertext())


def clean_content(content):
    """Trim every line and drop the blank ones"""
    lines = (line.strip() for line in content.split("\n"))
    return "\n".join(line for line in lines if line)


def extract_title(root):
    title = root.find(".//title")
    if title is None:
        return NO_TITLE
    return "".join(title.itertext())


def extract(record):
    """
    Pull the title and visible text out of an HTML response record.

    Records without a Content-Type, with a non-HTML one, or whose markup
    cannot be parsed give an empty page rather than an error.

    :param record: an eligible ArchiveRecord
    :return: ExtractedPage
    """
    uri = record.target_uri
    content_type = read_content_type(record)
    if content_type is None:
        logging.debug(f"No Content-Type for {uri}")
        return ExtractedPage.empty(uri)
    if "text/html" not in content_type:
        logging.debug(f"Not HTML ({content_type}): {uri}")
        return ExtractedPage.empty(uri)

    root = parse_html(decode_payload(record.read_payload(), content_type))
    if root is None:
        logging.debug(f"Unparseable markup, skipping {uri}")
        return ExtractedPage.empty(uri)

    strip_non_content(root)
    return ExtractedPage(uri, extract_title(root), clean_content(extract_text(root)))
