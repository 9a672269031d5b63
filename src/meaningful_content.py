"""
Heuristics for rejecting error pages, directory listings and template filler.

Both checks lowercase their input before matching. Note the trailing comma
on "401," in the content list: a bare "401" is allowed in page text.
"""

NON_MEANINGFUL_CONTENT = [
    "404",
    "401,",
    "403",
    "lorem",
    "blockquote",
    "class=",
    "href",
    "not found",
    "can't be found",
    "nothing was found",
]

NON_MEANINGFUL_TITLE = ["index of", "404", "401", "400", "403", "304", "301"]


def is_meaningful_content(content):
    lowered = content.lower()
    return not any(indicator in lowered for indicator in NON_MEANINGFUL_CONTENT)


def is_meaningful_title(title):
    lowered = title.lower()
    return not any(indicator in lowered for indicator in NON_MEANINGFUL_TITLE)


def is_meaningful(title, content):
    return is_meaningful_content(content) and is_meaningful_title(title)
