"""
Comment stripping for raw query text.

Query editors allow annotating filter text with ``//`` line comments and
``/* ... */`` block comments. Both are removed before the text is decoded.
String literals are not tracked, so comment markers inside quoted values
are removed as well.
"""

import re

_LINE_COMMENT = re.compile(r"//.*")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")


def remove_comments(query_text: str) -> str:
    """
    Remove line and block comments from query text.

    Line comments are stripped first, then block comments. Neither pattern
    spans newlines.

    Args:
        query_text: Raw query text as typed by the user

    Returns:
        Query text without comments
    """
    if not query_text:
        return ""
    query_text = _LINE_COMMENT.sub("", query_text)
    return _BLOCK_COMMENT.sub("", query_text)
