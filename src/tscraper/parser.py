"""HTML parsing utilities using Selectolax."""

from __future__ import annotations

import logging
import re
from typing import List

from selectolax.parser import HTMLParser

logger = logging.getLogger(__name__)

ROW_SELECTOR = 'tr[role="row"]'

_NEWLINES = re.compile(r"\s*[\r\n]+\s*")


def parse_html(html: str) -> HTMLParser:
    """Parse raw HTML into a Selectolax tree."""
    return HTMLParser(html)


def _node_text(node) -> str:
    return _NEWLINES.sub(" ", node.text(deep=True)).strip()


def extract_row_fragments(html: str) -> List[List[str]]:
    """Return the text fragments of every trend table row.

    Each row yields the text of all nested ``td div`` elements in document
    order, followed by the text of its first ``td div div``. Rows without any
    text are skipped.
    """
    tree = parse_html(html)
    rows = tree.css(ROW_SELECTOR)
    logger.debug("Found %s table rows", len(rows))

    data: List[List[str]] = []
    for row in rows:
        fragments = [text for text in map(_node_text, row.css("td div")) if text]
        inner = row.css_first("td div div")
        if inner is not None:
            text = _node_text(inner)
            if text:
                fragments.append(text)
        if fragments:
            data.append(fragments)
    return data


__all__ = ["ROW_SELECTOR", "extract_row_fragments", "parse_html"]
