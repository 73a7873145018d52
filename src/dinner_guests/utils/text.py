"""Small text helpers shared by the source clients and extractors."""

import re

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


def strip_html(markup: str) -> str:
    """Strip tags and decode entities from an HTML fragment."""
    if not markup:
        return ""
    if "<" not in markup and "&" not in markup:
        return markup
    return BeautifulSoup(markup, "html.parser").get_text()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def surname(name: str) -> str:
    """Last whitespace-delimited token of a name, lowercased."""
    parts = name.split()
    return parts[-1].lower() if parts else ""


def names_surname(candidate: str, subject: str) -> bool:
    """Whether ``candidate`` contains the surname of ``subject`` (case-insensitive)."""
    last = surname(subject)
    return bool(last) and last in (candidate or "").lower()
