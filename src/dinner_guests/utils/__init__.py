"""Utility helpers for dinner-guests."""

from .logging import configure_logging, log_exception
from .text import collapse_whitespace, names_surname, strip_html, surname

__all__ = [
    "configure_logging",
    "log_exception",
    "collapse_whitespace",
    "names_surname",
    "strip_html",
    "surname",
]
