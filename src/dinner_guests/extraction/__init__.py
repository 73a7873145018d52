"""Biographical fact extraction."""

from .facts import FALLBACK_DESCRIPTION, FactExtractor, strip_parentheticals
from .rules import DATE_RULES, DateMatch, DateRule, match_dates

__all__ = [
    "FactExtractor",
    "FALLBACK_DESCRIPTION",
    "strip_parentheticals",
    "DATE_RULES",
    "DateMatch",
    "DateRule",
    "match_dates",
]
