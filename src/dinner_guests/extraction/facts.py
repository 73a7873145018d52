"""Biographical fact extraction from free-form biography text."""

import re
from typing import Optional, Sequence

import structlog

from ..config import Settings, get_settings
from ..models import PersonFacts
from .rules import DASH, DATE_RULES, DateRule, match_dates

logger = structlog.get_logger(__name__)

FALLBACK_DESCRIPTION = "Historical figure"

# "January 1, 1950 " or "1 January 1950 "
_DAY_MONTH = r"(?:\w+\s+\d{1,2},?\s+|\d{1,2}\s+\w+\s+)"

ERA_PATTERNS = (
    re.compile(rf"\((\d{{1,4}})\s*{DASH}\s*(\d{{1,4}})\)"),
    re.compile(
        rf"\(c\.\s*(\d{{1,4}})\s*{DASH}\s*c?\.?\s*(\d{{1,4}})\s*(?:BCE?|CE|AD)?\)", re.IGNORECASE
    ),
    re.compile(
        rf"\((\d{{1,4}})\s*BCE?\s*{DASH}\s*(\d{{1,4}})\s*(?:BCE?|CE|AD)?\)", re.IGNORECASE
    ),
    re.compile(rf"\(born\s+{_DAY_MONTH}?(\d{{4}})\)", re.IGNORECASE),
    re.compile(rf"\((\d{{4}})\s*{DASH}\s*present\)", re.IGNORECASE),
    re.compile(rf"\({_DAY_MONTH}?(\d{{4}})\s*{DASH}\s*{_DAY_MONTH}?(\d{{4}})\)", re.IGNORECASE),
)
CENTURY = re.compile(
    r"\d{1,2}(?:st|nd|rd|th)\s+century(?:\s+(?:BCE?|CE|AD)\b)?", re.IGNORECASE
)

_PARENTHETICAL = re.compile(r"\([^()]*\)")
_SENTENCE_END = re.compile(r"[.!?](?:\s+|$)")
_LEADING_VERB = re.compile(r"^(?:was|is)\s+(?:an?\s+)?", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def strip_parentheticals(text: str) -> str:
    """Remove parenthesized spans, innermost first."""
    previous = None
    while previous != text:
        previous = text
        text = _PARENTHETICAL.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


class FactExtractor:
    """Turns a biography introduction into ``PersonFacts``."""

    def __init__(self, settings: Optional[Settings] = None, rules: Optional[Sequence[DateRule]] = None):
        """Initialize the extractor.

        Args:
            settings: Settings holding the heuristic thresholds
            rules: Lifespan cascade to use instead of the default ordering
        """
        self.settings = settings or get_settings()
        self.rules = tuple(rules) if rules is not None else DATE_RULES

    def extract(self, text: str, subject_name: str) -> PersonFacts:
        """Extract facts about ``subject_name`` from ``text``.

        Text without any recognizable date yields ``Confidence.UNKNOWN`` and
        absent years, which is a valid result rather than an error.
        """
        text = text or ""
        dates = match_dates(text, self.settings, self.rules)
        facts = PersonFacts(
            description=self.extract_description(text, subject_name),
            era=self.extract_era(text),
            birth_year=dates.birth_year,
            death_year=dates.death_year,
            deceased=dates.deceased,
            confidence=dates.confidence,
        )
        logger.debug(
            "Facts extracted",
            subject=subject_name,
            confidence=facts.confidence.value,
            birth_year=facts.birth_year,
            death_year=facts.death_year,
        )
        return facts

    def extract_era(self, text: str) -> str:
        """Lifespan as written in the text, else a century phrase, else empty."""
        for pattern in ERA_PATTERNS:
            match = pattern.search(text)
            if match:
                era = match.group(0).replace("(", "").replace(")", "")
                return _WHITESPACE.sub(" ", era).strip()

        century = CENTURY.search(text)
        if century:
            return century.group(0).strip()
        return ""

    def extract_description(self, text: str, subject_name: str) -> str:
        """Short description of who the subject was, taken from the opening sentence."""
        settings = self.settings
        sentences = [s.strip() for s in _SENTENCE_END.split(strip_parentheticals(text))]
        sentences = [s for s in sentences if s]
        if not sentences:
            return FALLBACK_DESCRIPTION

        description = self._strip_subject(sentences[0], subject_name)
        description = _LEADING_VERB.sub("", description, count=1).strip()
        description = description[:1].upper() + description[1:]

        if len(description) < settings.description_min_length:
            widened = ". ".join(sentences[:2])
            if len(widened) > settings.description_window:
                description = widened[: settings.description_window].rstrip() + "..."
            else:
                description = widened + "."

        if len(description) > settings.description_max_length:
            description = description[: settings.description_max_length - 3] + "..."

        return description or FALLBACK_DESCRIPTION

    @staticmethod
    def _strip_subject(sentence: str, subject_name: str) -> str:
        name = (subject_name or "").strip()
        if not name:
            return sentence
        for candidate in (name, name.split()[0]):
            stripped = re.sub(
                rf"^{re.escape(candidate)}(?:,\s*|\s+)", "", sentence, count=1, flags=re.IGNORECASE
            )
            if stripped != sentence:
                return stripped
        return sentence
