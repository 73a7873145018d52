"""Ordered lifespan rules for biography text.

Each rule pairs a predicate (does the text contain this kind of date
evidence?) with an extractor (what does that evidence say?). The extractor
may reject what the predicate found, in which case the cascade moves on to
the next rule. Order matters: the looser rules at the bottom would
misread text that the stricter rules at the top already explain.
"""

import datetime
import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Sequence

from ..config import Settings
from ..models import Confidence

DASH = r"[–—-]"
YEAR = r"(?<!\d)(\d{4})(?!\d)"

INTRO = "intro"
FULL = "full"


@dataclass(frozen=True)
class DateMatch:
    """Lifespan evidence produced by a rule."""
    deceased: bool
    confidence: Confidence
    birth_year: Optional[int] = None
    death_year: Optional[int] = None


UNDETERMINED = DateMatch(deceased=False, confidence=Confidence.UNKNOWN)

Predicate = Callable[[str, Settings], Optional["re.Match[str]"]]
Extractor = Callable[["re.Match[str]", Settings], Optional[DateMatch]]


@dataclass(frozen=True)
class DateRule:
    """One step of the lifespan cascade."""
    name: str
    scope: str
    predicate: Predicate
    extractor: Extractor

    def apply(self, text: str, settings: Settings) -> Optional[DateMatch]:
        """Return the rule's verdict for ``text``, or None if it does not fire."""
        match = self.predicate(text, settings)
        if match is None:
            return None
        return self.extractor(match, settings)


def current_year() -> int:
    return datetime.date.today().year


def _search(pattern: Pattern[str]) -> Predicate:
    return lambda text, settings: pattern.search(text)


def _first_of(patterns: Sequence[Pattern[str]]) -> Predicate:
    def predicate(text: str, settings: Settings):
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                return match
        return None

    return predicate


def _explicit_span(match, settings: Settings) -> Optional[DateMatch]:
    birth, death = int(match.group(1)), int(match.group(2))
    if death <= birth or birth <= 0 or death > current_year():
        return None
    return DateMatch(
        deceased=True, confidence=Confidence.CERTAIN, birth_year=birth, death_year=death
    )


def _bce_span(match, settings: Settings) -> Optional[DateMatch]:
    birth, death = int(match.group(1)), int(match.group(2))
    if not (birth > death > 0 and birth <= settings.max_plausible_bce_year):
        return None
    return DateMatch(
        deceased=True, confidence=Confidence.CERTAIN, birth_year=-birth, death_year=-death
    )


def _bce_to_ce_span(match, settings: Settings) -> Optional[DateMatch]:
    birth, death = int(match.group(1)), int(match.group(2))
    if birth <= 0:
        # There is no year 0; the ordering would not hold
        return None
    return DateMatch(
        deceased=True, confidence=Confidence.CERTAIN, birth_year=-birth, death_year=death
    )


def _died_predicate(text: str, settings: Settings):
    pattern = re.compile(rf"\bdied\b[^.]{{0,{settings.died_window}}}?{YEAR}", re.IGNORECASE)
    return pattern.search(text)


def _died(match, settings: Settings) -> Optional[DateMatch]:
    return DateMatch(
        deceased=True, confidence=Confidence.INFERRED, death_year=int(match.group(1))
    )


def _bracketed_birth(match, settings: Settings) -> Optional[DateMatch]:
    birth = int(match.group(1))
    if birth < settings.deceased_cutoff_year:
        return DateMatch(deceased=True, confidence=Confidence.INFERRED, birth_year=birth)
    # Recent birth year: leave it to the living-person patterns
    return None


def _living(match, settings: Settings) -> Optional[DateMatch]:
    year = match.group(1) if match.re.groups else None
    if year is None:
        return DateMatch(deceased=False, confidence=Confidence.INFERRED)
    birth = int(year)
    if birth <= settings.deceased_cutoff_year:
        return None
    return DateMatch(deceased=False, confidence=Confidence.INFERRED, birth_year=birth)


LIFESPAN = re.compile(rf"\([^)]*?{YEAR}[^)]*?{DASH}[^)]*?{YEAR}[^)]*?\)")
CIRCA_SPAN = re.compile(
    rf"\(c\.?\s*(\d{{1,4}})\s*{DASH}\s*(?:c\.?\s*)?(\d{{1,4}})\s*(?:BCE?|CE|AD)?\)",
    re.IGNORECASE,
)
BCE_SPAN = re.compile(
    rf"(?:c\.?\s*)?(\d{{1,4}})\s*{DASH}\s*(?:c\.?\s*)?(\d{{1,4}})\s*BCE?\b", re.IGNORECASE
)
BCE_TO_CE_SPAN = re.compile(
    rf"(?:c\.?\s*)?(\d{{1,4}})\s*BCE?\s*{DASH}\s*(?:c\.?\s*)?(?:AD|CE)\s*(\d{{1,4}})",
    re.IGNORECASE,
)
BRACKETED_YEAR = re.compile(rf"\([^)]*?{YEAR}[^)]*\)")
LIVING_PATTERNS = (
    re.compile(rf"\(born\s+[^)]*?{YEAR}[^)]*\)", re.IGNORECASE),
    re.compile(rf"\({YEAR}\s*{DASH}\s*present\)", re.IGNORECASE),
    re.compile(r"\bage\s+\d+\)", re.IGNORECASE),
    re.compile(r"\(aged?\s+\d+\)", re.IGNORECASE),
)

DATE_RULES = (
    DateRule("explicit-span", INTRO, _search(LIFESPAN), _explicit_span),
    DateRule("circa-span", INTRO, _search(CIRCA_SPAN), _explicit_span),
    DateRule("bce-span", INTRO, _search(BCE_SPAN), _bce_span),
    DateRule("bce-to-ce-span", INTRO, _search(BCE_TO_CE_SPAN), _bce_to_ce_span),
    DateRule("died-keyword", FULL, _died_predicate, _died),
    DateRule("bracketed-birth-year", FULL, _search(BRACKETED_YEAR), _bracketed_birth),
    DateRule("living", FULL, _first_of(LIVING_PATTERNS), _living),
)


def match_dates(text: str, settings: Settings, rules: Sequence[DateRule] = DATE_RULES) -> DateMatch:
    """Run the cascade; the first rule that fires wins."""
    intro = text[: settings.intro_window]
    for rule in rules:
        verdict = rule.apply(intro if rule.scope == INTRO else text, settings)
        if verdict is not None:
            return verdict
    return UNDETERMINED
