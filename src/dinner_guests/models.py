"""Value objects for dinner-guests.

Every object here is request-scoped: built fresh for one lookup and never
stored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

# A person's display name; the lookup key for all sources.
Subject = str


class Confidence(str, Enum):
    """How much trust the extracted lifespan deserves."""
    CERTAIN = "certain"
    INFERRED = "inferred"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PersonFacts:
    """Structured biographical facts. Negative years are BCE."""
    description: str
    era: str = ""
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    deceased: bool = False
    confidence: Confidence = Confidence.UNKNOWN

    def __post_init__(self):
        if (
            self.birth_year is not None
            and self.death_year is not None
            and self.birth_year >= self.death_year
        ):
            raise ValueError(
                f"Birth year {self.birth_year} does not precede death year {self.death_year}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "era": self.era,
            "birth_year": self.birth_year,
            "death_year": self.death_year,
            "deceased": self.deceased,
            "confidence": self.confidence.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class Quote:
    text: str


@dataclass(frozen=True)
class Work:
    title: str


@dataclass(frozen=True)
class Excerpt:
    work_title: str
    text: str


@dataclass(frozen=True)
class PageReference:
    """Handle to a page located by a source search."""
    title: str
    key: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class SubjectSuggestion:
    """Autocomplete candidate for a subject name."""
    title: str
    snippet: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "snippet": self.snippet}


@dataclass(frozen=True)
class SourceBundle:
    """Merged quotes, works and excerpt for one subject."""
    subject: Subject
    quotes: Tuple[Quote, ...] = ()
    works: Tuple[Work, ...] = ()
    excerpt: Optional[Excerpt] = None

    @classmethod
    def build(
        cls,
        subject: Subject,
        quotes: Sequence[Quote] = (),
        works: Sequence[Work] = (),
        excerpt: Optional[Excerpt] = None,
        max_quotes: int = 5,
        max_works: int = 5,
    ) -> "SourceBundle":
        """Create a bundle, bounding the quote and work lists."""
        return cls(
            subject=subject,
            quotes=tuple(quotes)[:max_quotes],
            works=tuple(works)[:max_works],
            excerpt=excerpt,
        )

    @property
    def is_empty(self) -> bool:
        """True when no enrichment material was found at all."""
        return not self.quotes and not self.works and self.excerpt is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "quotes": [quote.text for quote in self.quotes],
            "works": [work.title for work in self.works],
            "excerpt": (
                {"title": self.excerpt.work_title, "text": self.excerpt.text}
                if self.excerpt
                else None
            ),
        }


@dataclass(frozen=True)
class SubjectMaterial:
    """One entry of an aggregation result, keyed by subject."""
    subject: Subject
    bundle: SourceBundle


@dataclass(frozen=True)
class DialogueTurn:
    speaker_label: str
    utterance: str
    ordinal: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speaker": self.speaker_label,
            "content": self.utterance,
            "ordinal": self.ordinal,
        }


@dataclass(frozen=True)
class Transcript:
    """Non-empty ordered sequence of dialogue turns."""
    turns: Tuple[DialogueTurn, ...]

    def __post_init__(self):
        if not self.turns:
            raise ValueError("A transcript must contain at least one turn")
        for expected, turn in enumerate(self.turns):
            if turn.ordinal != expected:
                raise ValueError(
                    f"Turn ordinals must count up from 0, got {turn.ordinal} at position {expected}"
                )

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[DialogueTurn]:
        return iter(self.turns)

    def __getitem__(self, index: int) -> DialogueTurn:
        return self.turns[index]

    @property
    def speakers(self) -> List[str]:
        """Distinct speaker labels in order of first appearance."""
        seen: List[str] = []
        for turn in self.turns:
            if turn.speaker_label not in seen:
                seen.append(turn.speaker_label)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        return {"turns": [turn.to_dict() for turn in self.turns]}


@dataclass(frozen=True)
class GuestProfile:
    """A dinner guest known to a registry."""
    id: str
    name: str
    era: str = ""
    description: str = ""
    custom: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "era": self.era,
            "description": self.description,
            "custom": self.custom,
        }
