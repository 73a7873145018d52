"""Dinner guests - biographical enrichment and dialogue segmentation core."""

from .aggregation import MaterialAggregator
from .config import Settings, get_settings, reset_settings
from .dialogue import DialogueSegmenter
from .exceptions import (
    ConfigurationError,
    DinnerGuestsError,
    EmptyResult,
    NetworkFailure,
    SourceError,
)
from .extraction import FactExtractor
from .models import (
    Confidence,
    DialogueTurn,
    Excerpt,
    GuestProfile,
    PageReference,
    PersonFacts,
    Quote,
    SourceBundle,
    Subject,
    SubjectMaterial,
    SubjectSuggestion,
    Transcript,
    Work,
)
from .roster import GuestRegistry, RequestContext
from .service import DinnerGuestsService

__all__ = [
    "DinnerGuestsService",
    "MaterialAggregator",
    "DialogueSegmenter",
    "FactExtractor",
    "GuestRegistry",
    "RequestContext",
    "Settings",
    "get_settings",
    "reset_settings",
    "DinnerGuestsError",
    "SourceError",
    "NetworkFailure",
    "EmptyResult",
    "ConfigurationError",
    "Confidence",
    "PersonFacts",
    "Quote",
    "Work",
    "Excerpt",
    "PageReference",
    "SourceBundle",
    "Subject",
    "SubjectMaterial",
    "SubjectSuggestion",
    "DialogueTurn",
    "Transcript",
    "GuestProfile",
]

__version__ = "0.1.0"
