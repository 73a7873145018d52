"""High-level service exposing the enrichment core to the application layer."""

from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx
import structlog

from .aggregation import MaterialAggregator
from .config import Settings, get_settings
from .dialogue import DialogueSegmenter
from .extraction import FALLBACK_DESCRIPTION, FactExtractor
from .models import GuestProfile, PersonFacts, Subject, SubjectMaterial, SubjectSuggestion, Transcript
from .roster import RequestContext
from .sources import BibliographyClient, BiographyClient, FullTextClient, QuotationClient

logger = structlog.get_logger(__name__)


class DinnerGuestsService:
    """Facade over the source clients, the extractor, the aggregator and the segmenter."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        biography: Optional[BiographyClient] = None,
        aggregator: Optional[MaterialAggregator] = None,
        extractor: Optional[FactExtractor] = None,
        segmenter: Optional[DialogueSegmenter] = None,
    ):
        """Initialize the service.

        Args:
            settings: Settings instance; the global one when omitted
            http_client: HTTP client shared by every source client; when
                omitted the service creates one and closes it on shutdown
            biography: Biography client override
            aggregator: Aggregator override
            extractor: Fact extractor override
            segmenter: Dialogue segmenter override
        """
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            follow_redirects=True,
            headers={"User-Agent": self.settings.user_agent},
        )
        self.biography = biography or BiographyClient(self.http_client, self.settings)
        self.aggregator = aggregator or MaterialAggregator(
            quotation=QuotationClient(self.http_client, self.settings),
            bibliography=BibliographyClient(self.http_client, self.settings),
            fulltext=FullTextClient(self.http_client, self.settings),
            settings=self.settings,
        )
        self.extractor = extractor or FactExtractor(self.settings)
        self.segmenter = segmenter or DialogueSegmenter()

    async def initialize(self) -> bool:
        """Initialize the service.

        Returns:
            True if initialization was successful
        """
        return True

    async def shutdown(self) -> None:
        """Shutdown the service and release resources."""
        if self._owns_client:
            await self.http_client.aclose()

    async def health_check(self) -> Dict[str, Any]:
        """Check service health.

        Returns:
            Dictionary with health status information
        """
        return {
            "status": "healthy",
            "http_client": "closed" if self.http_client.is_closed else "open",
            "request_timeout": self.settings.request_timeout,
            "branch_timeout": self.settings.branch_timeout,
        }

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.shutdown()

    def extract_facts(self, raw_biography_text: str, subject_name: Subject) -> PersonFacts:
        """Extract structured facts from a biography text."""
        return self.extractor.extract(raw_biography_text, subject_name)

    async def aggregate_material(self, subjects: Sequence[Subject]) -> List[SubjectMaterial]:
        """Aggregate quotes, works and excerpts for subjects, in input order."""
        return await self.aggregator.aggregate(list(subjects))

    def segment_dialogue(self, raw_generated_text: str) -> Transcript:
        """Split generated conversation text into speaker turns."""
        return self.segmenter.segment(raw_generated_text)

    async def lookup_person(self, name: Subject) -> Optional[PersonFacts]:
        """Fetch a subject's biography and extract facts from it.

        Returns:
            Facts, or None when no biography could be found
        """
        biography = await self.biography.collect(name)
        if not biography:
            logger.info("No biography found", subject=name)
            return None
        return self.extract_facts(biography, name)

    async def suggest_subjects(self, query: str) -> List[SubjectSuggestion]:
        """Autocomplete person names."""
        return await self.biography.suggest(query)

    async def add_custom_guest(self, name: Subject, context: RequestContext) -> GuestProfile:
        """Register a custom guest, filling era and description from a biography lookup."""
        log = logger.bind(request_id=context.request_id)
        facts = await self.lookup_person(name)
        if facts is None:
            log.info("Adding custom guest without biography", subject=name)
            return context.registry.add(name, era="", description=FALLBACK_DESCRIPTION)
        log.info("Adding custom guest", subject=name, era=facts.era, confidence=facts.confidence.value)
        return context.registry.add(name, era=facts.era, description=facts.description)

    async def aggregate_for_guests(
        self, guest_ids: Iterable[str], context: RequestContext
    ) -> List[SubjectMaterial]:
        """Aggregate material for registered guests, in the order of ``guest_ids``."""
        guests = context.registry.resolve(guest_ids)
        logger.bind(request_id=context.request_id).debug(
            "Aggregating for guests", guests=[guest.id for guest in guests]
        )
        return await self.aggregate_material([guest.name for guest in guests])
