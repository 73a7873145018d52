"""Concurrent per-subject aggregation of quotes, works and excerpts."""

import asyncio
from typing import Any, Awaitable, List, Optional, Sequence

import httpx
import structlog

from .config import Settings, get_settings
from .models import SourceBundle, Subject, SubjectMaterial
from .sources import BibliographyClient, FullTextClient, QuotationClient
from .utils.logging import log_exception

logger = structlog.get_logger(__name__)


class MaterialAggregator:
    """Fans out to the quotation, bibliography and full-text sources.

    Each branch is isolated: an exception or timeout in one branch yields
    that branch's empty value and never touches its siblings. Nothing is
    cached between calls.
    """

    def __init__(
        self,
        quotation: QuotationClient,
        bibliography: BibliographyClient,
        fulltext: FullTextClient,
        settings: Optional[Settings] = None,
    ):
        self.quotation = quotation
        self.bibliography = bibliography
        self.fulltext = fulltext
        self.settings = settings or get_settings()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "MaterialAggregator":
        """Build an aggregator with the default source clients."""
        settings = settings or get_settings()
        return cls(
            quotation=QuotationClient(http_client, settings),
            bibliography=BibliographyClient(http_client, settings),
            fulltext=FullTextClient(http_client, settings),
            settings=settings,
        )

    async def aclose(self) -> None:
        for client in (self.quotation, self.bibliography, self.fulltext):
            await client.aclose()

    async def _branch(self, awaitable: Awaitable[Any]) -> Any:
        timeout = self.settings.branch_timeout
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=timeout)

    async def aggregate_subject(self, subject: Subject) -> SourceBundle:
        """Collect all material for one subject."""
        branches = ("quotes", "works", "excerpt")
        results = await asyncio.gather(
            self._branch(self.quotation.collect(subject)),
            self._branch(self.bibliography.collect(subject)),
            self._branch(self.fulltext.collect(subject)),
            return_exceptions=True,
        )

        outcome = {}
        for branch, result in zip(branches, results):
            if isinstance(result, BaseException):
                log_exception(
                    logger, result, "Source branch failed", level="warning",
                    subject=subject, branch=branch,
                )
                result = None
            outcome[branch] = result

        bundle = SourceBundle.build(
            subject,
            quotes=outcome["quotes"] or (),
            works=outcome["works"] or (),
            excerpt=outcome["excerpt"],
            max_quotes=self.settings.max_quotes,
            max_works=self.settings.max_works,
        )
        logger.info(
            "Source material aggregated",
            subject=subject,
            quotes=len(bundle.quotes),
            works=len(bundle.works),
            has_excerpt=bundle.excerpt is not None,
        )
        return bundle

    async def aggregate(self, subjects: Sequence[Subject]) -> List[SubjectMaterial]:
        """Collect material for several subjects concurrently, keeping input order."""
        bundles = await asyncio.gather(*(self.aggregate_subject(s) for s in subjects))
        return [
            SubjectMaterial(subject=subject, bundle=bundle)
            for subject, bundle in zip(subjects, bundles)
        ]
