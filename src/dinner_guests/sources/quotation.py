"""Wikiquote quotation source."""

import re
from typing import List, Optional

import httpx

from ..config import Settings, get_settings
from ..models import PageReference, Quote
from .mediawiki import MediaWikiClient

_YEAR_HEADER = re.compile(r"^\d{4}")
_SECTION_LABEL = re.compile(r"^[\w\s]+:$")
# ’ doubles as the apostrophe; it only closes a line opened with ‘
_TERMINAL = (".", "!", "?", '"', "”", "»")


class QuotationClient(MediaWikiClient):
    """Mines quote-like lines from a person's Wikiquote page."""

    source_name = "wikiquote"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None,
    ):
        settings = settings or get_settings()
        super().__init__(base_url or settings.wikiquote_url, http_client, settings)

    def is_quote(self, line: str) -> bool:
        """Whether a stripped line of page text reads like a quotation."""
        return (
            self.settings.quote_min_length < len(line) < self.settings.quote_max_length
            and not line.startswith("==")
            and not _YEAR_HEADER.match(line)
            and not _SECTION_LABEL.match(line)
            and (line.endswith(_TERMINAL) or (line.startswith("‘") and line.endswith("’")))
        )

    def parse_quotes(self, text: str) -> List[Quote]:
        """Extract quotes from page text, in source order."""
        quotes = []
        for line in text.splitlines():
            stripped = line.strip()
            if self.is_quote(stripped):
                quotes.append(Quote(text=stripped))
        return quotes

    async def fetch_raw(self, reference: PageReference) -> str:
        """Get the full plain-text extract of a Wikiquote page."""
        try:
            return await self._page_extract(reference.title, intro_only=False)
        except Exception as e:
            self._absorb(e, "Quote page fetch", page=reference.title)
            return ""

    async def collect(self, subject: str) -> List[Quote]:
        """Return up to ``max_quotes`` quotes for a subject."""
        reference = await self.search_subject(subject)
        if reference is None:
            return []
        quotes = self.parse_quotes(await self.fetch_raw(reference))
        self.logger.debug("Quotes parsed", subject=subject, page=reference.title, count=len(quotes))
        return quotes[: self.settings.max_quotes]
