"""Wikipedia biography source."""

import re
from typing import List, Optional

import httpx

from ..config import Settings, get_settings
from ..models import PageReference, SubjectSuggestion
from ..utils.text import collapse_whitespace, strip_html
from .mediawiki import MediaWikiClient

# Titles of pages about events, lists, works or institutions rather than people
NON_PERSON_PATTERNS = [
    re.compile(r"^(Murder|Death|Assassination|Killing|Execution) of ", re.IGNORECASE),
    re.compile(r"^(List|Timeline|History|Bibliography|Discography|Filmography) of ", re.IGNORECASE),
    re.compile(
        r"\((album|film|movie|song|book|novel|TV series|band|company|organization)\)$",
        re.IGNORECASE,
    ),
    re.compile(r"\(disambiguation\)$", re.IGNORECASE),
    re.compile(r"^The .+ (album|film|movie|song|book|novel|TV series)$", re.IGNORECASE),
    re.compile(r" (album|film|movie|song|discography|filmography|bibliography)$", re.IGNORECASE),
    re.compile(r"^(Battle|Siege|War|Treaty|Act) of ", re.IGNORECASE),
    re.compile(
        r" (massacre|riot|revolution|rebellion|uprising|incident|scandal|controversy"
        r"|conspiracy|trial|case)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(University|College|School|Institute|Museum|Library|Hospital|Church|Cathedral) of ",
        re.IGNORECASE,
    ),
]


def is_likely_person(title: str) -> bool:
    """Check whether a page title plausibly names a person."""
    return not any(pattern.search(title) for pattern in NON_PERSON_PATTERNS)


class BiographyClient(MediaWikiClient):
    """Fetches the introductory extract of a person's Wikipedia article."""

    source_name = "wikipedia"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None,
    ):
        settings = settings or get_settings()
        super().__init__(base_url or settings.wikipedia_url, http_client, settings)

    async def fetch_raw(self, reference: PageReference) -> str:
        """Get the plain-text introduction of a located article."""
        try:
            extract = await self._page_extract(reference.title, intro_only=True)
        except Exception as e:
            self._absorb(e, "Biography fetch", page=reference.title)
            return ""
        return strip_html(extract).strip()

    async def collect(self, subject: str) -> str:
        """Return the biography introduction for a subject, or an empty string."""
        reference = await self.search_subject(subject)
        if reference is None:
            return ""
        return await self.fetch_raw(reference)

    async def suggest(self, query: str) -> List[SubjectSuggestion]:
        """Autocomplete person names for a partial query."""
        if not query or len(query.strip()) < 2:
            return []

        try:
            hits = await self._search(
                query.strip(), limit=self.settings.suggestion_fetch_limit, snippet=True
            )
        except Exception as e:
            self._absorb(e, "Autocomplete", query=query)
            return []

        suggestions = []
        for hit in hits:
            title = hit.get("title") or ""
            if not title or not is_likely_person(title):
                continue
            snippet = collapse_whitespace(strip_html(hit.get("snippet") or ""))
            suggestions.append(
                SubjectSuggestion(
                    title=title,
                    snippet=snippet[: self.settings.suggestion_snippet_length],
                )
            )
            if len(suggestions) >= self.settings.suggestion_limit:
                break

        self.logger.debug("Autocomplete suggestions", query=query, count=len(suggestions))
        return suggestions
