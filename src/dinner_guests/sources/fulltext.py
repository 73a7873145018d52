"""Gutendex (Project Gutenberg) full-text source."""

import re
from typing import List, Optional

import httpx

from ..config import Settings, get_settings
from ..exceptions import EmptyResult
from ..models import Excerpt, PageReference
from ..utils.text import collapse_whitespace, names_surname, surname
from .base import SourceClient

# Front-matter markers; the excerpt starts on the line after the furthest one found
START_MARKERS = ("*** START OF", "***START OF", "CHAPTER", "BOOK ")

PLAIN_TEXT_FORMATS = (
    "text/plain; charset=utf-8",
    "text/plain",
    "text/plain; charset=us-ascii",
)

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n+")


class FullTextClient(SourceClient):
    """Pulls a short public-domain excerpt written by a subject."""

    source_name = "gutendex"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None,
    ):
        settings = settings or get_settings()
        super().__init__(base_url or settings.gutendex_url, http_client, settings)

    async def search_candidates(self, name: str) -> List[PageReference]:
        """Find books with a confirmed author match, in catalog order."""
        try:
            data = await self._get_json("books", {"search": surname(name)})
            candidates = []
            for book in data.get("results") or []:
                authors = book.get("authors") or []
                if not any(names_surname(author.get("name") or "", name) for author in authors):
                    continue
                formats = book.get("formats") or {}
                text_url = next((formats[f] for f in PLAIN_TEXT_FORMATS if formats.get(f)), None)
                candidates.append(
                    PageReference(
                        title=book.get("title") or "",
                        key=str(book.get("id", "")),
                        metadata={"text_url": text_url},
                    )
                )
            if not candidates:
                raise EmptyResult(f"No books by {name!r}", source=self.source_name)
            return candidates
        except Exception as e:
            self._absorb(e, "Book search", subject=name)
            return []

    async def search_subject(self, name: str) -> Optional[PageReference]:
        candidates = await self.search_candidates(name)
        return candidates[0] if candidates else None

    async def fetch_raw(self, reference: PageReference) -> str:
        """Get the plain-text body of a book."""
        text_url = reference.metadata.get("text_url")
        if not text_url:
            self.logger.debug("No plain text format", book=reference.title)
            return ""
        try:
            return await self._get_text(text_url)
        except Exception as e:
            self._absorb(e, "Book text fetch", book=reference.title)
            return ""

    def extract_excerpt(self, text: str) -> str:
        """Cut a few clean paragraphs from just after the front matter."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")

        start = 0
        for marker in START_MARKERS:
            index = text.find(marker)
            if index == -1:
                continue
            line_end = text.find("\n", index)
            if line_end != -1:
                start = max(start, line_end + 1)

        window = text[start : start + self.settings.excerpt_window]
        paragraphs = [collapse_whitespace(p) for p in _PARAGRAPH_BREAK.split(window)]
        kept = [
            p
            for p in paragraphs
            if self.settings.paragraph_min_length < len(p) < self.settings.paragraph_max_length
        ]
        return "\n\n".join(kept[: self.settings.excerpt_max_paragraphs])

    async def collect(self, subject: str) -> Optional[Excerpt]:
        """Return the first non-empty excerpt among the candidate books."""
        candidates = await self.search_candidates(subject)
        for book in candidates[: self.settings.fulltext_candidates]:
            excerpt = self.extract_excerpt(await self.fetch_raw(book))
            if excerpt:
                self.logger.debug("Excerpt found", subject=subject, book=book.title)
                return Excerpt(work_title=book.title, text=excerpt)
        return None
