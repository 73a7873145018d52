"""Open Library bibliography source."""

from typing import List, Optional

import httpx

from ..config import Settings, get_settings
from ..exceptions import EmptyResult
from ..models import PageReference, Work
from ..utils.text import names_surname
from .base import SourceClient


class BibliographyClient(SourceClient):
    """Lists notable works of an author from Open Library."""

    source_name = "openlibrary"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None,
    ):
        settings = settings or get_settings()
        super().__init__(base_url or settings.openlibrary_url, http_client, settings)

    async def search_subject(self, name: str) -> Optional[PageReference]:
        """Resolve the author record for a name.

        The record is only accepted when its name, or one of its alternate
        names, contains the subject's surname.
        """
        try:
            data = await self._get_json("search/authors.json", {"q": name, "limit": 1})
            docs = data.get("docs") or []
            if not docs or not docs[0].get("key"):
                raise EmptyResult(f"No author record for {name!r}", source=self.source_name)
            author = docs[0]
            known_names = [author.get("name") or ""] + list(author.get("alternate_names") or [])
            if not any(names_surname(candidate, name) for candidate in known_names):
                raise EmptyResult(
                    f"Author record {author.get('name')!r} does not match {name!r}",
                    source=self.source_name,
                )
            key = author["key"].replace("/authors/", "")
            return PageReference(title=author.get("name") or name, key=key)
        except Exception as e:
            self._absorb(e, "Author search", subject=name)
            return None

    async def fetch_raw(self, reference: PageReference) -> List[str]:
        """Get non-empty work titles for an author record."""
        try:
            data = await self._get_json(
                f"authors/{reference.key}/works.json",
                {"limit": self.settings.works_fetch_limit},
            )
            titles = []
            for entry in (data.get("entries") or [])[: self.settings.works_fetch_limit]:
                title = (entry.get("title") or "").strip()
                if title:
                    titles.append(title)
            return titles
        except Exception as e:
            self._absorb(e, "Works fetch", author=reference.key)
            return []

    async def collect(self, subject: str) -> List[Work]:
        """Return up to ``max_works`` works for a subject."""
        reference = await self.search_subject(subject)
        if reference is None:
            return []
        titles = await self.fetch_raw(reference)
        return [Work(title=title) for title in titles[: self.settings.max_works]]
