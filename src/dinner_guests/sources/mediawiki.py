"""Shared MediaWiki API plumbing for the Wikipedia and Wikiquote sources."""

from typing import Any, Dict, List, Optional

from ..exceptions import EmptyResult
from ..models import PageReference
from .base import SourceClient


class MediaWikiClient(SourceClient):
    """Client for a MediaWiki ``api.php`` endpoint."""

    source_name = "mediawiki"

    async def _search(self, query: str, limit: int, snippet: bool = False) -> List[Dict[str, Any]]:
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
            "format": "json",
            "formatversion": 2,
        }
        if snippet:
            params["srprop"] = "snippet"
        data = await self._get_json("", params)
        hits = (data.get("query") or {}).get("search") or []
        if not hits:
            raise EmptyResult(f"No search results for {query!r}", source=self.source_name)
        return hits

    async def _page_extract(self, title: str, intro_only: bool) -> str:
        params = {
            "action": "query",
            "titles": title,
            "prop": "extracts",
            "explaintext": 1,
            "format": "json",
            "formatversion": 2,
        }
        # MediaWiki treats any value of a boolean parameter as true
        if intro_only:
            params["exintro"] = 1
        data = await self._get_json("", params)
        pages = (data.get("query") or {}).get("pages") or []
        extract = pages[0].get("extract", "") if pages else ""
        if not extract or not extract.strip():
            raise EmptyResult(f"No extract for page {title!r}", source=self.source_name)
        return extract

    async def search_subject(self, name: str) -> Optional[PageReference]:
        try:
            hit = (await self._search(name, limit=1))[0]
            return PageReference(title=hit["title"], key=str(hit.get("pageid", hit["title"])))
        except Exception as e:
            self._absorb(e, "Search", subject=name)
            return None
