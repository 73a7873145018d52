"""Base interface for external text sources."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

import httpx
import structlog

from ..config import Settings, get_settings
from ..exceptions import EmptyResult, NetworkFailure
from ..models import PageReference

logger = structlog.get_logger(__name__)


class SourceClient(ABC):
    """One read-only external text source.

    Public methods never raise: transport failures and empty answers are
    logged and turned into ``None`` or an empty value. The private ``_get_*``
    helpers raise ``NetworkFailure`` / ``EmptyResult`` so that each public
    method can absorb them at a single boundary.
    """

    source_name = "source"

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Root URL of the source API
            http_client: Shared client; when omitted one is created lazily and
                closed by ``aclose``
            settings: Settings providing timeout, user agent and thresholds
        """
        self.settings = settings or get_settings()
        self.base_url = base_url.rstrip("/")
        self._client = http_client
        self._owns_client = http_client is None
        self.logger = logger.bind(source=self.source_name)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                follow_redirects=True,
                headers={"User-Agent": self.settings.user_agent},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        url = self._url(path)
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(
                f"HTTP {e.response.status_code} from {url}", source=self.source_name
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(
                f"Request to {url} failed: {e.__class__.__name__}", source=self.source_name
            ) from e
        return response

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise EmptyResult(
                f"Undecodable JSON from {response.url}", source=self.source_name
            ) from e

    async def _get_text(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        response = await self._get(path, params)
        text = response.text
        if not text.strip():
            raise EmptyResult(f"Empty body from {response.url}", source=self.source_name)
        return text

    def _absorb(self, exc: Exception, operation: str, **context) -> None:
        """Log a failure that is being converted into an empty result."""
        if isinstance(exc, EmptyResult):
            self.logger.info(f"{operation} found nothing", reason=str(exc), **context)
        elif isinstance(exc, NetworkFailure):
            self.logger.warning(f"{operation} failed", error=str(exc), **context)
        else:
            self.logger.warning(
                f"{operation} failed unexpectedly",
                error=str(exc),
                error_type=exc.__class__.__name__,
                **context,
            )

    @abstractmethod
    async def search_subject(self, name: str) -> Optional[PageReference]:
        """Locate the best-matching page for a subject name.

        Returns:
            Page reference, or None on no match or failure
        """
        pass

    @abstractmethod
    async def fetch_raw(self, reference: PageReference) -> Union[str, List[str]]:
        """Retrieve content for a located page.

        Returns:
            Raw text (or list of texts); empty on failure
        """
        pass

    @abstractmethod
    async def collect(self, subject: str) -> Any:
        """Run search and fetch for a subject and return this source's material."""
        pass
