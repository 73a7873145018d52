"""Test configuration and fixtures for dinner-guests tests."""

from typing import Callable

import httpx
import pytest

from dinner_guests.config import Settings

WIKIPEDIA_URL = "https://en.wikipedia.test/w/api.php"
WIKIQUOTE_URL = "https://en.wikiquote.test/w/api.php"
OPENLIBRARY_URL = "https://openlibrary.test"
GUTENDEX_URL = "https://gutendex.test"

SOCRATES_BIO = (
    "Socrates (c. 470 – 399 BC) was a Greek philosopher from Athens who is credited "
    "as the founder of Western philosophy. He is an enigmatic figure known chiefly "
    "through the accounts of later classical writers."
)

LEONARDO_BIO = (
    "Leonardo di ser Piero da Vinci (15 April 1452 – 2 May 1519) was an Italian polymath "
    "of the High Renaissance who was active as a painter, draughtsman, engineer, "
    "scientist, theorist, sculptor, and architect."
)


@pytest.fixture
def settings():
    """Settings pointing every source at a test host."""
    return Settings(
        wikipedia_url=WIKIPEDIA_URL,
        wikiquote_url=WIKIQUOTE_URL,
        openlibrary_url=OPENLIBRARY_URL,
        gutendex_url=GUTENDEX_URL,
        request_timeout=5.0,
        branch_timeout=2.0,
    )


@pytest.fixture
def http_client_factory():
    """Build httpx clients backed by a request handler instead of the network."""
    def factory(handler: Callable) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def socrates_bio():
    return SOCRATES_BIO


@pytest.fixture
def leonardo_bio():
    return LEONARDO_BIO
