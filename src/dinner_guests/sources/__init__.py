"""External text sources for biographical enrichment."""

from .base import SourceClient
from .bibliography import BibliographyClient
from .biography import BiographyClient, is_likely_person
from .fulltext import FullTextClient
from .mediawiki import MediaWikiClient
from .quotation import QuotationClient

__all__ = [
    "SourceClient",
    "MediaWikiClient",
    "BiographyClient",
    "QuotationClient",
    "BibliographyClient",
    "FullTextClient",
    "is_likely_person",
]
