"""Tests for concurrent material aggregation."""

import asyncio

import httpx
import pytest

from dinner_guests.aggregation import MaterialAggregator
from dinner_guests.models import Excerpt, Quote, Work


class FakeSource:
    """Source stand-in whose collect result, delay and failure are scripted per subject."""

    def __init__(self, results=None, delays=None, errors=None, empty=None):
        self.results = results or {}
        self.delays = delays or {}
        self.errors = errors or {}
        self.empty = empty
        self.calls = []
        self.closed = False

    async def collect(self, subject):
        self.calls.append(subject)
        await asyncio.sleep(self.delays.get(subject, 0))
        if subject in self.errors:
            raise self.errors[subject]
        return self.results.get(subject, self.empty)

    async def aclose(self):
        self.closed = True


def make_aggregator(settings, quotation=None, bibliography=None, fulltext=None):
    return MaterialAggregator(
        quotation=quotation or FakeSource(empty=[]),
        bibliography=bibliography or FakeSource(empty=[]),
        fulltext=fulltext or FakeSource(),
        settings=settings,
    )


class TestAggregateSubject:
    """Test one subject's fan-out."""

    @pytest.mark.asyncio
    async def test_merges_branches(self, settings):
        aggregator = make_aggregator(
            settings,
            quotation=FakeSource({"Plato": [Quote("Q1."), Quote("Q2.")]}),
            bibliography=FakeSource({"Plato": [Work("Republic")]}),
            fulltext=FakeSource({"Plato": Excerpt("Republic", "Text")}),
        )
        bundle = await aggregator.aggregate_subject("Plato")
        assert bundle.subject == "Plato"
        assert bundle.quotes == (Quote("Q1."), Quote("Q2."))
        assert bundle.works == (Work("Republic"),)
        assert bundle.excerpt == Excerpt("Republic", "Text")
        assert not bundle.is_empty

    @pytest.mark.asyncio
    async def test_failed_branch_is_isolated(self, settings):
        """An exception in one branch leaves the siblings intact."""
        aggregator = make_aggregator(
            settings,
            quotation=FakeSource({"Plato": [Quote("Q1.")]}),
            bibliography=FakeSource({"Plato": [Work("Republic")]}),
            fulltext=FakeSource(errors={"Plato": RuntimeError("boom")}),
        )
        bundle = await aggregator.aggregate_subject("Plato")
        assert bundle.quotes == (Quote("Q1."),)
        assert bundle.works == (Work("Republic"),)
        assert bundle.excerpt is None

    @pytest.mark.asyncio
    async def test_slow_branch_times_out(self, settings):
        fast = settings.model_copy(update={"branch_timeout": 0.05})
        aggregator = make_aggregator(
            fast,
            quotation=FakeSource({"Plato": [Quote("Q1.")]}, delays={"Plato": 5}),
            bibliography=FakeSource({"Plato": [Work("Republic")]}),
        )
        bundle = await aggregator.aggregate_subject("Plato")
        assert bundle.quotes == ()
        assert bundle.works == (Work("Republic"),)

    @pytest.mark.asyncio
    async def test_no_branch_timeout(self, settings):
        unbounded = settings.model_copy(update={"branch_timeout": None})
        aggregator = make_aggregator(
            unbounded, quotation=FakeSource({"Plato": [Quote("Q1.")]}, delays={"Plato": 0.01})
        )
        bundle = await aggregator.aggregate_subject("Plato")
        assert bundle.quotes == (Quote("Q1."),)

    @pytest.mark.asyncio
    async def test_lists_are_bounded(self, settings):
        aggregator = make_aggregator(
            settings,
            quotation=FakeSource({"Plato": [Quote(f"Q{i}.") for i in range(9)]}),
            bibliography=FakeSource({"Plato": [Work(f"W{i}") for i in range(9)]}),
        )
        bundle = await aggregator.aggregate_subject("Plato")
        assert len(bundle.quotes) == 5
        assert len(bundle.works) == 5

    @pytest.mark.asyncio
    async def test_all_branches_empty(self, settings):
        bundle = await make_aggregator(settings).aggregate_subject("Nobody")
        assert bundle.is_empty
        assert bundle.to_dict() == {"subject": "Nobody", "quotes": [], "works": [], "excerpt": None}


class TestAggregate:
    """Test the multi-subject fan-out."""

    @pytest.mark.asyncio
    async def test_preserves_input_order(self, settings):
        """Results follow input order even when a later subject finishes first."""
        quotation = FakeSource(
            {"A": [Quote("From A.")], "B": [Quote("From B.")]},
            delays={"A": 0.05, "B": 0},
        )
        aggregator = make_aggregator(settings, quotation=quotation)
        results = await aggregator.aggregate(["A", "B"])
        assert [entry.subject for entry in results] == ["A", "B"]
        assert results[0].bundle.quotes == (Quote("From A."),)
        assert results[1].bundle.quotes == (Quote("From B."),)

    @pytest.mark.asyncio
    async def test_cancelled_branch_confined_to_subject(self, settings):
        """A branch ending in CancelledError is emptied like any other failure."""
        aggregator = make_aggregator(
            settings,
            quotation=FakeSource(
                {"A": [Quote("From A.")]}, errors={"B": asyncio.CancelledError()}
            ),
            bibliography=FakeSource({"A": [Work("Republic")], "B": [Work("Phaedo")]}),
        )
        results = await aggregator.aggregate(["A", "B"])
        assert results[0].bundle.quotes == (Quote("From A."),)
        assert results[1].bundle.quotes == ()
        assert results[1].bundle.works == (Work("Phaedo"),)

    @pytest.mark.asyncio
    async def test_failure_confined_to_subject(self, settings):
        aggregator = make_aggregator(
            settings,
            quotation=FakeSource({"A": [Quote("From A.")], "B": [Quote("From B.")]}),
            fulltext=FakeSource({"A": Excerpt("Book", "Text")}, errors={"B": ValueError("bad")}),
        )
        results = await aggregator.aggregate(["A", "B"])
        assert results[0].bundle.excerpt == Excerpt("Book", "Text")
        assert results[1].bundle.excerpt is None
        assert results[1].bundle.quotes == (Quote("From B."),)

    @pytest.mark.asyncio
    async def test_no_caching(self, settings):
        quotation = FakeSource(empty=[])
        aggregator = make_aggregator(settings, quotation=quotation)
        await aggregator.aggregate(["A"])
        await aggregator.aggregate(["A"])
        assert quotation.calls == ["A", "A"]

    @pytest.mark.asyncio
    async def test_empty_subject_list(self, settings):
        assert await make_aggregator(settings).aggregate([]) == []

    @pytest.mark.asyncio
    async def test_aclose_closes_sources(self, settings):
        sources = [FakeSource(), FakeSource(), FakeSource()]
        aggregator = make_aggregator(settings, *sources)
        await aggregator.aclose()
        assert all(source.closed for source in sources)


class TestAggregateOverHttp:
    """Run the real source clients against a mocked transport."""

    @pytest.mark.asyncio
    async def test_end_to_end(self, settings, http_client_factory):
        def handler(request):
            host = request.url.host
            if host == "en.wikiquote.test":
                if request.url.params.get("list") == "search":
                    return httpx.Response(200, json={"query": {"search": [{"title": "Plato", "pageid": 1}]}})
                extract = "Wise men speak because they have something to say; fools because they have to say something."
                return httpx.Response(
                    200, json={"query": {"pages": [{"title": "Plato", "extract": extract}]}}
                )
            if host == "openlibrary.test":
                return httpx.Response(503)
            if host == "gutendex.test":
                raise httpx.ReadTimeout("timed out", request=request)
            raise AssertionError(f"Unexpected request {request.url}")

        http_client = http_client_factory(handler)
        aggregator = MaterialAggregator.from_settings(settings, http_client)
        results = await aggregator.aggregate(["Plato"])
        await http_client.aclose()

        bundle = results[0].bundle
        assert [quote.text for quote in bundle.quotes] == [
            "Wise men speak because they have something to say; fools because they have to say something."
        ]
        assert bundle.works == ()
        assert bundle.excerpt is None
