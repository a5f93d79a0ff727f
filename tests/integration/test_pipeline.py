"""
Integration tests for the feed translation pipeline.

These run the full request path (extraction, glossary, batching,
reinsertion, events) against a scripted backend.
"""

import pytest

from feedtrans.core import pipeline as pipeline_module
from feedtrans.core.events import EventChannel, CompleteEvent, ErrorEvent, is_terminal
from feedtrans.core.exceptions import BackendError, ExtractionEmptyError
from feedtrans.core.models import FeedTranslationJob
from feedtrans.core.pipeline import FeedTranslationPipeline, PipelineConfig


def make_job(document, /, **overrides):
    values = dict(
        document=document,
        source_lang="bg",
        target_lang="en",
        industry_id="luxury-watches-jewellery",
        api_key="sk-ant-test",
    )
    values.update(overrides)
    return FeedTranslationJob(**values)


def make_pipeline(backend, **config):
    config.setdefault("retry_delay", 0.0)
    return FeedTranslationPipeline(
        PipelineConfig(**config),
        backend_factory=lambda api_key, cfg: backend
    )


async def run_and_collect(pipeline, job):
    channel = EventChannel()
    result = await pipeline.run(job, channel)
    events = await channel.collect()
    return result, events, channel


@pytest.fixture
def use_profile(monkeypatch):
    """Make every industry id resolve to the given profile."""
    def apply(profile):
        monkeypatch.setattr(pipeline_module, "resolve_industry", lambda industry_id, context=None: profile)
    return apply


class TestGlossaryOnlyRun:

    @pytest.mark.asyncio
    async def test_shared_description_resolved_without_calls(
        self, scripted_backend, jewellery_profile, use_profile
    ):
        use_profile(jewellery_profile)
        feed = (
            "<products>"
            "<product><id>1</id><short_description>Розово злато</short_description></product>"
            "<product><id>2</id><short_description>Розово злато</short_description></product>"
            "</products>"
        )
        backend = scripted_backend()

        result, events, channel = await run_and_collect(
            make_pipeline(backend), make_job(feed, fields=["short_description"])
        )

        assert backend.call_count == 0
        assert result.translated_document == (
            "<products>"
            "<product><id>1</id><short_description>Rose Gold</short_description></product>"
            "<product><id>2</id><short_description>Rose Gold</short_description></product>"
            "</products>"
        )
        assert result.glossary_hits == 1
        assert result.api_calls == 0

        stats = next(e for e in events if e.type == "stats")
        assert (stats.total_products, stats.total_items, stats.unique_items) == (2, 2, 1)

        progress = [e for e in events if e.type == "progress"]
        assert [(e.completed, e.total, e.percent) for e in progress] == [(1, 1, 100)]

        complete = events[-1]
        assert isinstance(complete, CompleteEvent)
        assert complete.translation_count == 1
        assert complete.message == "Successfully translated 1 unique texts."
        assert channel.closed


class TestFullRun:

    @pytest.mark.asyncio
    async def test_event_sequence(self, sample_feed, scripted_backend, jewellery_profile, use_profile):
        use_profile(jewellery_profile)
        backend = scripted_backend()

        result, events, _ = await run_and_collect(make_pipeline(backend), make_job(sample_feed))

        assert [e.type for e in events] == [
            "status", "status", "stats", "status", "progress", "progress", "status", "complete",
        ]
        assert events[0].message == "Reading XML feed..."
        assert events[1].message == "Parsing feed structure..."
        assert events[3].message == (
            "Found 10 unique texts to translate (12 total occurrences across 2 products)..."
        )
        assert events[6].message == "Applying translations to feed..."
        assert [(e.completed, e.total) for e in events if e.type == "progress"] == [(1, 10), (10, 10)]
        assert sum(1 for e in events if is_terminal(e)) == 1

    @pytest.mark.asyncio
    async def test_translations_applied(self, sample_feed, scripted_backend, jewellery_profile, use_profile):
        use_profile(jewellery_profile)
        backend = scripted_backend()

        result, _, _ = await run_and_collect(make_pipeline(backend), make_job(sample_feed))
        output = result.translated_document

        assert backend.call_count == 1
        assert backend.closed
        assert len(result.translations) == 10
        assert "Розово злато" not in output
        assert output.count("Rose Gold") == 3
        assert "<category>EN(Пръстени)</category>" in output
        assert '<option name="EN(Размер)">' in output
        assert "<value>52</value>" in output
        assert "<name>18K</name>" in output
        # Titles are not in the default selection
        assert "<title>Пръстен Aurora</title>" in output

    @pytest.mark.asyncio
    async def test_batches_follow_config(self, sample_feed, scripted_backend, empty_profile, use_profile):
        use_profile(empty_profile)
        backend = scripted_backend()

        result, events, _ = await run_and_collect(
            make_pipeline(backend, batch_size=4), make_job(sample_feed)
        )

        assert backend.call_count == 3
        assert [e.completed for e in events if e.type == "progress"] == [0, 4, 8, 10]
        assert result.api_calls == 3

    @pytest.mark.asyncio
    async def test_translate_returns_result(self, sample_feed, scripted_backend):
        """Bundled profiles resolve through the real registry."""
        backend = scripted_backend()

        result = await make_pipeline(backend).translate(make_job(sample_feed))

        # "Обеци" is in the bundled jewellery glossary
        assert result.translations["Обеци"] == "Earrings"
        assert result.glossary_hits == 1
        assert result.stats.unique_items == 10


class TestRejectedJobs:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"api_key": ""},
        {"industry_id": ""},
        {"source_lang": ""},
        {"target_lang": ""},
        {"document": ""},
    ])
    async def test_missing_fields(self, sample_feed, scripted_backend, overrides):
        backend = scripted_backend()

        result, events, channel = await run_and_collect(
            make_pipeline(backend), make_job(sample_feed, **overrides)
        )

        assert result is None
        assert len(events) == 1
        assert isinstance(events[0], ErrorEvent)
        assert events[0].message == "Missing required fields"
        assert channel.closed
        assert backend.call_count == 0

    @pytest.mark.asyncio
    async def test_unknown_industry(self, sample_feed, scripted_backend):
        result, events, _ = await run_and_collect(
            make_pipeline(scripted_backend()), make_job(sample_feed, industry_id="space-tourism")
        )

        assert result is None
        assert [e.to_dict() for e in events] == [{"type": "error", "message": "Unknown industry"}]

    @pytest.mark.asyncio
    async def test_unknown_field(self, sample_feed, scripted_backend):
        _, events, _ = await run_and_collect(
            make_pipeline(scripted_backend()), make_job(sample_feed, fields=["price"])
        )

        assert events[-1].message == "Unknown field type: price"

    @pytest.mark.asyncio
    async def test_nothing_to_translate(self, scripted_backend):
        feed = "<products><product><id>1</id><short_description>Rose Gold</short_description></product></products>"
        backend = scripted_backend()

        result, events, _ = await run_and_collect(make_pipeline(backend), make_job(feed))

        assert result is None
        assert [e.type for e in events] == ["status", "status", "error"]
        assert events[-1].message == ExtractionEmptyError.DEFAULT_MESSAGE
        assert backend.call_count == 0


class TestProviderFailure:

    @pytest.mark.asyncio
    async def test_failure_is_atomic(self, sample_feed, scripted_backend, empty_profile, use_profile):
        use_profile(empty_profile)
        down = BackendError("scripted", "connection reset")
        backend = scripted_backend([down, down, down])

        result, events, channel = await run_and_collect(make_pipeline(backend), make_job(sample_feed))

        assert result is None
        assert backend.call_count == 3
        assert backend.closed
        assert channel.closed
        assert not any(e.type == "complete" for e in events)
        assert events[-1].message == "Translation failed: Backend 'scripted' failed: connection reset"
        assert sum(1 for e in events if is_terminal(e)) == 1

    @pytest.mark.asyncio
    async def test_recovers_within_retry_budget(self, sample_feed, scripted_backend, empty_profile, use_profile):
        use_profile(empty_profile)
        backend = scripted_backend([BackendError("scripted", "rate limited"), "```json\nnot an array\n```"])

        result, events, _ = await run_and_collect(make_pipeline(backend), make_job(sample_feed))

        assert backend.call_count == 3
        assert isinstance(events[-1], CompleteEvent)
        assert result.translation_count == 10


class TestCancellation:

    @pytest.mark.asyncio
    async def test_cancel_stops_between_batches(self, sample_feed, scripted_backend, empty_profile, use_profile):
        use_profile(empty_profile)
        channel = EventChannel()

        class CancellingBackend(scripted_backend):
            async def translate(self, request):
                channel.cancel()
                return await super().translate(request)

        backend = CancellingBackend()
        result = await make_pipeline(backend, batch_size=4).run(make_job(sample_feed), channel)

        assert result is None
        assert backend.call_count == 1
        assert backend.closed
        assert channel.closed
        assert channel.terminal_event is None
