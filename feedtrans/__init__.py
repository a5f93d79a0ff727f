"""
feedtrans: Product Feed Translation with LLMs

Translates the text content of CloudCart XML product feeds while leaving
the feed structure untouched:

1. Extract translatable fragments per field type and deduplicate them
2. Resolve known terms from an industry glossary
3. Translate the rest in ordered, retried batches through Claude
4. Reinsert translations longest-match-first

Usage:
    from feedtrans import FeedTranslationPipeline, FeedTranslationJob, EventChannel

    job = FeedTranslationJob(
        document=xml_text,
        source_lang="bg",
        target_lang="en",
        industry_id="luxury-watches-jewellery",
        api_key=api_key,
    )
    channel = EventChannel()
    task = asyncio.create_task(FeedTranslationPipeline().run(job, channel))
    async for event in channel:
        print(event.to_dict())
"""

__version__ = "1.0.0"
__author__ = "feedtrans Team"
__license__ = "MIT"

from feedtrans.core.models import (
    FieldKind,
    TranslatableItem,
    DedupedEntry,
    IndustryProfile,
    Batch,
    FeedStats,
    FeedTranslationJob,
    FeedTranslationResult,
)
from feedtrans.core.events import (
    EventChannel,
    StatusEvent,
    StatsEvent,
    ProgressEvent,
    CompleteEvent,
    ErrorEvent,
)
from feedtrans.core.pipeline import FeedTranslationPipeline, PipelineConfig
from feedtrans.extraction.feed_parser import FeedParser, extract_translatables, deduplicate_items
from feedtrans.extraction.language import is_likely_source_language
from feedtrans.rendering.reinsertion import apply_translations
from feedtrans.translation.glossary.manager import GlossaryManager
from feedtrans.translation.glossary.industries import get_industry, list_industries, resolve_industry
from feedtrans.utils.batch_translator import BatchTranslator

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "FieldKind", "TranslatableItem", "DedupedEntry", "IndustryProfile", "Batch",
    "FeedStats", "FeedTranslationJob", "FeedTranslationResult",
    "EventChannel", "StatusEvent", "StatsEvent", "ProgressEvent", "CompleteEvent", "ErrorEvent",
    "FeedTranslationPipeline", "PipelineConfig",
    "FeedParser", "extract_translatables", "deduplicate_items",
    "is_likely_source_language", "apply_translations",
    "GlossaryManager", "get_industry", "list_industries", "resolve_industry",
    "BatchTranslator",
]
