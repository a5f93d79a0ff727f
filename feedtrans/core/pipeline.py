"""
Feed translation pipeline for feedtrans.

This module runs one translation request end to end: validate the job,
extract and deduplicate fragments, translate them through the batch
translator, reinsert the results, and report every step as an event.
"""

from __future__ import annotations
from dataclasses import dataclass, fields as dataclass_fields
from typing import Any, Callable, Dict, List, Optional
import logging

from feedtrans.core.events import (
    EventChannel, StatusEvent, StatsEvent, ProgressEvent, CompleteEvent, ErrorEvent
)
from feedtrans.core.exceptions import (
    InputValidationError, ExtractionEmptyError, ConfigurationError
)
from feedtrans.core.models import (
    FeedStats, FeedTranslationJob, FeedTranslationResult, FieldKind
)
from feedtrans.extraction.feed_parser import FeedParser, deduplicate_items, count_products
from feedtrans.rendering.reinsertion import apply_translations
from feedtrans.translation.backends.anthropic_backend import AnthropicBackend, DEFAULT_MODEL
from feedtrans.translation.base import TranslationBackend
from feedtrans.translation.glossary.industries import resolve_industry
from feedtrans.utils.batch_translator import BatchTranslator

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Tunables for the feed translation pipeline."""

    # Provider
    model_name: str = DEFAULT_MODEL
    max_tokens: int = 8192

    # Batching
    batch_size: int = 40             # Texts per provider call
    max_retries: int = 3             # Attempts per batch, including the first
    retry_delay: float = 2.0         # Linear backoff base in seconds
    display_truncate: int = 500      # Characters of each text shown in the prompt

    log_level: str = "INFO"

    def validate(self) -> List[str]:
        """Validate configuration and return any issues."""
        issues = []

        if self.batch_size < 1:
            issues.append("batch_size must be at least 1")

        if self.max_retries < 1:
            issues.append("max_retries must be at least 1")

        if self.retry_delay < 0:
            issues.append("retry_delay must be non-negative")

        if self.max_tokens < 1:
            issues.append("max_tokens must be positive")

        if self.display_truncate < 1:
            issues.append("display_truncate must be positive")

        return issues

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> PipelineConfig:
        """Build from a loaded config dict (see utils.config_loader)."""
        known = {f.name for f in dataclass_fields(cls)}
        values = {k: v for k, v in config.get("translation", {}).items() if k in known}
        level = config.get("logging", {}).get("level")
        if level:
            values["log_level"] = level
        return cls(**values)


BackendFactory = Callable[[str, PipelineConfig], TranslationBackend]


def default_backend_factory(api_key: str, config: PipelineConfig) -> TranslationBackend:
    return AnthropicBackend(api_key=api_key, model=config.model_name)


class FeedTranslationPipeline:
    """
    Runs translation requests and reports them through an EventChannel.

    Every run ends with exactly one terminal event (complete or error) and
    a closed channel, whatever happens inside.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        backend_factory: Optional[BackendFactory] = None
    ):
        self.config = config or PipelineConfig()

        issues = self.config.validate()
        if issues:
            raise ConfigurationError(f"Configuration issues: {', '.join(issues)}")

        self.backend_factory = backend_factory or default_backend_factory
        self.last_stats: Dict[str, Any] = {}

    async def run(self, job: FeedTranslationJob, channel: EventChannel) -> Optional[FeedTranslationResult]:
        """
        Translate one feed, emitting events into the channel.

        Returns:
            The result on success, None after an error event
        """
        try:
            result = await self.translate(job, channel)
            await channel.emit(CompleteEvent(
                translated_document=result.translated_document,
                translation_count=result.translation_count,
                message=f"Successfully translated {result.translation_count} unique texts."
            ))
            return result
        except (InputValidationError, ExtractionEmptyError) as e:
            logger.warning(f"Translation rejected: {e.message}")
            await channel.emit(ErrorEvent(message=e.message))
        except Exception as e:
            logger.exception("Translation failed")
            await channel.emit(ErrorEvent(message=f"Translation failed: {str(e) or 'Unknown error'}"))
        finally:
            await channel.close()
        return None

    async def translate(self, job: FeedTranslationJob, channel: Optional[EventChannel] = None) -> FeedTranslationResult:
        """
        Translate one feed, raising on failure instead of emitting an error event.

        Raises:
            InputValidationError: Missing parameter, unknown industry or field
            ExtractionEmptyError: Nothing to translate
            BatchTranslationError: A batch exhausted its retries
            TranslationCancelledError: The consumer cancelled the channel
        """
        channel = channel or EventChannel()
        self.validate_job(job)

        profile = resolve_industry(job.industry_id, job.custom_context)
        selected = FieldKind.defaults() if job.fields is None else FieldKind.parse(job.fields)

        await channel.emit(StatusEvent("Reading XML feed..."))
        document = job.document

        await channel.emit(StatusEvent("Parsing feed structure..."))
        items = FeedParser(job.source_lang, selected).parse(document)
        if not items:
            raise ExtractionEmptyError(job.source_lang, sorted(kind.value for kind in selected))

        unique = deduplicate_items(items)
        stats = FeedStats(
            total_products=count_products(items),
            total_items=len(items),
            unique_items=len(unique)
        )
        logger.info(
            f"Extracted {stats.total_items} items ({stats.unique_items} unique) "
            f"from {stats.total_products} products"
        )

        await channel.emit(StatsEvent(stats.total_products, stats.total_items, stats.unique_items))
        await channel.emit(StatusEvent(
            f"Found {stats.unique_items} unique texts to translate "
            f"({stats.total_items} total occurrences across {stats.total_products} products)..."
        ))

        async def on_progress(completed: int, total: int) -> None:
            await channel.emit(ProgressEvent.of(completed, total))

        backend = self.backend_factory(job.api_key, self.config)
        translator = BatchTranslator(
            backend,
            batch_size=self.config.batch_size,
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            max_tokens=self.config.max_tokens,
            display_limit=self.config.display_truncate
        )
        try:
            translations = await translator.translate(
                unique,
                job.source_lang,
                job.target_lang,
                profile,
                progress_callback=on_progress,
                is_cancelled=channel.is_cancelled
            )
        finally:
            self.last_stats = translator.get_stats()
            await backend.close()

        await channel.emit(StatusEvent("Applying translations to feed..."))
        translated_document = apply_translations(document, translations)

        return FeedTranslationResult(
            translated_document=translated_document,
            translations=translations,
            stats=stats,
            glossary_hits=self.last_stats.get("glossary_hits", 0),
            api_calls=self.last_stats.get("api_calls", 0)
        )

    @staticmethod
    def validate_job(job: FeedTranslationJob) -> None:
        """Reject jobs with missing required parameters."""
        required = {
            "file": job.document,
            "industry": job.industry_id,
            "sourceLang": job.source_lang,
            "targetLang": job.target_lang,
            "apiKey": job.api_key,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise InputValidationError(
                "Missing required fields",
                field=", ".join(missing)
            )
