# -*- coding: utf-8 -*-
"""
Batched translation with glossary short-circuit and retries.

This module provides the provider-facing half of a feed translation:
- Glossary hits are resolved locally and never batched
- Remaining texts are sent in ordered, fixed-size batches, one at a time
- Each batch is retried with linear backoff on provider or parse failures
- Progress callbacks fire upfront and after every batch
"""

import asyncio
import inspect
import time
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from feedtrans.core.exceptions import BatchTranslationError, TranslationCancelledError
from feedtrans.core.models import Batch, DedupedEntry, IndustryProfile, TranslationTable
from feedtrans.translation.base import TranslationBackend, TranslationRequest
from feedtrans.translation.glossary.manager import GlossaryManager
from feedtrans.translation.output_cleaner import parse_translation_array
from feedtrans.translation.prompts import BatchPromptBuilder, DISPLAY_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 40
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 2.0

ProgressCallback = Callable[[int, int], Union[None, Awaitable[None]]]


def make_batches(entries: Sequence[DedupedEntry], batch_size: int = DEFAULT_BATCH_SIZE) -> List[Batch]:
    """Split entries into ordered batches; batch i holds entries [i*size, (i+1)*size)."""
    batches = []
    for start in range(0, len(entries), batch_size):
        chunk = entries[start:start + batch_size]
        batches.append(Batch(
            texts=[entry.text for entry in chunk],
            fields=[entry.field_ids for entry in chunk],
        ))
    return batches


class BatchTranslator:
    """
    Sequential batch translator over a single provider backend.

    Batches run one after another so provider-side ordering and rate
    behaviour stay predictable and progress only ever moves forward.
    """

    def __init__(
        self,
        backend: TranslationBackend,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_tokens: int = 8192,
        display_limit: int = DISPLAY_LIMIT,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Args:
            backend: Provider backend used for every batch
            batch_size: Maximum texts per provider call
            max_retries: Attempts per batch, including the first
            retry_delay: Base backoff; attempt n waits retry_delay * n seconds
            max_tokens: Output token ceiling per call
            display_limit: Characters of each text shown in the prompt
            sleep: Awaitable sleep, replaceable in tests
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.backend = backend
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.max_tokens = max_tokens
        self.display_limit = display_limit
        self._sleep = sleep

        # Statistics
        self.stats = {
            "glossary_hits": 0,
            "batches": 0,
            "api_calls": 0,
            "retries": 0,
            "errors": 0,
            "tokens_used": 0,
            "total_time": 0.0
        }

    async def translate(
        self,
        entries: Sequence[DedupedEntry],
        source_lang: str,
        target_lang: str,
        profile: IndustryProfile,
        progress_callback: Optional[ProgressCallback] = None,
        is_cancelled: Optional[Callable[[], bool]] = None
    ) -> TranslationTable:
        """
        Translate deduplicated entries into an original -> translated table.

        Args:
            entries: Unique texts with their field kinds
            source_lang: Source language code
            target_lang: Target language code
            profile: Industry profile (context and glossary) for this request
            progress_callback: Optional callback(completed, total), sync or async
            is_cancelled: Optional check run before every batch

        Returns:
            Glossary hits first, then batch results in batch order

        Raises:
            BatchTranslationError: A batch failed on every attempt
            TranslationCancelledError: is_cancelled() became true between batches
        """
        start_time = time.time()
        total = len(entries)

        glossary = GlossaryManager.from_profile(profile)
        translations, remaining = glossary.partition(entries)
        self.stats["glossary_hits"] += len(translations)

        if not remaining:
            await self._report(progress_callback, total, total)
            return translations

        batches = make_batches(remaining, self.batch_size)
        builder = BatchPromptBuilder(profile, source_lang, target_lang, self.display_limit)
        system_prompt = builder.build_system_prompt()

        completed = total - len(remaining)
        await self._report(progress_callback, completed, total)

        logger.info(
            f"Translating {len(remaining)} texts in {len(batches)} batches "
            f"({source_lang} -> {target_lang}, {len(translations)} glossary hits)"
        )

        try:
            for index, batch in enumerate(batches):
                if is_cancelled and is_cancelled():
                    logger.info(f"Translation cancelled before batch {index + 1}/{len(batches)}")
                    raise TranslationCancelledError(completed, total)

                try:
                    batch_translations = await self.translate_batch(
                        batch, system_prompt, builder.build_user_prompt(batch)
                    )
                except Exception as e:
                    self.stats["errors"] += 1
                    logger.error(
                        f"Batch {index + 1}/{len(batches)} failed after "
                        f"{self.max_retries} attempts: {e}"
                    )
                    raise BatchTranslationError(
                        batch_index=index,
                        attempts=self.max_retries,
                        last_error=e,
                        partial_translations=translations
                    ) from e

                translations.update(batch_translations)
                self.stats["batches"] += 1
                completed += len(batch)
                await self._report(progress_callback, completed, total)
        finally:
            self.stats["total_time"] += time.time() - start_time

        return translations

    async def translate_batch(
        self,
        batch: Batch,
        system_prompt: str,
        user_prompt: str
    ) -> TranslationTable:
        """
        Send one batch, retrying on any failure.

        Provider errors and malformed replies share the same attempt budget.
        Raises the last observed error once every attempt has failed.
        """
        request = TranslationRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_tokens=self.max_tokens
        )

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                self.stats["api_calls"] += 1
                response = await self.backend.translate(request)
                self.stats["tokens_used"] += response.tokens_used
                translated = parse_translation_array(response.text, len(batch.texts))
                return dict(zip(batch.texts, translated))
            except Exception as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.retry_delay * attempt
                    self.stats["retries"] += 1
                    logger.warning(
                        f"Batch of {len(batch)} failed (attempt {attempt}/{self.max_retries}): "
                        f"{e}; retrying in {delay:.1f}s"
                    )
                    await self._sleep(delay)

        raise last_error

    @staticmethod
    async def _report(callback: Optional[ProgressCallback], completed: int, total: int) -> None:
        if callback is None:
            return
        result = callback(completed, total)
        if inspect.isawaitable(result):
            await result

    def get_stats(self) -> Dict[str, Any]:
        """Get translator statistics."""
        return dict(self.stats)
