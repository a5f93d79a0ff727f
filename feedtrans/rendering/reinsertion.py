"""
Reinsert translations into the original feed text.

Substitution is global and exact-substring, so it relies on extracted values
not also appearing in non-translatable parts of the feed. Longer originals are
replaced first: a shorter key that is a substring of a longer one would
otherwise rewrite part of the longer match before it gets replaced.
"""

import logging
from typing import Mapping

logger = logging.getLogger(__name__)


def apply_translations(document: str, translations: Mapping[str, str]) -> str:
    """
    Replace every occurrence of each original text with its translation.

    Args:
        document: Original feed text
        translations: Original text -> translated text

    Returns:
        The document with translations applied; unchanged when the table is empty
    """
    result = document

    # sorted() is stable, equal-length keys keep table order
    ordered = sorted(translations.items(), key=lambda pair: len(pair[0]), reverse=True)

    replaced = 0
    for original, translated in ordered:
        if not original or original == translated:
            continue
        occurrences = result.count(original)
        if occurrences:
            result = result.replace(original, translated)
            replaced += occurrences

    logger.debug(f"Applied {len(translations)} translations ({replaced} replacements)")
    return result
