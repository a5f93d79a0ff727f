"""
Script-based source language detection.

Non-Latin source languages are recognised by their Unicode block. Latin-script
languages cannot be told apart this way, so every non-empty text counts as a
candidate for them.
"""

import re
from typing import Dict, Optional, Pattern

CYRILLIC = re.compile(r"[\u0400-\u04FF]")
GREEK = re.compile(r"[\u0370-\u03FF]")
CJK = re.compile(r"[\u4E00-\u9FFF]")
JAPANESE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FFF]")
HANGUL = re.compile(r"[\uAC00-\uD7AF]")
ARABIC = re.compile(r"[\u0600-\u06FF]")
HEBREW = re.compile(r"[\u0590-\u05FF]")

SCRIPT_PATTERNS: Dict[str, Pattern] = {
    "bg": CYRILLIC,  # Bulgarian
    "ru": CYRILLIC,  # Russian
    "sr": CYRILLIC,  # Serbian
    "mk": CYRILLIC,  # Macedonian
    "uk": CYRILLIC,  # Ukrainian
    "el": GREEK,
    "zh": CJK,
    "ja": JAPANESE,
    "ko": HANGUL,
    "ar": ARABIC,
    "he": HEBREW,
}


def script_for(source_lang: str) -> Optional[Pattern]:
    """Pattern matching the script of a source language, None for Latin-script codes."""
    return SCRIPT_PATTERNS.get(source_lang)


def is_likely_source_language(text: str, source_lang: str) -> bool:
    """
    Decide whether text plausibly needs translating from source_lang.

    Args:
        text: Candidate fragment
        source_lang: Source language code (ISO 639-1)

    Returns:
        False for empty or whitespace-only text; for non-Latin source
        languages, True iff the text contains a character of that script;
        True for every other language code.
    """
    if not text or not text.strip():
        return False

    pattern = script_for(source_lang)
    if pattern is None:
        return True
    return pattern.search(text) is not None
