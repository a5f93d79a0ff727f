"""
Prompt construction for batch feed translation.

The system prompt carries the industry guidance, the language pair, the
glossary and the output rules; the user prompt carries the numbered texts.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from feedtrans.core.models import Batch, IndustryProfile
from feedtrans.translation.glossary.manager import GlossaryManager

LANGUAGE_NAMES: Dict[str, str] = {
    "bg": "Bulgarian",
    "en": "English",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "cs": "Czech",
    "sk": "Slovak",
    "ro": "Romanian",
    "hu": "Hungarian",
    "el": "Greek",
    "tr": "Turkish",
    "ru": "Russian",
    "uk": "Ukrainian",
    "sr": "Serbian",
    "hr": "Croatian",
    "sl": "Slovenian",
    "mk": "Macedonian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "he": "Hebrew",
}

CRITICAL_RULES = """CRITICAL RULES:
1. Translate ONLY the text content. Do NOT modify any XML/HTML tags, attributes, or structure.
2. Preserve all HTML entities (e.g. &lt; &gt; &amp; &quot;) exactly as they are.
3. Keep product names, brand names, collection names, and reference numbers untranslated.
4. Keep measurements and numbers as-is.
5. For tab descriptions containing HTML-encoded tables, translate only the visible text content within the table cells.
6. Use professional, industry-appropriate terminology - never literal translations.
7. Respond with ONLY the JSON array, no markdown formatting or explanation."""

GLOSSARY_HEADER = "Known terminology (always use these exact translations when these terms appear):"

DISPLAY_LIMIT = 500


def get_language_name(code: str) -> str:
    """English display name for a language code, the code itself if unknown."""
    return LANGUAGE_NAMES.get(code, code)


def truncate_for_display(text: str, limit: int = DISPLAY_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


@dataclass
class BatchPromptBuilder:
    """Builds the system and user prompts for one industry and language pair."""
    profile: IndustryProfile
    source_lang: str
    target_lang: str
    display_limit: int = DISPLAY_LIMIT

    def build_system_prompt(self) -> str:
        glossary_context = ""
        if self.profile.glossary:
            terms = GlossaryManager.from_profile(self.profile).generate_prompt_section()
            glossary_context = f"\n\n{GLOSSARY_HEADER}\n{terms}"

        return (
            f"{self.profile.context}\n\n"
            f"You are translating product feed content from "
            f"{get_language_name(self.source_lang)} to {get_language_name(self.target_lang)}."
            f"{glossary_context}\n\n"
            f"{CRITICAL_RULES}"
        )

    def build_user_prompt(self, batch: Batch) -> str:
        count = len(batch.texts)
        numbered = "\n\n".join(
            f"[{i + 1}] ({', '.join(fields)}) {truncate_for_display(text, self.display_limit)}"
            for i, (text, fields) in enumerate(zip(batch.texts, batch.fields))
        )
        return (
            f"Translate the following {count} texts. Each is numbered and shows its "
            f"field type in parentheses.\n\n"
            f"Return a JSON array with exactly {count} strings, where index 0 is the "
            f"translation of text [1], index 1 is the translation of text [2], etc.\n\n"
            f"{numbered}"
        )


def build_system_prompt(profile: IndustryProfile, source_lang: str, target_lang: str) -> str:
    return BatchPromptBuilder(profile, source_lang, target_lang).build_system_prompt()


def build_user_prompt(batch: Batch, display_limit: Optional[int] = None) -> str:
    builder = BatchPromptBuilder(
        IndustryProfile(id="", name=""), "", "",
        display_limit=display_limit or DISPLAY_LIMIT
    )
    return builder.build_user_prompt(batch)
