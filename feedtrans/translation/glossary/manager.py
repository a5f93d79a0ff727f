"""
Glossary management for feedtrans.

A glossary maps exact source strings to fixed translations. Texts found in
the glossary are resolved locally and never sent to the provider; the whole
glossary is also listed in the system prompt so the provider uses the same
terms inside longer texts.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set, Tuple, Iterable
import json
import logging
from dataclasses import dataclass

from feedtrans.core.models import DedupedEntry, IndustryProfile, TranslationTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlossaryTerm:
    """A single glossary term."""
    source: str
    target: str
    domain: str = "general"


class GlossaryManager:
    """
    Exact-match terminology resolver.

    Lookups are case-sensitive and whole-string: "Пръстен" resolves,
    "пръстен" and "Златен пръстен" do not.
    """

    def __init__(self):
        self.terms: Dict[str, GlossaryTerm] = {}
        self.domains_loaded: Set[str] = set()

    @classmethod
    def from_profile(cls, profile: IndustryProfile) -> GlossaryManager:
        manager = cls()
        if profile.glossary:
            manager.load_from_dict(profile.glossary, domain=profile.id)
        return manager

    def load_from_dict(self, terms: Mapping[str, str], domain: str = "custom") -> int:
        """
        Load glossary from a dictionary.

        Args:
            terms: Dictionary of source -> target terms
            domain: Domain label for these terms

        Returns:
            Number of terms loaded
        """
        count = 0
        for source, target in terms.items():
            self.terms[source] = GlossaryTerm(source=source, target=target, domain=domain)
            count += 1

        self.domains_loaded.add(domain)
        logger.debug(f"Loaded {count} glossary terms ({domain})")
        return count

    def load_from_file(self, filepath: Path) -> int:
        """
        Load glossary from a JSON file.

        Accepts either a flat {"source": "target"} object or
        {"domain": ..., "terms": {...}}.
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        terms = data.get('terms', data)
        domain = data.get('domain', 'imported') if 'terms' in data else 'imported'
        return self.load_from_dict(terms, domain)

    def add_term(self, source: str, target: str, domain: str = "user") -> None:
        """Add a single term to the glossary."""
        self.terms[source] = GlossaryTerm(source=source, target=target, domain=domain)

    def get_term(self, source: str) -> Optional[GlossaryTerm]:
        return self.terms.get(source)

    def get_translation(self, source: str) -> Optional[str]:
        """Fixed translation for an exact source string, or None."""
        term = self.terms.get(source)
        return term.target if term else None

    def partition(
        self,
        entries: Iterable[DedupedEntry]
    ) -> Tuple[TranslationTable, List[DedupedEntry]]:
        """
        Split entries into glossary hits and texts that still need the provider.

        Returns:
            (table of resolved texts, unresolved entries in input order)
        """
        hits: TranslationTable = {}
        misses: List[DedupedEntry] = []
        for entry in entries:
            target = self.get_translation(entry.text)
            # Empty targets are treated as missing terms
            if target:
                hits[entry.text] = target
            else:
                misses.append(entry)

        if hits:
            logger.info(f"Glossary resolved {len(hits)} texts without provider calls")
        return hits, misses

    def generate_prompt_section(self) -> str:
        """All terms as `"source" → "target"` lines, empty if there are none."""
        return "\n".join(f'"{t.source}" → "{t.target}"' for t in self.terms.values())

    def to_dict(self) -> Dict[str, str]:
        """Export all terms as simple dictionary."""
        return {term.source: term.target for term in self.terms.values()}

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, source: str) -> bool:
        return source in self.terms

    def __repr__(self) -> str:
        return f"GlossaryManager({len(self.terms)} terms, domains={self.domains_loaded})"
