"""
Core data models for feedtrans.

This module defines the structures shared by the extractor, the glossary,
the batch translator and the pipeline. Everything here is created per
translation request and discarded when the request ends, except the
industry profiles which are process-wide configuration.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Dict, Optional, Set, Iterable, FrozenSet, Mapping, Tuple

from feedtrans.core.exceptions import InputValidationError

# original text -> translated text, insertion ordered
TranslationTable = Dict[str, str]


class FieldKind(Enum):
    """Fragment categories exposed by the feed schema."""
    TITLE = "title"
    SHORT_DESCRIPTION = "short_description"
    DESCRIPTION = "description"
    META_TITLE = "meta_title"
    META_DESCRIPTION = "meta_description"
    CATEGORY = "category"
    CATEGORY_PROPERTY_NAME = "category_property_name"
    CATEGORY_PROPERTY_VALUE = "category_property_value"
    TAB_NAME = "tab_name"
    TAB_DESCRIPTION = "tab_description"
    OPTION_NAME = "option_name"
    OPTION_VALUE = "option_value"

    @property
    def label(self) -> str:
        return _FIELD_INFO[self][0]

    @property
    def group(self) -> str:
        return _FIELD_INFO[self][1]

    @property
    def default_on(self) -> bool:
        return _FIELD_INFO[self][2]

    @classmethod
    def defaults(cls) -> FrozenSet[FieldKind]:
        """Field kinds translated when the caller selects nothing."""
        return frozenset(kind for kind in cls if kind.default_on)

    @classmethod
    def parse(cls, values: Iterable) -> FrozenSet[FieldKind]:
        """
        Convert wire ids (or members) into a set of field kinds.

        Raises:
            InputValidationError: If an id is not a known field kind
        """
        kinds = set()
        for value in values:
            if isinstance(value, cls):
                kinds.add(value)
                continue
            try:
                kinds.add(cls(value))
            except ValueError:
                raise InputValidationError(
                    f"Unknown field type: {value}",
                    field="fields",
                    invalid_value=value,
                    valid_values=[kind.value for kind in cls]
                )
        return frozenset(kinds)


# label, group, default_on
_FIELD_INFO: Dict[FieldKind, Tuple[str, str, bool]] = {
    FieldKind.TITLE: ("Product Title", "Core", False),
    FieldKind.SHORT_DESCRIPTION: ("Short Description", "Core", True),
    FieldKind.DESCRIPTION: ("Description", "Core", True),
    FieldKind.META_TITLE: ("Meta Title", "SEO", False),
    FieldKind.META_DESCRIPTION: ("Meta Description", "SEO", True),
    FieldKind.CATEGORY: ("Category", "Taxonomy", True),
    FieldKind.CATEGORY_PROPERTY_NAME: ("Category Property Names", "Taxonomy", True),
    FieldKind.CATEGORY_PROPERTY_VALUE: ("Category Property Values", "Taxonomy", True),
    FieldKind.TAB_NAME: ("Tab Names", "Tabs", True),
    FieldKind.TAB_DESCRIPTION: ("Tab Content", "Tabs", True),
    FieldKind.OPTION_NAME: ("Variant Option Names", "Variants", True),
    FieldKind.OPTION_VALUE: ("Variant Option Values", "Variants", True),
}


@dataclass(frozen=True)
class TranslatableItem:
    """A single text fragment pulled out of one product record."""
    path: str            # Diagnostic locator, never used for reinsertion
    text: str            # Content exactly as it appears in the feed
    field: FieldKind
    product_id: str
    product_title: str


@dataclass
class DedupedEntry:
    """One distinct text value with every field kind it was seen under."""
    text: str
    fields: Set[FieldKind] = field(default_factory=set)
    count: int = 0

    @property
    def field_ids(self) -> List[str]:
        """Wire ids of the field kinds, in declaration order."""
        return [kind.value for kind in FieldKind if kind in self.fields]


@dataclass(frozen=True)
class IndustryProfile:
    """
    Terminology guidance for one industry.

    Profiles are shared across requests and must never be mutated;
    use with_context() to get a request-scoped copy.
    """
    id: str
    name: str
    icon: str = ""
    description: str = ""
    context: str = ""                                   # System-level prompt context
    glossary: Mapping[str, str] = field(default_factory=dict)
    example_terms: Tuple[str, ...] = ()

    def with_context(self, context: str) -> IndustryProfile:
        """Return a copy carrying an overridden prompt context."""
        return replace(self, context=context)


@dataclass
class Batch:
    """Ordered group of texts sent to the provider in one call."""
    texts: List[str] = field(default_factory=list)
    fields: List[List[str]] = field(default_factory=list)  # Parallel to texts

    def __len__(self) -> int:
        return len(self.texts)


@dataclass
class FeedStats:
    """Counts reported once after extraction."""
    total_products: int = 0
    total_items: int = 0
    unique_items: int = 0


@dataclass
class FeedTranslationJob:
    """Everything the pipeline needs for one translation request."""
    document: str
    source_lang: str
    target_lang: str
    industry_id: str
    api_key: str
    custom_context: Optional[str] = None
    fields: Optional[Iterable] = None  # Wire ids or FieldKind; None means defaults


@dataclass
class FeedTranslationResult:
    """Outcome of a successful pipeline run."""
    translated_document: str
    translations: TranslationTable
    stats: FeedStats
    glossary_hits: int = 0
    api_calls: int = 0

    @property
    def translation_count(self) -> int:
        return len(self.translations)
