"""
Text extraction from CloudCart product feeds.

The feed layout is fixed, so fragments are located with tag-level patterns
rather than a general XML parser. The document itself is never modified here;
reinsertion works on the raw text (see feedtrans.rendering.reinsertion).
"""

import re
import logging
from typing import Iterable, Iterator, List, Optional, Set, Dict

from ..core.models import FieldKind, TranslatableItem, DedupedEntry
from .language import is_likely_source_language

logger = logging.getLogger(__name__)

PRODUCT_PATTERN = re.compile(r"<product>([\s\S]*?)</product>")
ID_PATTERN = re.compile(r"<id>([^<]*)</id>")
TITLE_PATTERN = re.compile(r"<title>([^<]*)</title>")

CATEGORY_PROPERTY_PATTERN = re.compile(
    r'<category_property\s+name="([^"]*)">\s*<values>([\s\S]*?)</values>\s*</category_property>'
)
PROPERTY_VALUE_PATTERN = re.compile(r"<name>([^<]*)</name>")

TAB_PATTERN = re.compile(
    r"<tab>\s*<name>([\s\S]*?)</name>\s*<description>([\s\S]*?)</description>\s*</tab>"
)

OPTION_PATTERN = re.compile(
    r'<option\s+name="([^"]*)">\s*<values>([\s\S]*?)</values>\s*</option>'
)
OPTION_VALUE_PATTERN = re.compile(r"<value>([^<]*)</value>")

# Single-occurrence fields in emission order; True = content may hold markup
SIMPLE_FIELDS = (
    ("title", FieldKind.TITLE, False),
    ("short_description", FieldKind.SHORT_DESCRIPTION, True),
    ("description", FieldKind.DESCRIPTION, True),
    ("meta_title", FieldKind.META_TITLE, False),
    ("meta_description", FieldKind.META_DESCRIPTION, True),
    ("category", FieldKind.CATEGORY, False),
)

UNKNOWN_TITLE = "Untitled"


def _tag_pattern(tag: str, allow_markup: bool) -> "re.Pattern":
    if allow_markup:
        return re.compile(rf"<{tag}>([\s\S]*?)</{tag}>")
    return re.compile(rf"<{tag}>([^<]*)</{tag}>")


_SIMPLE_PATTERNS = {
    kind: _tag_pattern(tag, allow_markup) for tag, kind, allow_markup in SIMPLE_FIELDS
}


class FeedParser:
    """
    Extract translatable fragments from a product feed.

    Each <product> record is visited in document order. For every selected
    field kind the raw content is captured and kept only if it is non-empty
    and looks like source-language text.
    """

    def __init__(self, source_lang: str, fields: Optional[Iterable] = None):
        """
        Args:
            source_lang: Source language code
            fields: Field kinds (or wire ids) to extract; None selects the defaults
        """
        self.source_lang = source_lang
        self.fields: Set[FieldKind] = set(
            FieldKind.defaults() if fields is None else FieldKind.parse(fields)
        )

    def parse(self, document: str) -> List[TranslatableItem]:
        """Return every translatable item in the document, in emission order."""
        items: List[TranslatableItem] = []
        for index, match in enumerate(PRODUCT_PATTERN.finditer(document)):
            items.extend(self._parse_product(match.group(1), index))

        logger.debug(
            f"Extracted {len(items)} items from {self.count_products(document)} products "
            f"(source={self.source_lang})"
        )
        return items

    @staticmethod
    def count_products(document: str) -> int:
        return sum(1 for _ in PRODUCT_PATTERN.finditer(document))

    def _accepts(self, text: str) -> bool:
        return is_likely_source_language(text, self.source_lang)

    def _parse_product(self, product_xml: str, index: int) -> Iterator[TranslatableItem]:
        id_match = ID_PATTERN.search(product_xml)
        title_match = TITLE_PATTERN.search(product_xml)
        product_id = id_match.group(1) if id_match else f"unknown-{index}"
        product_title = title_match.group(1) if title_match else UNKNOWN_TITLE

        def item(path: str, text: str, kind: FieldKind) -> TranslatableItem:
            return TranslatableItem(
                path=f"product[{product_id}].{path}",
                text=text,
                field=kind,
                product_id=product_id,
                product_title=product_title,
            )

        # Core fields
        for _, kind, _ in SIMPLE_FIELDS:
            if kind not in self.fields:
                continue
            match = _SIMPLE_PATTERNS[kind].search(product_xml)
            if match and match.group(1).strip() and self._accepts(match.group(1)):
                yield item(kind.value, match.group(1), kind)

        # Category properties
        want_name = FieldKind.CATEGORY_PROPERTY_NAME in self.fields
        want_value = FieldKind.CATEGORY_PROPERTY_VALUE in self.fields
        if want_name or want_value:
            for match in CATEGORY_PROPERTY_PATTERN.finditer(product_xml):
                name, values = match.group(1), match.group(2)
                if want_name and self._accepts(name):
                    yield item(f"category_property[{name}].name", name,
                               FieldKind.CATEGORY_PROPERTY_NAME)
                if want_value:
                    for value in PROPERTY_VALUE_PATTERN.findall(values):
                        if self._accepts(value):
                            yield item(f"category_property[{name}].value[{value}]", value,
                                       FieldKind.CATEGORY_PROPERTY_VALUE)

        # Tabs
        want_name = FieldKind.TAB_NAME in self.fields
        want_value = FieldKind.TAB_DESCRIPTION in self.fields
        if want_name or want_value:
            for match in TAB_PATTERN.finditer(product_xml):
                name, description = match.group(1), match.group(2)
                if want_name and self._accepts(name):
                    yield item(f"tab[{name}].name", name, FieldKind.TAB_NAME)
                if want_value and self._accepts(description):
                    yield item(f"tab[{name}].description", description,
                               FieldKind.TAB_DESCRIPTION)

        # Variant options
        want_name = FieldKind.OPTION_NAME in self.fields
        want_value = FieldKind.OPTION_VALUE in self.fields
        if want_name or want_value:
            for match in OPTION_PATTERN.finditer(product_xml):
                name, values = match.group(1), match.group(2)
                if want_name and self._accepts(name):
                    yield item(f"option[{name}].name", name, FieldKind.OPTION_NAME)
                if want_value:
                    for value in OPTION_VALUE_PATTERN.findall(values):
                        if self._accepts(value):
                            yield item(f"option[{name}].value[{value}]", value,
                                       FieldKind.OPTION_VALUE)


def extract_translatables(
    document: str,
    source_lang: str,
    fields: Optional[Iterable] = None
) -> List[TranslatableItem]:
    """
    Extract translatable items from a feed document.

    Args:
        document: Raw feed XML
        source_lang: Source language code
        fields: Field kinds (or wire ids) to extract; None selects the defaults

    Returns:
        Items in record order, then field declaration order, then
        sub-occurrence order
    """
    return FeedParser(source_lang, fields).parse(document)


def deduplicate_items(items: Iterable[TranslatableItem]) -> List[DedupedEntry]:
    """Collapse items by exact text, keeping first-seen order."""
    entries: Dict[str, DedupedEntry] = {}
    for translatable in items:
        entry = entries.get(translatable.text)
        if entry is None:
            entry = entries[translatable.text] = DedupedEntry(text=translatable.text)
        entry.fields.add(translatable.field)
        entry.count += 1
    return list(entries.values())


def count_products(items: Iterable[TranslatableItem]) -> int:
    """Number of distinct products contributing at least one item."""
    return len({translatable.product_id for translatable in items})
