"""Feed extraction module."""

from .feed_parser import FeedParser, extract_translatables, deduplicate_items
from .language import is_likely_source_language

__all__ = ['FeedParser', 'extract_translatables', 'deduplicate_items', 'is_likely_source_language']
