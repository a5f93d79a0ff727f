"""Terminology: glossary lookups and industry profiles."""

from .manager import GlossaryManager, GlossaryTerm
from .industries import (
    CUSTOM_INDUSTRY_ID,
    get_industry,
    list_industries,
    load_industries,
    resolve_industry,
)

__all__ = [
    'GlossaryManager',
    'GlossaryTerm',
    'CUSTOM_INDUSTRY_ID',
    'get_industry',
    'list_industries',
    'load_industries',
    'resolve_industry',
]
