"""Document reconstruction."""

from .reinsertion import apply_translations

__all__ = ['apply_translations']
