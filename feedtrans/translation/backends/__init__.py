"""Translation backend implementations."""

from .anthropic_backend import AnthropicBackend

__all__ = [
    'AnthropicBackend',
]
