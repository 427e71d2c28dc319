"""
Utility helpers for the WP Query builder.
"""

from .strings import StringNormalizer, MessageTranslator

__all__ = ['StringNormalizer', 'MessageTranslator']
