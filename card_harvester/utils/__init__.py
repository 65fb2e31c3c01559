"""Utility modules."""

from .text_utils import normalize_text, strip_trailing_colon, collation_key

__all__ = ['normalize_text', 'strip_trailing_colon', 'collation_key']
