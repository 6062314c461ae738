"""Placeholder extraction for resume templates.

This module finds placeholder tokens ({{field}}, [[FIELD:x]], [[LOOP:x]],
[[IF:x]]) in template markup so they can be bound to resume data fields.
"""

from .models import (
    Placeholder,
    PlaceholderKind,
    TokenContext,
    ExtractionReport,
    ValidationResult,
)
from .parser import PlaceholderExtractor, distinct_tokens
from .syntax import normalize_placeholder

__all__ = [
    "Placeholder",
    "PlaceholderKind",
    "TokenContext",
    "ExtractionReport",
    "ValidationResult",
    "PlaceholderExtractor",
    "distinct_tokens",
    "normalize_placeholder",
]
