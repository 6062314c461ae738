"""Placeholder to data field matching."""

from .models import FieldMatch, PlaceholderMatch, FieldCandidate
from .similarity import string_similarity
from .matcher import BindingMatcher, describe_confidence

__all__ = [
    "FieldMatch",
    "PlaceholderMatch",
    "FieldCandidate",
    "string_similarity",
    "BindingMatcher",
    "describe_confidence",
]
