"""Template binding persistence and suggestion review."""

from .models import (
    Binding,
    BindingSuggestion,
    SuggestionState,
    ReviewAction,
    ReviewEvent,
    BindingNotFoundError,
    BindingConflictError,
    SuggestionNotFoundError,
    SuggestionStateError,
    ReviewNotFoundError,
)
from .storage import BindingStorage
from .review import SuggestionReview, ReviewRegistry
from .manager import BindingManager

__all__ = [
    "Binding",
    "BindingSuggestion",
    "SuggestionState",
    "ReviewAction",
    "ReviewEvent",
    "BindingNotFoundError",
    "BindingConflictError",
    "SuggestionNotFoundError",
    "SuggestionStateError",
    "ReviewNotFoundError",
    "BindingStorage",
    "SuggestionReview",
    "ReviewRegistry",
    "BindingManager",
]
