"""Data models for template bindings and binding suggestions."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class Binding(BaseModel):
    """Association of a template placeholder with a resume data field."""

    id: Optional[int] = None
    template_id: int
    placeholder: str  # Token text as written in the template
    data_field: str = ""  # Resolved field path; empty until mapped
    description: Optional[str] = None
    is_mapped: bool = False  # True once confirmed by a person
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: Optional[datetime] = None

    @property
    def selector(self) -> str:
        """Alias of ``data_field`` used by the binding editor."""
        return self.data_field


class SuggestionState(str, Enum):
    """Review state of a binding suggestion."""

    PENDING = "pending"
    ACCEPTED = "accepted"  # Persisted as a mapped binding
    DISMISSED = "dismissed"  # Discarded, binding left unmapped


class BindingSuggestion(BaseModel):
    """Proposed field for an unmapped binding. Never persisted."""

    binding: Binding
    suggested_field: str
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""
    state: SuggestionState = SuggestionState.PENDING

    @property
    def binding_id(self) -> Optional[int]:
        return self.binding.id


class ReviewAction(str, Enum):
    """Kind of review state change."""

    ACCEPTED = "accepted"
    DISMISSED = "dismissed"


class ReviewEvent(BaseModel):
    """Notification emitted to an event sink on each review state change."""

    action: ReviewAction
    review_id: str
    binding_id: int
    placeholder: str
    field: Optional[str] = None
    confidence: float
    occurred_at: datetime = Field(default_factory=_utc_now)


class BindingNotFoundError(Exception):
    """Exception raised when a requested binding is not found."""

    pass


class BindingConflictError(Exception):
    """Exception raised when a placeholder is already bound for a template."""

    def __init__(self, binding: Binding):
        self.binding = binding
        super().__init__(
            f"Placeholder '{binding.placeholder}' is already bound for template "
            f"{binding.template_id} (binding_id: {binding.id})"
        )


class SuggestionNotFoundError(Exception):
    """Exception raised when a review has no suggestion for a binding."""

    pass


class SuggestionStateError(Exception):
    """Exception raised when a suggestion cannot move to the requested state."""

    def __init__(self, binding_id: int, state: SuggestionState, action: str):
        self.binding_id = binding_id
        self.state = state
        super().__init__(
            f"Cannot {action} suggestion for binding {binding_id}: already {state.value}"
        )


class ReviewNotFoundError(Exception):
    """Exception raised when a review session is not found or has expired."""

    pass
