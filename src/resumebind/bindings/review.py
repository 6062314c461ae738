"""Review workflow turning binding suggestions into mapped bindings."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from .models import (
    Binding,
    BindingNotFoundError,
    BindingSuggestion,
    ReviewAction,
    ReviewEvent,
    SuggestionNotFoundError,
    SuggestionState,
    SuggestionStateError,
)
from .storage import BindingStorage

logger = logging.getLogger(__name__)

EventSink = Callable[[ReviewEvent], None]


class SuggestionReview:
    """
    One review session over the suggestions of a single matcher run.

    Each suggestion is keyed by its binding ID and moves from pending to
    either accepted (persisted) or dismissed (discarded). Both end states are
    final for the session; repeating the same action is a no-op.
    """

    def __init__(
        self,
        storage: BindingStorage,
        suggestions: Iterable[BindingSuggestion],
        template_id: Optional[int] = None,
        review_id: Optional[str] = None,
        event_sink: Optional[EventSink] = None,
    ):
        """
        Initialize the review.

        Args:
            storage: Binding storage used to persist accepted suggestions
            suggestions: Suggestions in the order the matcher produced them
            template_id: Template the suggestions belong to
            review_id: Session ID (generated if not provided)
            event_sink: Optional callable notified of every state change
        """
        self.storage = storage
        self.template_id = template_id
        self.review_id = review_id or str(uuid.uuid4())
        self.created_at = datetime.now(timezone.utc)
        self.event_sink = event_sink
        self._suggestions: dict[int, BindingSuggestion] = {}
        self._accepted: dict[int, Binding] = {}

        for suggestion in suggestions:
            if suggestion.binding_id is None:
                raise ValueError(
                    f"Suggestion for '{suggestion.binding.placeholder}' has no stored binding"
                )
            self._suggestions[suggestion.binding_id] = suggestion

    @property
    def suggestions(self) -> list[BindingSuggestion]:
        """All suggestions of the session, in production order."""
        return list(self._suggestions.values())

    @property
    def pending(self) -> list[BindingSuggestion]:
        """Suggestions still awaiting a decision, in production order."""
        return [s for s in self._suggestions.values() if s.state == SuggestionState.PENDING]

    def get(self, binding_id: int) -> BindingSuggestion:
        """
        Get the suggestion for a binding.

        Raises:
            SuggestionNotFoundError: If the session has no such suggestion
        """
        suggestion = self._suggestions.get(binding_id)
        if suggestion is None:
            raise SuggestionNotFoundError(
                f"No suggestion for binding {binding_id} in review {self.review_id}"
            )
        return suggestion

    def _emit(self, action: ReviewAction, suggestion: BindingSuggestion):
        if self.event_sink is None:
            return
        self.event_sink(
            ReviewEvent(
                action=action,
                review_id=self.review_id,
                binding_id=suggestion.binding_id,
                placeholder=suggestion.binding.placeholder,
                field=suggestion.suggested_field,
                confidence=suggestion.confidence,
            )
        )

    async def accept(self, binding_id: int) -> Binding:
        """
        Accept a suggestion and persist its binding as mapped.

        Accepting an already accepted suggestion returns the stored binding
        without writing again.

        Args:
            binding_id: ID of the suggested binding

        Returns:
            The mapped Binding

        Raises:
            SuggestionNotFoundError: If the session has no such suggestion
            SuggestionStateError: If the suggestion was dismissed
            BindingNotFoundError: If the binding was deleted since the suggestion
        """
        suggestion = self.get(binding_id)

        if suggestion.state == SuggestionState.ACCEPTED:
            logger.debug(f"Suggestion for binding {binding_id} already accepted")
            return self._accepted[binding_id]
        if suggestion.state == SuggestionState.DISMISSED:
            raise SuggestionStateError(binding_id, suggestion.state, "accept")

        # Re-read so edits made since the suggestion (e.g. a description) survive
        binding = await self.storage.get_binding(binding_id)
        if binding is None:
            raise BindingNotFoundError(f"Binding {binding_id} not found")

        binding.data_field = suggestion.suggested_field
        binding.is_mapped = True
        binding = await self.storage.update_binding(binding)

        suggestion.state = SuggestionState.ACCEPTED
        self._accepted[binding_id] = binding
        logger.info(
            f"Accepted suggestion {binding.placeholder} -> {binding.data_field} "
            f"(review {self.review_id})"
        )
        self._emit(ReviewAction.ACCEPTED, suggestion)

        return binding

    async def accept_all(self, min_confidence: Optional[float] = None) -> list[Binding]:
        """
        Accept every pending suggestion in production order.

        Args:
            min_confidence: Only accept suggestions at or above this confidence

        Returns:
            Bindings mapped by this call
        """
        accepted = []

        for suggestion in self.pending:
            if min_confidence is not None and suggestion.confidence < min_confidence:
                continue
            accepted.append(await self.accept(suggestion.binding_id))

        logger.info(f"Accepted {len(accepted)} suggestions (review {self.review_id})")
        return accepted

    def dismiss(self, binding_id: int) -> BindingSuggestion:
        """
        Dismiss a suggestion, leaving its binding unmapped.

        Raises:
            SuggestionNotFoundError: If the session has no such suggestion
            SuggestionStateError: If the suggestion was accepted
        """
        suggestion = self.get(binding_id)

        if suggestion.state == SuggestionState.DISMISSED:
            return suggestion
        if suggestion.state == SuggestionState.ACCEPTED:
            raise SuggestionStateError(binding_id, suggestion.state, "dismiss")

        suggestion.state = SuggestionState.DISMISSED
        logger.info(
            f"Dismissed suggestion {suggestion.binding.placeholder} -> "
            f"{suggestion.suggested_field} (review {self.review_id})"
        )
        self._emit(ReviewAction.DISMISSED, suggestion)

        return suggestion


class ReviewRegistry:
    """Keeps review sessions in memory until they expire."""

    def __init__(self, ttl: timedelta = timedelta(hours=24)):
        self._reviews: dict[str, SuggestionReview] = {}
        self._ttl = ttl

    def _is_expired(self, review: SuggestionReview, now: datetime) -> bool:
        return now - review.created_at > self._ttl

    def register(self, review: SuggestionReview) -> SuggestionReview:
        """Store a review session under its review ID, dropping expired sessions."""
        removed = self.cleanup_expired()
        if removed:
            logger.info(f"Removed {removed} expired reviews")

        self._reviews[review.review_id] = review
        logger.info(
            f"Registered review {review.review_id} with {len(review.suggestions)} suggestions"
        )
        return review

    def get(self, review_id: str) -> Optional[SuggestionReview]:
        """
        Get a review session by ID.

        Returns None if the review is not found or has expired.
        """
        review = self._reviews.get(review_id)

        if review is None:
            return None

        if self._is_expired(review, datetime.now(timezone.utc)):
            logger.info(f"Review {review_id} has expired")
            del self._reviews[review_id]
            return None

        return review

    def cleanup_expired(self) -> int:
        """
        Remove all expired review sessions.

        Returns:
            Number of expired reviews removed
        """
        now = datetime.now(timezone.utc)
        expired_ids = [
            review_id
            for review_id, review in self._reviews.items()
            if self._is_expired(review, now)
        ]

        for review_id in expired_ids:
            del self._reviews[review_id]

        return len(expired_ids)

    def discard(self, review_id: str) -> bool:
        """Remove a review session."""
        return self._reviews.pop(review_id, None) is not None

    def size(self) -> int:
        """Get the number of stored review sessions."""
        return len(self._reviews)
