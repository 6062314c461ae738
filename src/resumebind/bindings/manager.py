"""Main binding manager coordinating extraction, matching and review."""

import logging
from datetime import timedelta
from typing import Iterable, Optional

from ..config import settings
from ..fields import DataField, default_resume_fields
from ..matching import BindingMatcher, describe_confidence
from ..placeholders import PlaceholderExtractor, PlaceholderKind, distinct_tokens
from ..placeholders.syntax import normalize_placeholder
from .models import (
    Binding,
    BindingNotFoundError,
    BindingSuggestion,
    ReviewNotFoundError,
)
from .review import EventSink, ReviewRegistry, SuggestionReview
from .storage import BindingStorage

logger = logging.getLogger(__name__)


class BindingManager:
    """
    Manages the bindings of resume templates.

    This is the main entry point for binding operations. It coordinates
    between placeholder extraction, field matching, storage and review.
    """

    def __init__(
        self,
        storage: Optional[BindingStorage] = None,
        fields: Optional[Iterable[DataField]] = None,
        threshold: Optional[float] = None,
        qualify_paths: Optional[bool] = None,
        event_sink: Optional[EventSink] = None,
    ):
        """
        Initialize the binding manager.

        Args:
            storage: Optional BindingStorage instance (created if not provided)
            fields: Field tree to bind against (default resume schema if not provided)
            threshold: Minimum suggestion confidence (default from settings)
            qualify_paths: Qualify nested field paths (default from settings)
            event_sink: Optional callable notified of review state changes
        """
        self.storage = storage or BindingStorage()
        self.extractor = PlaceholderExtractor()
        self.matcher = BindingMatcher(
            fields if fields is not None else default_resume_fields(),
            threshold=threshold,
            qualify_paths=qualify_paths,
        )
        self.reviews = ReviewRegistry(ttl=timedelta(seconds=settings.review_ttl_seconds))
        self.event_sink = event_sink
        self._initialized = False

    async def initialize(self):
        """Initialize the binding manager (creates database tables if needed)."""
        if not self._initialized:
            await self.storage.initialize()
            self._initialized = True
            logger.info("BindingManager initialized")

    async def close(self):
        """Close the binding manager and cleanup resources."""
        await self.storage.close()
        self._initialized = False

    def bindable_tokens(self, content: Optional[str]) -> list[str]:
        """Distinct tokens of a template, without block closers like {{/each}}."""
        placeholders = self.extractor.extract_placeholders(content)
        return distinct_tokens(
            p.syntax for p in placeholders if p.kind != PlaceholderKind.CLOSE
        )

    async def discover(self, template_id: int, content: Optional[str]) -> list[Binding]:
        """
        Create unmapped bindings for placeholders new to a template.

        Args:
            template_id: The template ID
            content: Template markup, script and style content

        Returns:
            All bindings of the template after discovery
        """
        created = 0

        for token in self.bindable_tokens(content):
            _, is_new = await self.storage.ensure_binding(template_id, token)
            created += int(is_new)

        logger.info(f"Discovered {created} new placeholders in template {template_id}")
        return await self.storage.list_bindings(template_id)

    async def suggest(self, template_id: int, content: Optional[str]) -> SuggestionReview:
        """
        Propose fields for every unmapped binding of a template.

        Placeholders without a field at or above the threshold get no
        suggestion and stay unmapped.

        Args:
            template_id: The template ID
            content: Template markup, script and style content

        Returns:
            A registered SuggestionReview over the suggestions
        """
        bindings = await self.discover(template_id, content)
        unmapped = {b.placeholder: b for b in bindings if not b.is_mapped}

        suggestions = []
        for found in self.matcher.process_placeholders(unmapped):
            entry = self.matcher.get_entry(found.field)
            suggestions.append(
                BindingSuggestion(
                    binding=unmapped[found.placeholder],
                    suggested_field=found.field,
                    confidence=found.confidence,
                    reasoning=describe_confidence(
                        found.confidence, entry, normalize_placeholder(found.placeholder)
                    ),
                )
            )

        logger.info(
            f"Suggested fields for {len(suggestions)} of {len(unmapped)} unmapped "
            f"placeholders in template {template_id}"
        )

        review = SuggestionReview(
            storage=self.storage,
            suggestions=suggestions,
            template_id=template_id,
            event_sink=self.event_sink,
        )
        return self.reviews.register(review)

    def get_review(self, review_id: str) -> SuggestionReview:
        """
        Get a review session by ID.

        Raises:
            ReviewNotFoundError: If the review is unknown or expired
        """
        review = self.reviews.get(review_id)
        if review is None:
            raise ReviewNotFoundError(f"Review {review_id} not found or expired")
        return review

    async def get_template_binding(self, template_id: int, binding_id: int) -> Binding:
        """
        Get a binding that belongs to a template.

        Raises:
            BindingNotFoundError: If the binding does not exist in this template
        """
        binding = await self.storage.get_binding(binding_id)
        if binding is None or binding.template_id != template_id:
            raise BindingNotFoundError(
                f"Binding {binding_id} not found in template {template_id}"
            )
        return binding

    async def assign(
        self,
        template_id: int,
        binding_id: int,
        data_field: str,
        description: Optional[str] = None,
    ) -> Binding:
        """
        Map a binding to a field chosen by a person.

        Args:
            template_id: The template ID
            binding_id: The binding ID
            data_field: Field path to bind
            description: Optional note kept with the binding

        Returns:
            The mapped Binding

        Raises:
            BindingNotFoundError: If the binding does not exist in this template
        """
        binding = await self.get_template_binding(template_id, binding_id)
        binding.data_field = data_field
        binding.is_mapped = bool(data_field)
        if description is not None:
            binding.description = description
        return await self.storage.update_binding(binding)

    async def reconcile(
        self, template_id: int, content: Optional[str], delete: bool = False
    ) -> list[Binding]:
        """
        Find bindings whose placeholder no longer appears in the template.

        Args:
            template_id: The template ID
            content: Current template content
            delete: Delete the stale bindings

        Returns:
            The stale bindings
        """
        current = set(self.bindable_tokens(content))
        stale = [
            b for b in await self.storage.list_bindings(template_id) if b.placeholder not in current
        ]

        if stale:
            logger.warning(f"Template {template_id} has {len(stale)} stale bindings")
            if delete:
                for binding in stale:
                    await self.storage.delete_binding(binding.id)

        return stale
