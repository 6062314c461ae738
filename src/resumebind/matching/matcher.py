"""Lexical matcher proposing data fields for template placeholders."""

import logging
from typing import Iterable, Optional

from ..config import settings
from ..fields import CatalogEntry, DataField, flatten_fields
from ..placeholders.syntax import array_base_name, is_loop_directive, normalize_placeholder
from .models import FieldCandidate, FieldMatch, PlaceholderMatch
from .similarity import SimilarityFn, string_similarity

logger = logging.getLogger(__name__)

# Descriptions are a weaker signal than paths and names
DESCRIPTION_WEIGHT = 0.7

_LOOP_WORDS = ("each", "loop")


def describe_confidence(confidence: float, entry: CatalogEntry, normalized: str) -> str:
    """Explain a confidence score in a sentence for the review screen."""
    if confidence > 0.9:
        return f'Perfect match based on field "{entry.name}".'
    if confidence > 0.7:
        return f'Strong match between "{normalized}" and "{entry.name}".'
    if confidence > 0.5:
        return "Good match based on naming similarity."
    return "Possible match, but low confidence."


class BindingMatcher:
    """
    Propose the best data field for each template placeholder.

    The field tree is flattened once at construction; the matcher holds no
    other state and can be shared across requests.
    """

    def __init__(
        self,
        fields: Iterable[DataField],
        threshold: Optional[float] = None,
        qualify_paths: Optional[bool] = None,
        similarity: SimilarityFn = string_similarity,
    ):
        """
        Initialize the matcher.

        Args:
            fields: Top-level fields of the resume data schema tree
            threshold: Minimum score for a suggestion (default from settings)
            qualify_paths: Prefix nested paths with parent paths (default from settings)
            similarity: Symmetric [0, 1] string similarity function
        """
        self.threshold = settings.match_threshold if threshold is None else threshold
        if qualify_paths is None:
            qualify_paths = settings.qualify_field_paths
        self.catalog: tuple[CatalogEntry, ...] = tuple(
            flatten_fields(fields, qualify_paths=qualify_paths)
        )
        self._similarity = similarity

    def get_entry(self, path: str) -> Optional[CatalogEntry]:
        """Get the catalog entry with the given path."""
        return next((entry for entry in self.catalog if entry.path == path), None)

    def _entry_score(self, normalized: str, entry: CatalogEntry) -> float:
        """Score an entry as the best of its path, name and weighted description."""
        score = max(
            self._similarity(normalized, entry.path),
            self._similarity(normalized, entry.name),
        )
        if entry.description:
            score = max(score, self._similarity(normalized, entry.description) * DESCRIPTION_WEIGHT)
        return score

    def _find_exact(self, normalized: str) -> Optional[CatalogEntry]:
        lowered = normalized.lower()
        for entry in self.catalog:
            if entry.path.lower() == lowered:
                return entry
        return None

    @staticmethod
    def _wants_collection(placeholder: str, normalized: str) -> bool:
        lowered = normalized.lower()
        return is_loop_directive(placeholder) or any(word in lowered for word in _LOOP_WORDS)

    def match(self, placeholder: str) -> Optional[FieldMatch]:
        """
        Find the best-matching field for a placeholder.

        Args:
            placeholder: Raw token text (e.g., "{{email}}", "[[LOOP:education]]")

        Returns:
            FieldMatch, or None when no field reaches the threshold
        """
        normalized = normalize_placeholder(placeholder)

        exact = self._find_exact(normalized)
        if exact is not None:
            logger.debug(f"Exact path match: {placeholder} -> {exact.path}")
            return FieldMatch(field=exact.path, score=1.0)

        # Below any real score so the first entry is always recorded
        best_entry: Optional[CatalogEntry] = None
        best_score = -1.0

        for entry in self.catalog:
            score = self._entry_score(normalized, entry)
            if score > best_score:
                best_entry, best_score = entry, score

        if self._wants_collection(placeholder, normalized):
            for entry in self.catalog:
                if not entry.is_array:
                    continue
                score = self._similarity(normalized, array_base_name(entry.path))
                if score > best_score:
                    best_entry, best_score = entry, score

        if best_entry is None or best_score < self.threshold:
            logger.debug(f"No suggestion for {placeholder} (best score {best_score:.2f})")
            return None

        logger.debug(f"Matched {placeholder} -> {best_entry.path} ({best_score:.2f})")
        return FieldMatch(field=best_entry.path, score=best_score)

    def process_placeholders(self, placeholders: Iterable[str]) -> list[PlaceholderMatch]:
        """
        Match a batch of placeholders.

        Args:
            placeholders: Raw tokens in template order

        Returns:
            PlaceholderMatch for each placeholder that matched, in input order
        """
        results = []

        for placeholder in placeholders:
            found = self.match(placeholder)
            if found is not None:
                results.append(
                    PlaceholderMatch(
                        placeholder=placeholder,
                        field=found.field,
                        confidence=found.score,
                    )
                )

        logger.info(f"Matched {len(results)} placeholders against {len(self.catalog)} fields")
        return results

    def rank(self, placeholder: str, limit: int = 5) -> list[FieldCandidate]:
        """
        Rank candidate fields for a placeholder.

        An exact path match is returned alone. Otherwise every entry at or
        above the threshold is ranked by score, with collection entries also
        scored on their base name for iteration placeholders.

        Args:
            placeholder: Raw token text
            limit: Maximum number of candidates

        Returns:
            Candidates ordered by confidence, highest first
        """
        normalized = normalize_placeholder(placeholder)

        exact = self._find_exact(normalized)
        if exact is not None:
            return [
                FieldCandidate(
                    field=exact.path,
                    name=exact.name,
                    description=exact.description,
                    confidence=1.0,
                    reasoning=describe_confidence(1.0, exact, normalized),
                )
            ]

        wants_collection = self._wants_collection(placeholder, normalized)
        scored = []

        for entry in self.catalog:
            score = self._entry_score(normalized, entry)
            if wants_collection and entry.is_array:
                score = max(score, self._similarity(normalized, array_base_name(entry.path)))
            if score >= self.threshold:
                scored.append((entry, score))

        scored.sort(key=lambda item: item[1], reverse=True)

        return [
            FieldCandidate(
                field=entry.path,
                name=entry.name,
                description=entry.description,
                confidence=score,
                reasoning=describe_confidence(score, entry, normalized),
            )
            for entry, score in scored[:limit]
        ]
