"""Extractor for placeholder tokens in template markup."""

import logging
from typing import Iterable, Mapping, Optional

from .models import (
    ExtractionReport,
    Placeholder,
    PlaceholderKind,
    TokenContext,
    ValidationResult,
)
from .syntax import (
    ANY_DIRECTIVE_PATTERN,
    BRACE_PATTERN,
    DIRECTIVE_KINDS,
    DIRECTIVE_PATTERN,
    EACH_BLOCK_PATTERN,
    classify_brace_token,
)

logger = logging.getLogger(__name__)


def distinct_tokens(tokens: Iterable[str]) -> list[str]:
    """Drop repeated tokens, keeping the order of first appearance."""
    return list(dict.fromkeys(tokens))


class PlaceholderExtractor:
    """Scan template text for placeholder tokens."""

    def extract_tokens(self, text: Optional[str]) -> list[str]:
        """
        Extract placeholder tokens from template text.

        Brace tokens ({{...}}) come first, followed by bracket directives
        ([[FIELD:...]], [[LOOP:...]], [[IF:...]]), each group in the order
        found. Repeated tokens are kept; see ``distinct_tokens``.

        Args:
            text: Template markup, script and style content

        Returns:
            List of token strings exactly as written
        """
        if not text:
            return []

        tokens = [match.group(0) for match in BRACE_PATTERN.finditer(text)]
        tokens.extend(match.group(0) for match in DIRECTIVE_PATTERN.finditer(text))
        return tokens

    def extract_placeholders(self, text: Optional[str]) -> list[Placeholder]:
        """
        Extract placeholders with their kind and position.

        Args:
            text: Template text to scan

        Returns:
            List of Placeholder objects in ``extract_tokens`` order
        """
        if not text:
            return []

        placeholders = []

        for match in BRACE_PATTERN.finditer(text):
            kind, name = classify_brace_token(match.group(0))
            placeholders.append(
                Placeholder(
                    name=name,
                    kind=kind,
                    syntax=match.group(0),
                    start_pos=match.start(),
                    end_pos=match.end(),
                )
            )

        for match in DIRECTIVE_PATTERN.finditer(text):
            placeholders.append(
                Placeholder(
                    name=match.group(2).strip(),
                    kind=DIRECTIVE_KINDS[match.group(1)],
                    syntax=match.group(0),
                    start_pos=match.start(),
                    end_pos=match.end(),
                )
            )

        for placeholder in placeholders:
            logger.debug(f"Found placeholder: {placeholder.syntax} (kind: {placeholder.kind})")

        return placeholders

    def extract_from_sources(self, sources: Mapping[str, Optional[str]]) -> ExtractionReport:
        """
        Extract placeholders from a template split into named sources.

        Args:
            sources: Source name (e.g. "html", "css", "js", "svg") to text

        Returns:
            ExtractionReport with distinct tokens and per-source counts
        """
        all_tokens: list[str] = []
        counts: dict[str, int] = {}

        for source_name, text in sources.items():
            tokens = self.extract_tokens(text)
            counts[source_name] = len(tokens)
            all_tokens.extend(tokens)

        return ExtractionReport(
            placeholders=distinct_tokens(all_tokens),
            counts=counts,
            total=len(all_tokens),
        )

    def analyze_token_context(
        self, token: str, text: Optional[str], window: int = 100
    ) -> TokenContext:
        """
        Describe where a token sits in the template.

        Args:
            token: The token text to locate (first occurrence is used)
            text: Template text
            window: Characters of context to take on each side

        Returns:
            TokenContext; empty context when the token is not found
        """
        result = TokenContext(token=token)
        if not text:
            return result

        index = text.find(token)
        if index == -1:
            return result

        start = max(0, index - window)
        end = min(len(text), index + len(token) + window)
        result.context = text[start:end]

        opened = EACH_BLOCK_PATTERN.findall(text[start:index])
        if opened:
            result.in_repeated_block = True
            result.section = opened[-1]

        if ".map(" in result.context or "v-for=" in result.context:
            result.in_repeated_block = True

        return result

    def validate_syntax(self, text: Optional[str]) -> ValidationResult:
        """
        Validate placeholder syntax in template text.

        Args:
            text: The template text to validate

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = []
        warnings = []
        text = text or ""

        open_braces = text.count("{{")
        close_braces = text.count("}}")
        if open_braces != close_braces:
            errors.append(
                f"Mismatched placeholder braces: {open_braces} opening, {close_braces} closing"
            )

        open_brackets = text.count("[[")
        close_brackets = text.count("]]")
        if open_brackets != close_brackets:
            errors.append(
                f"Mismatched directive brackets: {open_brackets} opening, "
                f"{close_brackets} closing"
            )

        placeholders = self.extract_placeholders(text)

        for placeholder in placeholders:
            if not placeholder.name:
                errors.append(f"Empty placeholder '{placeholder.syntax}' is not allowed")

        for match in ANY_DIRECTIVE_PATTERN.finditer(text):
            if match.group(1) not in DIRECTIVE_KINDS:
                warnings.append(
                    f"Unknown directive kind '{match.group(1)}' - "
                    f"expected one of {', '.join(DIRECTIVE_KINDS)}"
                )

        opened = sum(
            1 for p in placeholders if p.kind in (PlaceholderKind.EACH, PlaceholderKind.IF)
        )
        closed = sum(1 for p in placeholders if p.kind == PlaceholderKind.CLOSE)
        if opened != closed:
            warnings.append(f"Unbalanced blocks: {opened} opened, {closed} closed")

        return ValidationResult(
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )
