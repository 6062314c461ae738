"""Placeholder syntax definitions and patterns."""

import re
from typing import Optional, Pattern

from .models import PlaceholderKind

# {{firstName}}, {{#each workExperience}}, {{/each}} - brace interpolation/iteration
BRACE_PATTERN: Pattern = re.compile(r"\{\{[^{}]*\}\}")

# [[FIELD:profession]], [[LOOP:education]], [[IF:photo]] - bracket directives
DIRECTIVE_PATTERN: Pattern = re.compile(r"\[\[(FIELD|LOOP|IF):([^\]]*)\]\]")

# Any [[WORD: opener, used to flag directives with an unknown kind
ANY_DIRECTIVE_PATTERN: Pattern = re.compile(r"\[\[([A-Za-z_]+):")

# {{#each items}} block opener, used for context analysis
EACH_BLOCK_PATTERN: Pattern = re.compile(r"\{\{\s*#each\s+([^\s}]+)")

DIRECTIVE_KINDS = {
    "FIELD": PlaceholderKind.FIELD,
    "LOOP": PlaceholderKind.LOOP,
    "IF": PlaceholderKind.CONDITION,
}

# Removed from a raw token before comparison; block markers precede the bare braces
_DECORATIONS = (
    "{{#each ",
    "{{#if ",
    "{{/each}}",
    "{{/if}}",
    "[[FIELD:",
    "[[LOOP:",
    "[[IF:",
    "]]",
    "{{",
    "}}",
)

_WHITESPACE = re.compile(r"\s+")


def normalize_placeholder(token: Optional[str]) -> str:
    """
    Reduce a raw placeholder token to a bare comparison string.

    Grammar decoration is stripped, dots become spaces and whitespace runs
    collapse, so ``{{workExperience.jobTitle}}`` becomes
    ``workExperience jobTitle``.

    Args:
        token: The raw token text

    Returns:
        Normalized comparison string (may be empty)
    """
    text = token or ""
    for marker in _DECORATIONS:
        text = text.replace(marker, "")
    text = text.replace(".", " ")
    return _WHITESPACE.sub(" ", text).strip()


def is_loop_directive(token: str) -> bool:
    """Check whether a raw token opens an iteration ({{#each x}} or [[LOOP:x]])."""
    stripped = token.strip()
    return stripped.startswith("{{#each") or stripped.startswith("[[LOOP:")


def classify_brace_token(token: str) -> tuple[PlaceholderKind, str]:
    """
    Determine the kind and bare name of a ``{{...}}`` token.

    Returns:
        Tuple of (kind, name); block closers carry the closed block keyword
    """
    inner = token[2:-2].strip()

    if inner.startswith("#each"):
        return PlaceholderKind.EACH, inner[len("#each"):].strip()
    if inner.startswith("#if"):
        return PlaceholderKind.IF, inner[len("#if"):].strip()
    if inner.startswith("/"):
        return PlaceholderKind.CLOSE, inner[1:].strip()

    return PlaceholderKind.INTERPOLATION, inner


def array_base_name(path: str) -> str:
    """Return the collection name of an array path (text before the first '[')."""
    return path.split("[", 1)[0]
