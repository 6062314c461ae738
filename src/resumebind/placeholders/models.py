"""Data models for template placeholders."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class PlaceholderKind(str, Enum):
    """Kind of placeholder token."""

    INTERPOLATION = "interpolation"  # {{firstName}} - value substitution
    EACH = "each"  # {{#each workExperience}} - iteration block opener
    IF = "if"  # {{#if photo}} - conditional block opener
    CLOSE = "close"  # {{/each}} or {{/if}} - block closer
    FIELD = "field"  # [[FIELD:profession]] - typed field directive
    LOOP = "loop"  # [[LOOP:education]] - typed loop directive
    CONDITION = "condition"  # [[IF:photo]] - typed conditional directive


class Placeholder(BaseModel):
    """Represents a placeholder token found in template markup."""

    name: str  # Bare inner name (e.g., "workExperience.jobTitle")
    kind: PlaceholderKind
    syntax: str  # Original token text (e.g., "{{workExperience.jobTitle}}")
    start_pos: int = 0  # Position in the text where the token starts
    end_pos: int = 0  # Position in the text where the token ends


class TokenContext(BaseModel):
    """Markup surrounding a token and the block it sits in."""

    token: str
    context: str = ""
    section: Optional[str] = None  # Collection named by an enclosing {{#each}}
    in_repeated_block: bool = False


class ExtractionReport(BaseModel):
    """Placeholders found across the named sources of one template."""

    placeholders: list[str]  # Distinct tokens, order of first appearance
    counts: dict[str, int] = Field(default_factory=dict)  # source name -> token count
    total: int = 0


class ValidationResult(BaseModel):
    """Result of validating placeholder syntax."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
