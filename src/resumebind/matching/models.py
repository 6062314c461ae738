"""Data models for placeholder matching results."""

from typing import Optional
from pydantic import BaseModel, Field


class FieldMatch(BaseModel):
    """Best field for a single placeholder."""

    field: str  # Catalog path of the matched field
    score: float = Field(ge=0.0, le=1.0)  # 1.0 = exact path match


class PlaceholderMatch(BaseModel):
    """Batch matching result for one placeholder."""

    placeholder: str  # Original token text
    field: str
    confidence: float = Field(ge=0.0, le=1.0)


class FieldCandidate(BaseModel):
    """One ranked candidate field for a placeholder."""

    field: str
    name: str
    description: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""
