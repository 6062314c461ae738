"""Data models for the resume data field catalog."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class FieldKind(str, Enum):
    """Declared value kind of a data field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"  # children describe the shape of one item
    OBJECT = "object"  # children describe the properties


class DataField(BaseModel):
    """One bindable slot in the resume data schema."""

    path: str  # Dotted/bracketed address (e.g., "workExperience[].jobTitle")
    name: str  # Human label (e.g., "Job Title")
    description: Optional[str] = None  # Hint text
    kind: FieldKind = FieldKind.STRING
    children: list["DataField"] = Field(default_factory=list)

    @model_validator(mode="after")
    def _children_only_on_containers(self) -> "DataField":
        if self.children and self.kind not in (FieldKind.ARRAY, FieldKind.OBJECT):
            raise ValueError(
                f"Field '{self.path}' of kind '{self.kind.value}' cannot have children"
            )
        return self


class CatalogEntry(BaseModel):
    """Flattened view of a single DataField node."""

    path: str
    name: str
    description: Optional[str] = None
    kind: FieldKind = FieldKind.STRING

    @property
    def is_array(self) -> bool:
        """True when the path addresses items of a collection."""
        return "[]" in self.path


DataField.model_rebuild()
