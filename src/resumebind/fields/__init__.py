"""Resume data field catalog used as binding targets."""

from .models import DataField, FieldKind, CatalogEntry
from .catalog import flatten_fields
from .schema import RESUME_SCHEMA, fields_from_schema, default_resume_fields, humanize_key

__all__ = [
    "DataField",
    "FieldKind",
    "CatalogEntry",
    "flatten_fields",
    "RESUME_SCHEMA",
    "fields_from_schema",
    "default_resume_fields",
    "humanize_key",
]
