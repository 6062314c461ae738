"""Conversion of the resume data schema into a DataField tree."""

import re
from typing import Any, Optional

from .models import DataField, FieldKind

# Resume data schema served to the template binding screens
RESUME_SCHEMA: dict[str, Any] = {
    "firstName": {"type": "string", "description": "First name"},
    "surname": {"type": "string", "description": "Last name"},
    "profession": {"type": "string", "description": "Professional title"},
    "city": {"type": "string", "description": "City"},
    "country": {"type": "string", "description": "Country"},
    "postalCode": {"type": "string", "description": "Postal code"},
    "phone": {"type": "string", "description": "Phone number"},
    "email": {"type": "string", "description": "Email address"},
    "photo": {"type": "string", "description": "Profile photo URL", "nullable": True},
    "summary": {"type": "string", "description": "Brief professional summary"},
    "professionalSummary": {"type": "string", "description": "Detailed professional summary"},
    "skills": {
        "type": "array",
        "items": {"type": "string"},
        "description": "List of professional skills",
    },
    "workExperience": {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Unique identifier"},
                "jobTitle": {"type": "string", "description": "Job title"},
                "employer": {"type": "string", "description": "Employer name"},
                "location": {"type": "string", "description": "Job location"},
                "isRemote": {"type": "boolean", "description": "Remote work status"},
                "startMonth": {"type": "string", "description": "Start month"},
                "startYear": {"type": "string", "description": "Start year"},
                "endMonth": {"type": "string", "description": "End month"},
                "endYear": {"type": "string", "description": "End year"},
                "isCurrentJob": {"type": "boolean", "description": "Current job status"},
                "responsibilities": {
                    "type": "string",
                    "description": "Job responsibilities and achievements",
                },
            },
        },
        "description": "Work experience history",
    },
    "education": {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Unique identifier"},
                "schoolName": {"type": "string", "description": "Institution name"},
                "schoolLocation": {"type": "string", "description": "School location"},
                "degree": {"type": "string", "description": "Degree obtained"},
                "fieldOfStudy": {"type": "string", "description": "Field of study"},
                "graduationMonth": {"type": "string", "description": "Graduation month"},
                "graduationYear": {"type": "string", "description": "Graduation year"},
                "description": {"type": "string", "description": "Education description"},
                "achievements": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string", "description": "Unique identifier"},
                            "type": {"type": "string", "description": "Achievement type"},
                            "title": {"type": "string", "description": "Achievement title"},
                            "description": {
                                "type": "string",
                                "description": "Achievement description",
                            },
                        },
                    },
                    "description": "Educational achievements",
                },
            },
        },
        "description": "Education history",
    },
    "certifications": {
        "type": "array",
        "items": {"type": "object"},
        "description": "Professional certifications",
    },
    "languages": {
        "type": "array",
        "items": {"type": "object"},
        "description": "Language proficiencies",
    },
    "selectedTemplateId": {"type": "number", "description": "Selected resume template ID"},
}

_KIND_BY_TYPE = {
    "string": FieldKind.STRING,
    "number": FieldKind.NUMBER,
    "integer": FieldKind.NUMBER,
    "boolean": FieldKind.BOOLEAN,
    "date": FieldKind.DATE,
    "array": FieldKind.ARRAY,
    "object": FieldKind.OBJECT,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def humanize_key(key: str) -> str:
    """Turn a schema key into a label ("jobTitle" -> "Job Title")."""
    words = _CAMEL_BOUNDARY.sub(" ", key).replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _field_kind(prop: dict[str, Any]) -> FieldKind:
    if prop.get("format") in ("date", "date-time"):
        return FieldKind.DATE
    return _KIND_BY_TYPE.get(prop.get("type", "string"), FieldKind.STRING)


def fields_from_schema(schema: dict[str, Any], prefix: Optional[str] = None) -> list[DataField]:
    """
    Build a DataField tree from a JSON-schema-like property mapping.

    Each property becomes a field whose path is qualified with its
    ancestors (``workExperience[].jobTitle``). Arrays of objects and objects
    with properties get children; arrays of scalars do not.

    Args:
        schema: Mapping of property name to ``{"type", "description",
            "items", "properties"}``
        prefix: Path of the enclosing field (internal)

    Returns:
        List of top-level DataField objects
    """
    fields = []

    for key, prop in schema.items():
        path = f"{prefix}.{key}" if prefix else key
        kind = _field_kind(prop)
        children: list[DataField] = []

        if kind == FieldKind.ARRAY:
            items = prop.get("items") or {}
            if items.get("properties"):
                children = fields_from_schema(items["properties"], prefix=f"{path}[]")
        elif kind == FieldKind.OBJECT and prop.get("properties"):
            children = fields_from_schema(prop["properties"], prefix=path)

        fields.append(
            DataField(
                path=path,
                name=humanize_key(key),
                description=prop.get("description"),
                kind=kind,
                children=children,
            )
        )

    return fields


def default_resume_fields() -> list[DataField]:
    """Field tree of the default resume data schema."""
    return fields_from_schema(RESUME_SCHEMA)
