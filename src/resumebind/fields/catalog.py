"""Flattening of data field trees into a matchable catalog."""

import logging
from typing import Iterable, Optional

from .models import CatalogEntry, DataField, FieldKind

logger = logging.getLogger(__name__)


def _qualify(parent: DataField, child_path: str) -> str:
    """Prefix a child path with its parent's path unless already qualified."""
    prefix = f"{parent.path}[]" if parent.kind == FieldKind.ARRAY else parent.path
    if child_path == prefix or child_path.startswith(f"{prefix}."):
        return child_path
    return f"{prefix}.{child_path}"


def flatten_fields(
    fields: Iterable[DataField],
    qualify_paths: bool = False,
    _parent: Optional[DataField] = None,
) -> list[CatalogEntry]:
    """
    Flatten a field tree into catalog entries.

    Every node becomes one entry (parents before their children, depth
    first). By default each node keeps its own declared path verbatim, since
    schema paths are already qualified (``workExperience[].jobTitle``).

    Args:
        fields: Top-level fields of the tree
        qualify_paths: Prefix each child path with its parent's path when it
            is not already prefixed (``parent[].child`` / ``parent.child``)

    Returns:
        List of CatalogEntry in depth-first pre-order
    """
    entries: list[CatalogEntry] = []

    for field in fields:
        path = field.path
        if qualify_paths and _parent is not None:
            path = _qualify(_parent, path)

        entries.append(
            CatalogEntry(
                path=path,
                name=field.name,
                description=field.description,
                kind=field.kind,
            )
        )

        if field.children:
            parent = field.model_copy(update={"path": path}) if path != field.path else field
            entries.extend(flatten_fields(field.children, qualify_paths, _parent=parent))

    if _parent is None:
        logger.debug(f"Flattened field tree into {len(entries)} catalog entries")

    return entries
