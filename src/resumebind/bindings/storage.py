"""Database persistence layer for template bindings."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiosqlite

from ..config import settings
from .models import Binding, BindingConflictError, BindingNotFoundError

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, template_id, placeholder, data_field, description,
    is_mapped, created_at, updated_at
"""


class BindingStorage:
    """Manages database storage for template bindings."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or settings.database_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Initialize the database and create tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(str(self.db_path))

        await self._connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS template_bindings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                template_id INTEGER NOT NULL,
                placeholder TEXT NOT NULL,
                data_field TEXT NOT NULL DEFAULT '',
                description TEXT NULL,
                is_mapped INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NULL,
                UNIQUE(template_id, placeholder)
            );

            CREATE INDEX IF NOT EXISTS idx_template_bindings_template
                ON template_bindings(template_id);
            """
        )
        await self._connection.commit()
        logger.info("BindingStorage initialized")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def create_binding(self, binding: Binding) -> Binding:
        """
        Store a new binding.

        Raises:
            BindingConflictError: If the placeholder is already bound for the template
        """
        existing = await self.get_binding_by_placeholder(binding.template_id, binding.placeholder)
        if existing:
            raise BindingConflictError(existing)

        try:
            cursor = await self._connection.execute(
                """
                INSERT INTO template_bindings
                (template_id, placeholder, data_field, description, is_mapped,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    binding.template_id,
                    binding.placeholder,
                    binding.data_field,
                    binding.description,
                    int(binding.is_mapped),
                    binding.created_at.isoformat(),
                    binding.updated_at.isoformat() if binding.updated_at else None,
                ),
            )
        except aiosqlite.IntegrityError:
            # Inserted by a concurrent writer after the lookup above
            existing = await self.get_binding_by_placeholder(
                binding.template_id, binding.placeholder
            )
            raise BindingConflictError(existing)

        await self._connection.commit()
        binding.id = cursor.lastrowid

        logger.info(
            f"Created binding {binding.id}: template {binding.template_id} "
            f"{binding.placeholder} -> {binding.data_field or '(unmapped)'}"
        )
        return binding

    async def ensure_binding(self, template_id: int, placeholder: str) -> tuple[Binding, bool]:
        """
        Get the binding of a placeholder, creating an unmapped one if missing.

        Safe to call concurrently for the same placeholder; an existing
        binding is never modified.

        Returns:
            Tuple of (binding, created)
        """
        cursor = await self._connection.execute(
            """
            INSERT INTO template_bindings
            (template_id, placeholder, data_field, is_mapped, created_at)
            VALUES (?, ?, '', 0, ?)
            ON CONFLICT(template_id, placeholder) DO NOTHING
            """,
            (template_id, placeholder, datetime.now(timezone.utc).isoformat()),
        )
        await self._connection.commit()
        created = cursor.rowcount > 0

        binding = await self.get_binding_by_placeholder(template_id, placeholder)
        if created:
            logger.info(f"Created binding {binding.id}: template {template_id} {placeholder}")
        return binding, created

    async def upsert_binding(self, binding: Binding) -> Binding:
        """Store a binding, replacing any binding of the same placeholder."""
        now = datetime.now(timezone.utc)

        await self._connection.execute(
            """
            INSERT INTO template_bindings
            (template_id, placeholder, data_field, description, is_mapped,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(template_id, placeholder) DO UPDATE SET
                data_field = excluded.data_field,
                description = excluded.description,
                is_mapped = excluded.is_mapped,
                updated_at = excluded.updated_at
            """,
            (
                binding.template_id,
                binding.placeholder,
                binding.data_field,
                binding.description,
                int(binding.is_mapped),
                binding.created_at.isoformat(),
                now.isoformat(),
            ),
        )
        await self._connection.commit()

        stored = await self.get_binding_by_placeholder(binding.template_id, binding.placeholder)
        logger.info(
            f"Stored binding {stored.id}: template {stored.template_id} "
            f"{stored.placeholder} -> {stored.data_field or '(unmapped)'}"
        )
        return stored

    async def get_binding(self, binding_id: int) -> Optional[Binding]:
        """Get a binding by ID."""
        async with self._connection.execute(
            f"SELECT {_COLUMNS} FROM template_bindings WHERE id = ?",
            (binding_id,),
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                return self._row_to_binding(row)
        return None

    async def get_binding_by_placeholder(
        self, template_id: int, placeholder: str
    ) -> Optional[Binding]:
        """Get the binding of a placeholder in a template."""
        async with self._connection.execute(
            f"""
            SELECT {_COLUMNS} FROM template_bindings
            WHERE template_id = ? AND placeholder = ?
            """,
            (template_id, placeholder),
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                return self._row_to_binding(row)
        return None

    async def list_bindings(self, template_id: int, mapped: Optional[bool] = None) -> list[Binding]:
        """Get all bindings for a template, optionally filtered by mapped state."""
        query = f"SELECT {_COLUMNS} FROM template_bindings WHERE template_id = ?"
        params: list = [template_id]

        if mapped is not None:
            query += " AND is_mapped = ?"
            params.append(int(mapped))

        query += " ORDER BY id"

        async with self._connection.execute(query, params) as cursor:
            rows = await cursor.fetchall()
            return [self._row_to_binding(row) for row in rows]

    async def update_binding(self, binding: Binding) -> Binding:
        """
        Update the field, description and mapped state of a stored binding.

        Raises:
            BindingNotFoundError: If no binding has this ID
        """
        binding.updated_at = datetime.now(timezone.utc)

        cursor = await self._connection.execute(
            """
            UPDATE template_bindings
            SET data_field = ?, description = ?, is_mapped = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                binding.data_field,
                binding.description,
                int(binding.is_mapped),
                binding.updated_at.isoformat(),
                binding.id,
            ),
        )
        await self._connection.commit()

        if cursor.rowcount == 0:
            raise BindingNotFoundError(f"Binding {binding.id} not found")

        logger.info(
            f"Updated binding {binding.id}: {binding.placeholder} -> "
            f"{binding.data_field or '(unmapped)'} (mapped: {binding.is_mapped})"
        )
        return binding

    async def delete_binding(self, binding_id: int) -> bool:
        """Delete a binding by ID."""
        cursor = await self._connection.execute(
            "DELETE FROM template_bindings WHERE id = ?", (binding_id,)
        )
        await self._connection.commit()
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted binding ID {binding_id}")
        return deleted

    async def delete_all_bindings(self, template_id: int) -> int:
        """Delete all bindings for a template."""
        cursor = await self._connection.execute(
            "DELETE FROM template_bindings WHERE template_id = ?", (template_id,)
        )
        await self._connection.commit()
        count = cursor.rowcount
        logger.info(f"Deleted {count} bindings for template {template_id}")
        return count

    def _row_to_binding(self, row) -> Binding:
        """Convert a database row to a Binding object."""
        return Binding(
            id=row[0],
            template_id=row[1],
            placeholder=row[2],
            data_field=row[3],
            description=row[4],
            is_mapped=bool(row[5]),
            created_at=datetime.fromisoformat(row[6]),
            updated_at=datetime.fromisoformat(row[7]) if row[7] else None,
        )
