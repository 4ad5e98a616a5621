"""Dialect-aware ``INSERT ... ON CONFLICT (sync_id) DO UPDATE`` builder."""

from typing import Any

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

SUPPORTED_DIALECTS = ("postgresql", "sqlite")


def supports_upsert(db: AsyncSession) -> bool:
    return db.get_bind().dialect.name in SUPPORTED_DIALECTS


def build_sync_id_upsert(
    db: AsyncSession,
    model: Any,
    values: dict[str, Any],
    update_columns: list[str],
    where: ColumnElement[bool],
):
    """Build a single-statement upsert keyed on ``sync_id`` returning the row id.

    The update branch only runs when ``where`` holds for the conflicting row;
    otherwise the statement returns no row. Returns ``None`` when the bound
    dialect has no native upsert.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        return None

    update_set: dict[str, Any] = {column: values[column] for column in update_columns}
    update_set["version"] = model.version + 1

    stmt = insert(model).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=[model.sync_id],
        set_=update_set,
        where=where,
    ).returning(model.id)
