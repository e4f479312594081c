"""Single-statement INSERT ... ON CONFLICT DO UPDATE across dialects."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from sqlalchemy import and_, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement


def upsert(
    db: Session,
    model: Any,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
    update_values: Dict[str, Any],
    index_where: Optional[ColumnElement] = None,
) -> None:
    """
    Insert a row or overwrite update_values on the row it conflicts with.

    conflict_columns (plus index_where for partial unique indexes) must match
    a unique index on the table. PostgreSQL and SQLite use native upserts;
    other dialects fall back to update-then-insert. Does not commit.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        _update_or_insert(
            db, model, values, conflict_columns, update_values, index_where
        )
        return

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        index_where=index_where,
        set_=update_values,
    )
    db.execute(stmt)


def _update_or_insert(
    db: Session,
    model: Any,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
    update_values: Dict[str, Any],
    index_where: Optional[ColumnElement] = None,
) -> None:
    criteria = []
    for name in conflict_columns:
        column = getattr(model, name)
        value = values.get(name)
        criteria.append(column.is_(None) if value is None else column == value)
    if index_where is not None:
        criteria.append(index_where)
    result = db.execute(update(model).where(and_(*criteria)).values(**update_values))
    if result.rowcount == 0:
        db.add(model(**values))
        db.flush()
