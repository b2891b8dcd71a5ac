"""Resource catalog: room keys and projectors available for reservation."""

from __future__ import annotations

from typing import Optional

from ..errors import ValidationError
from ..models.entities import Resource, ResourceKind, ResourceStatus
from .db import execute, from_db_datetime, get_db, query_all, query_one

# kind -> (table, primary key, details column)
_TABLES = {
    ResourceKind.ROOM_KEY: ("rooms", "room_id", "location"),
    ResourceKind.PROJECTOR: ("projectors", "projector_id", "brand"),
}


def parse_kind(value: str | ResourceKind) -> ResourceKind:
    try:
        return ResourceKind(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown resource kind '{value}'.") from exc


def parse_status(value: str | ResourceStatus) -> ResourceStatus:
    try:
        return ResourceStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown resource status '{value}'.") from exc


def _row_to_resource(row, kind: ResourceKind) -> Resource:
    _, id_column, details_column = _TABLES[kind]
    return Resource(
        resource_id=row[id_column],
        kind=kind,
        name=row["name"],
        details=row[details_column],
        description=row["description"],
        status=ResourceStatus(row["status"]),
        created_at=from_db_datetime(row["created_at"]),
    )


def list_available(kind: str | ResourceKind, db=None) -> list[Resource]:
    """Return available resources of one kind ordered by name."""

    kind = parse_kind(kind)
    table, _, _ = _TABLES[kind]
    db = db or get_db()
    rows = query_all(
        db,
        f"SELECT * FROM {table} WHERE status = ? ORDER BY name ASC",
        (ResourceStatus.AVAILABLE.value,),
    )
    return [_row_to_resource(row, kind) for row in rows]


def list_all(kind: str | ResourceKind) -> list[Resource]:
    kind = parse_kind(kind)
    table, _, _ = _TABLES[kind]
    rows = query_all(get_db(), f"SELECT * FROM {table} ORDER BY name ASC")
    return [_row_to_resource(row, kind) for row in rows]


def get_resource(kind: str | ResourceKind, resource_id: int, connection=None) -> Resource | None:
    """Fetch a single resource regardless of its availability."""

    kind = parse_kind(kind)
    table, id_column, _ = _TABLES[kind]
    db = connection or get_db()
    row = query_one(db, f"SELECT * FROM {table} WHERE {id_column} = ?", (resource_id,))
    return _row_to_resource(row, kind) if row else None


def create_room(
    name: str,
    location: Optional[str] = None,
    description: Optional[str] = None,
    status: str | ResourceStatus = ResourceStatus.AVAILABLE,
) -> Resource:
    db = get_db()
    cursor = execute(
        db,
        "INSERT INTO rooms (name, location, description, status) VALUES (?, ?, ?, ?)",
        (name, location, description, parse_status(status).value),
    )
    return get_resource(ResourceKind.ROOM_KEY, cursor.lastrowid, connection=db)


def create_projector(
    name: str,
    brand: Optional[str] = None,
    description: Optional[str] = None,
    status: str | ResourceStatus = ResourceStatus.AVAILABLE,
) -> Resource:
    db = get_db()
    cursor = execute(
        db,
        "INSERT INTO projectors (name, brand, description, status) VALUES (?, ?, ?, ?)",
        (name, brand, description, parse_status(status).value),
    )
    return get_resource(ResourceKind.PROJECTOR, cursor.lastrowid, connection=db)


def set_status(kind: str | ResourceKind, resource_id: int, status: str | ResourceStatus) -> None:
    """Toggle catalog availability. Existing reservations are not touched."""

    kind = parse_kind(kind)
    table, id_column, _ = _TABLES[kind]
    db = get_db()
    execute(
        db,
        f"UPDATE {table} SET status = ? WHERE {id_column} = ?",
        (parse_status(status).value, resource_id),
    )
