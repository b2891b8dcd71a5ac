"""Data access helpers for the users table (the portal's identity collaborator)."""

from __future__ import annotations

from typing import Optional

import bcrypt

from ..models.entities import Role, User
from .db import execute, from_db_datetime, get_db, query_all, query_one

SELF_SERVICE_ROLES = (Role.STUDENT, Role.FACULTY)


def _row_to_user(row) -> User:
    return User(
        user_id=row["user_id"],
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        nim_nip=row["nim_nip"],
        phone=row["phone"],
        created_at=from_db_datetime(row["created_at"]),
        is_active=bool(row["is_active"]),
    )


def parse_role(value: str | Role) -> Role:
    try:
        return Role(value)
    except ValueError as exc:
        raise ValueError(f"Unsupported role '{value}'") from exc


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_user(
    full_name: str,
    email: str,
    password_hash: str,
    role: str | Role = Role.STUDENT,
    nim_nip: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    """Insert a new user and return the persisted entity."""

    role = parse_role(role)
    db = get_db()
    cursor = execute(
        db,
        """
        INSERT INTO users (full_name, email, password_hash, role, nim_nip, phone)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (full_name, email, password_hash, role.value, nim_nip, phone),
    )
    return get_user_by_id(cursor.lastrowid, connection=db)


def get_user_by_id(user_id: int, connection=None) -> User | None:
    """Fetch a user by primary key."""

    db = connection or get_db()
    row = query_one(
        db,
        "SELECT * FROM users WHERE user_id = ?",
        (user_id,),
    )
    return _row_to_user(row) if row else None


def get_user_by_email(email: str) -> User | None:
    """Fetch a user by unique email address."""

    db = get_db()
    row = query_one(
        db,
        "SELECT * FROM users WHERE email = ?",
        (email,),
    )
    return _row_to_user(row) if row else None


def list_users(role: Optional[Role] = None) -> list[User]:
    db = get_db()
    query = "SELECT * FROM users"
    params: list = []
    if role is not None:
        query += " WHERE role = ?"
        params.append(role.value)
    query += " ORDER BY full_name ASC"
    rows = query_all(db, query, params)
    return [_row_to_user(row) for row in rows]


def set_role(user_id: int, role: str | Role) -> None:
    """Update the role for a user."""

    role = parse_role(role)
    db = get_db()
    execute(
        db,
        "UPDATE users SET role = ? WHERE user_id = ?",
        (role.value, user_id),
    )


def deactivate_user(user_id: int) -> None:
    """Soft delete a user record."""

    db = get_db()
    execute(
        db,
        "UPDATE users SET is_active = 0 WHERE user_id = ?",
        (user_id,),
    )


def verify_password(stored_hash: str, candidate: str) -> bool:
    """Compare a stored hash against a candidate password."""

    if not stored_hash:
        return False
    return bcrypt.checkpw(candidate.encode("utf-8"), stored_hash.encode("utf-8"))
