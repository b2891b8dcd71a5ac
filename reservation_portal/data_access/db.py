"""SQLite connection management utilities."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

import click
from flask import Flask, current_app, g

from ..errors import StoreUnavailable

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _create_connection(database_url: str) -> sqlite3.Connection:
    """Instantiate a SQLite connection for the provided URL."""

    if database_url == "sqlite:///:memory:":
        db_path = ":memory:"
    elif database_url.startswith("sqlite:///"):
        db_path = database_url.replace("sqlite:///", "", 1)
    elif database_url.startswith("sqlite://"):
        db_path = database_url.replace("sqlite://", "", 1)
    else:
        raise ValueError("Only sqlite database URLs are supported in this implementation.")

    try:
        connection = sqlite3.connect(db_path, check_same_thread=False)
    except sqlite3.OperationalError as exc:
        raise StoreUnavailable(f"Could not open database at {db_path}.") from exc
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    return connection


def get_db() -> sqlite3.Connection:
    """Return a cached connection for the request context."""

    if "db_conn" not in g:
        database_url = current_app.config["DATABASE_URL"]
        g.db_conn = _create_connection(database_url)
    return g.db_conn  # type: ignore[return-value]


def close_db(exception: Exception | None = None) -> None:
    """Close the stored connection at the end of the request."""

    connection = g.pop("db_conn", None)
    if connection is not None:
        connection.close()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_db_datetime(value: datetime) -> str:
    """Serialize an instant as a UTC ISO-8601 string; naive values are taken as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(str(value).replace(" ", "T").replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def execute(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> sqlite3.Cursor:
    """Execute a write query and commit immediately."""

    try:
        cursor = db.execute(query, params or [])
        db.commit()
    except sqlite3.OperationalError as exc:
        current_app.logger.error("Write failed against the reservation store: %s", exc)
        raise StoreUnavailable("The reservation store is unavailable.") from exc
    return cursor


def query_all(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> list[sqlite3.Row]:
    """Execute a read query returning multiple rows."""

    try:
        cursor = db.execute(query, params or [])
        return cursor.fetchall()
    except sqlite3.OperationalError as exc:
        current_app.logger.error("Read failed against the reservation store: %s", exc)
        raise StoreUnavailable("The reservation store is unavailable.") from exc


def query_one(db: sqlite3.Connection, query: str, params: Sequence[Any] | None = None) -> sqlite3.Row | None:
    """Execute a read query returning a single row."""

    try:
        cursor = db.execute(query, params or [])
        return cursor.fetchone()
    except sqlite3.OperationalError as exc:
        current_app.logger.error("Read failed against the reservation store: %s", exc)
        raise StoreUnavailable("The reservation store is unavailable.") from exc


def init_db(app: Flask | None = None) -> None:
    """Initialize the database schema by executing the SQL script."""

    app = app or current_app
    with app.app_context():
        db = get_db()
        with SCHEMA_PATH.open("r", encoding="utf-8") as sql_file:
            db.executescript(sql_file.read())
        db.commit()


def init_app(app: Flask) -> None:
    """Wire database helpers into the Flask app."""

    app.teardown_appcontext(close_db)

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Clear existing data and create new tables."""

        init_db(app)
        click.echo("Initialized the database.")

    @app.cli.command("seed-db")
    def seed_db_command() -> None:
        """Load deterministic demo users, resources, timetable and reservations."""

        from .seed import seed  # pylint: disable=import-outside-toplevel

        seed()
        click.echo("Seed data applied.")

    @app.cli.command("set-role")
    @click.argument("email")
    @click.argument("role")
    def set_role_command(email: str, role: str) -> None:
        """Grant ROLE (student, faculty or admin) to the account registered as EMAIL."""

        from . import users_dao  # pylint: disable=import-outside-toplevel

        user = users_dao.get_user_by_email(email)
        if user is None:
            raise click.ClickException(f"No user registered as {email}.")
        try:
            new_role = users_dao.parse_role(role)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        users_dao.set_role(user.user_id, new_role)
        current_app.logger.info("Role of user %s set to %s", user.user_id, new_role.value)
        click.echo(f"{email} is now {new_role.value}.")
