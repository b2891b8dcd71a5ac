"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import sys
from typing import Generator

import pytest
from flask import Flask

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from reservation_portal.app import create_app
from reservation_portal.config import TestingConfig
from reservation_portal.data_access import reservations_dao, resources_dao, seed, users_dao
from reservation_portal.data_access.db import get_db, init_db
from reservation_portal.models.entities import ReservationStatus, ResourceKind


class _TestConfig(TestingConfig):
    DATABASE_URL: str = ""


@pytest.fixture()
def app(tmp_path: Path) -> Generator[Flask, None, None]:
    """Configure a Flask application for testing with a temp SQLite database."""

    db_path = tmp_path / "test.db"
    _TestConfig.DATABASE_URL = f"sqlite:///{db_path}"
    application = create_app(_TestConfig)
    with application.app_context():
        init_db(application)
        seed.seed()
    yield application


@pytest.fixture()
def client(app: Flask):
    """Flask test client."""

    return app.test_client()


@pytest.fixture()
def runner(app: Flask):
    """Flask CLI runner."""

    return app.test_cli_runner()


@pytest.fixture()
def db(app: Flask):
    """Provide a database connection for direct queries."""

    with app.app_context():
        yield get_db()


@pytest.fixture()
def admin_user(app: Flask):
    with app.app_context():
        return users_dao.get_user_by_email("admin@kampus.ac.id")


@pytest.fixture()
def faculty_user(app: Flask):
    with app.app_context():
        return users_dao.get_user_by_email("rina@dosen.kampus.ac.id")


@pytest.fixture()
def student_user(app: Flask):
    with app.app_context():
        return users_dao.get_user_by_email("budi@mahasiswa.kampus.ac.id")


@pytest.fixture()
def other_student(app: Flask):
    with app.app_context():
        return users_dao.get_user_by_email("siti@mahasiswa.kampus.ac.id")


@pytest.fixture()
def room(app: Flask):
    with app.app_context():
        return resources_dao.list_available(ResourceKind.ROOM_KEY)[0]


@pytest.fixture()
def projector(app: Flask):
    with app.app_context():
        return resources_dao.list_available(ResourceKind.PROJECTOR)[0]


@pytest.fixture()
def pending_reservation(app: Flask, student_user):
    with app.app_context():
        pending = reservations_dao.list_reservations(
            datetime(2025, 1, 1, tzinfo=timezone.utc),
            requester_id=student_user.user_id,
            status=ReservationStatus.PENDING,
        )
        return pending[0]

