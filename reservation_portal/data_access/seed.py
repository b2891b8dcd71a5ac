"""Deterministic seed data for the equipment-reservation portal."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .db import execute, get_db, query_one, to_db_datetime
from .users_dao import hash_password

SEED_PASSWORD = "Password123!"


def seed() -> None:
    """Populate the database with representative demo records."""

    db = get_db()
    password_hash = hash_password(SEED_PASSWORD)

    users = [
        ("Ayu Admin", "admin@kampus.ac.id", "admin", "198001012005011001"),
        ("Dr. Rina Wulandari", "rina@dosen.kampus.ac.id", "faculty", "197502022003122002"),
        ("Dr. Hendra Saputra", "hendra@dosen.kampus.ac.id", "faculty", "198103032008011003"),
        ("Budi Santoso", "budi@mahasiswa.kampus.ac.id", "student", "2021010001"),
        ("Siti Rahma", "siti@mahasiswa.kampus.ac.id", "student", "2021010002"),
    ]

    for full_name, email, role, nim_nip in users:
        execute(
            db,
            """
            INSERT OR IGNORE INTO users (full_name, email, password_hash, role, nim_nip, is_active)
            VALUES (?, ?, ?, ?, ?, 1)
            """,
            (full_name, email, password_hash, role, nim_nip),
        )

    def _user_id(email: str) -> int:
        row = query_one(db, "SELECT user_id FROM users WHERE email = ?", (email,))
        if not row:
            raise ValueError(f"Expected seed user {email} to exist.")
        return row["user_id"]

    rooms = [
        ("Lab Komputer 1", "Gedung A Lantai 2", "40 PCs", "available"),
        ("Ruang 201", "Gedung B Lantai 2", None, "available"),
        ("Ruang Seminar", "Gedung C Lantai 1", "Under renovation", "unavailable"),
    ]
    for name, location, description, status in rooms:
        execute(
            db,
            "INSERT OR IGNORE INTO rooms (name, location, description, status) VALUES (?, ?, ?, ?)",
            (name, location, description, status),
        )

    projectors = [
        ("Infokus 01", "Epson", "EB-X05", "available"),
        ("Infokus 02", "BenQ", "MS550", "available"),
        ("Infokus 03", "Epson", "Lamp replacement pending", "unavailable"),
    ]
    for name, brand, description, status in projectors:
        execute(
            db,
            "INSERT OR IGNORE INTO projectors (name, brand, description, status) VALUES (?, ?, ?, ?)",
            (name, brand, description, status),
        )

    def _room_id(name: str) -> int:
        row = query_one(db, "SELECT room_id FROM rooms WHERE name = ?", (name,))
        if not row:
            raise ValueError(f"Expected seed room {name} to exist.")
        return row["room_id"]

    def _projector_id(name: str) -> int:
        row = query_one(db, "SELECT projector_id FROM projectors WHERE name = ?", (name,))
        if not row:
            raise ValueError(f"Expected seed projector {name} to exist.")
        return row["projector_id"]

    slots = [
        ("rina@dosen.kampus.ac.id", "Senin", "10:00:00", "12:00:00", "Algoritma dan Pemrograman", "Lab Komputer 1"),
        ("hendra@dosen.kampus.ac.id", "Senin", "13:00:00", "15:00:00", "Basis Data", "Ruang 201"),
        ("rina@dosen.kampus.ac.id", "Rabu", "08:00:00", "10:00:00", "Struktur Data", None),
    ]
    if not query_one(db, "SELECT 1 FROM teaching_slots LIMIT 1"):
        for email, weekday, start, end, course, room in slots:
            execute(
                db,
                """
                INSERT INTO teaching_slots (instructor_id, weekday, start_time, end_time, course_label, room_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (_user_id(email), weekday, start, end, course, _room_id(room) if room else None),
            )

    # Fixed instants keep ordering deterministic between runs.
    base = datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc)
    reservation_rows = [
        {
            "requester": "siti@mahasiswa.kampus.ac.id",
            "kind": "projector",
            "resource_id": _projector_id("Infokus 01"),
            "purpose": "Presentasi Tugas Akhir",
            "start": base + timedelta(hours=1),
            "end": base + timedelta(hours=3),
            "status": "approved",
            "annotation": None,
            "created_at": base - timedelta(days=3),
        },
        {
            "requester": "siti@mahasiswa.kampus.ac.id",
            "kind": "room_key",
            "resource_id": _room_id("Ruang 201"),
            "purpose": "Rapat Himpunan",
            "start": base + timedelta(days=1, hours=9),
            "end": base + timedelta(days=1, hours=11),
            "status": "rejected",
            "annotation": "Ruangan dipakai ujian susulan.",
            "created_at": base - timedelta(days=2),
        },
        {
            "requester": "budi@mahasiswa.kampus.ac.id",
            "kind": "room_key",
            "resource_id": _room_id("Lab Komputer 1"),
            "purpose": "Praktikum Pengganti",
            "start": datetime(2030, 3, 4, 9, 0, tzinfo=timezone.utc),
            "end": datetime(2030, 3, 4, 11, 0, tzinfo=timezone.utc),
            "status": "pending",
            "annotation": None,
            "created_at": base - timedelta(days=1),
        },
    ]

    if not query_one(db, "SELECT 1 FROM reservations LIMIT 1"):
        for row in reservation_rows:
            stamp = to_db_datetime(row["created_at"])
            execute(
                db,
                """
                INSERT INTO reservations (
                    requester_id, kind, resource_id, purpose, start_datetime, end_datetime,
                    status, admin_annotation, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    _user_id(row["requester"]),
                    row["kind"],
                    row["resource_id"],
                    row["purpose"],
                    to_db_datetime(row["start"]),
                    to_db_datetime(row["end"]),
                    row["status"],
                    row["annotation"],
                    stamp,
                    stamp,
                ),
            )
