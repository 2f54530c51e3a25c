"""Tests for database connection, WAL mode, and migrations."""

import sqlite3
from pathlib import Path

from spirograph.storage import kv_repo
from spirograph.storage.database import connect, open_database, run_migrations


class TestConnect:
    def test_wal_mode(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        mode = db.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"
        db.close()

    def test_creates_parent_dirs(self, tmp_path: Path):
        path = tmp_path / "nested" / "dir" / "test.db"
        db = connect(path)
        assert path.parent.is_dir()
        db.close()

    def test_memory(self):
        db = connect(":memory:")
        assert db.execute("SELECT 1").fetchone()[0] == 1
        db.close()

    def test_row_factory(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x TEXT)")
        db.execute("INSERT INTO t VALUES ('hello')")
        row = db.execute("SELECT x FROM t").fetchone()
        assert row["x"] == "hello"
        db.close()


class TestMigrations:
    def test_creates_tables(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied = run_migrations(db)
        assert "v001_initial" in applied

        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert {"schema_versions", "kv_store"}.issubset(tables)
        db.close()

    def test_idempotent(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied1 = run_migrations(db)
        applied2 = run_migrations(db)
        assert len(applied1) > 0
        assert len(applied2) == 0
        db.close()

    def test_open_database_migrates(self, tmp_path: Path):
        db = open_database(tmp_path / "test.db")
        assert kv_repo.get_value(db, "missing") is None
        db.close()


class TestKvRepo:
    def test_set_and_get(self, tmp_db: sqlite3.Connection):
        kv_repo.set_value(tmp_db, "climate-data-2024-02-23", "{}")
        assert kv_repo.get_value(tmp_db, "climate-data-2024-02-23") == "{}"

    def test_upsert(self, tmp_db: sqlite3.Connection):
        kv_repo.set_value(tmp_db, "k", "one")
        kv_repo.set_value(tmp_db, "k", "two")
        assert kv_repo.get_value(tmp_db, "k") == "two"
        count = tmp_db.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
        assert count == 1

    def test_delete(self, tmp_db: sqlite3.Connection):
        kv_repo.set_value(tmp_db, "k", "v")
        assert kv_repo.delete_value(tmp_db, "k") is True
        assert kv_repo.delete_value(tmp_db, "k") is False
        assert kv_repo.get_value(tmp_db, "k") is None

    def test_list_keys_by_prefix(self, tmp_db: sqlite3.Connection):
        for key in ("climate-data-2024-02-23", "climate-data-2024-02-24", "other", "climateXdata"):
            kv_repo.set_value(tmp_db, key, "v")
        assert kv_repo.list_keys(tmp_db, "climate-data-") == [
            "climate-data-2024-02-23",
            "climate-data-2024-02-24",
        ]

    def test_list_keys_escapes_wildcards(self, tmp_db: sqlite3.Connection):
        kv_repo.set_value(tmp_db, "a_b", "v")
        kv_repo.set_value(tmp_db, "axb", "v")
        assert kv_repo.list_keys(tmp_db, "a_") == ["a_b"]
