"""SQLite access for the local cache: WAL connections and numbered migrations."""

import importlib
import sqlite3
from pathlib import Path

MIGRATIONS_PACKAGE = "spirograph.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"

VERSIONS_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_versions ("
    "  version TEXT PRIMARY KEY,"
    "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
    ")"
)


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a connection in WAL mode with name-addressable rows.

    Parent directories of a file path are created on demand.
    """
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply every migration module not yet recorded, oldest first.

    Returns the names applied by this call; empty when the schema is current.
    """
    conn.execute(VERSIONS_DDL)
    conn.commit()
    done = _applied_versions(conn)
    pending = [name for name in _discover_migrations() if name not in done]
    for name in pending:
        _apply(conn, name)
    return pending


def open_database(db_path: str | Path) -> sqlite3.Connection:
    conn = connect(db_path)
    run_migrations(conn)
    return conn


def _applied_versions(conn: sqlite3.Connection) -> set[str]:
    return {row[0] for row in conn.execute("SELECT version FROM schema_versions")}


def _apply(conn: sqlite3.Connection, name: str) -> None:
    module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
    module.up(conn)
    conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
    conn.commit()


def _discover_migrations() -> list[str]:
    """Migration module names (v###_*.py) in version order."""
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
