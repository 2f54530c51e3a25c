"""Repository for the string key-value store."""

import sqlite3


def get_value(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM kv_store WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def delete_value(conn: sqlite3.Connection, key: str) -> bool:
    cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()
    return cursor.rowcount > 0


def list_keys(conn: sqlite3.Connection, prefix: str = "") -> list[str]:
    rows = conn.execute(
        "SELECT key FROM kv_store WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
        (prefix.replace("%", r"\%").replace("_", r"\_") + "%",),
    ).fetchall()
    return [r[0] for r in rows]
