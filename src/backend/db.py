"""Database operations for the label tree."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from config import _get_database_config


def get_connection_string() -> str:
    """Get database connection string from environment or config.yaml."""
    return _get_database_config()["url"]


@contextmanager
def get_db() -> Generator[psycopg2.extensions.connection, None, None]:
    """Get a database connection."""
    conn = psycopg2.connect(get_connection_string())
    try:
        yield conn
    finally:
        conn.close()


# =============================================================================
# Schema
# =============================================================================

def init_db() -> None:
    """Create the trees table and its parent index if they do not exist."""
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS trees (
                    id BIGSERIAL PRIMARY KEY,
                    label VARCHAR(255) NOT NULL CHECK (length(btrim(label)) > 0),
                    parent_id BIGINT NULL REFERENCES trees (id),
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS trees_parent_id_idx ON trees (parent_id)"
            )
        conn.commit()


def reset_nodes() -> None:
    """Remove every node and restart id assignment at 1."""
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute("TRUNCATE TABLE trees RESTART IDENTITY")
        conn.commit()


# =============================================================================
# Nodes CRUD
# =============================================================================

def create_node(label: str, parent_id: Optional[int] = None) -> dict[str, Any]:
    """Insert a node and return the stored row."""
    with get_db() as conn:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                """
                INSERT INTO trees (label, parent_id)
                VALUES (%s, %s)
                RETURNING id, label, parent_id, created_at, updated_at
                """,
                (label, parent_id)
            )
            row = dict(cur.fetchone())
        conn.commit()
        return row


def node_exists(node_id: int) -> bool:
    """Check whether a node with this ID exists."""
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT EXISTS (SELECT 1 FROM trees WHERE id = %s)", (node_id,))
            return bool(cur.fetchone()[0])


def get_root_nodes() -> list[dict[str, Any]]:
    """Get all nodes without a parent, oldest first."""
    with get_db() as conn:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM trees WHERE parent_id IS NULL ORDER BY id")
            return [dict(row) for row in cur.fetchall()]


def get_child_nodes(parent_id: int) -> list[dict[str, Any]]:
    """Get direct children of a node, oldest first."""
    with get_db() as conn:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(
                "SELECT * FROM trees WHERE parent_id = %s ORDER BY id",
                (parent_id,)
            )
            return [dict(row) for row in cur.fetchall()]


def get_all_nodes() -> list[dict[str, Any]]:
    """Get all nodes, oldest first."""
    with get_db() as conn:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM trees ORDER BY id")
            return [dict(row) for row in cur.fetchall()]
