"""Node stores: durable Postgres storage and an in-process memory store."""
from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional, Protocol

import psycopg2
from psycopg2 import errors as pg_errors

import db
from config import _get_store_config
from errors import StoreError, ValidationError
from models import (
    LABEL_FIELD,
    LABEL_REQUIRED,
    LABEL_TOO_LONG,
    PARENT_FIELD,
    PARENT_INVALID,
    Node,
    collect_node_errors,
)

logger = logging.getLogger(__name__)


class NodeStore(Protocol):
    """Storage operations the tree assembler relies on.

    Every ``find_*`` method returns nodes in insertion order (ascending id).
    """

    def create(self, label: str, parent_id: Optional[int] = None) -> Node: ...

    def exists(self, node_id: int) -> bool: ...

    def find_roots(self) -> list[Node]: ...

    def find_children(self, node_id: int) -> list[Node]: ...

    def find_all(self) -> list[Node]: ...


def _row_to_node(row: dict[str, Any]) -> Node:
    return Node(
        id=row["id"],
        label=row["label"],
        parent_id=row.get("parent_id"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


# =============================================================================
# Postgres
# =============================================================================

class PostgresNodeStore:
    """Node store backed by the ``trees`` table.

    The table itself enforces the label and parent constraints; violations
    surface here as ``ValidationError`` for the offending field. Any other
    database failure is raised as ``StoreError``.
    """

    def create(self, label: str, parent_id: Optional[int] = None) -> Node:
        try:
            row = db.create_node(label, parent_id)
        except pg_errors.ForeignKeyViolation as e:
            raise ValidationError({PARENT_FIELD: [PARENT_INVALID]}) from e
        except pg_errors.StringDataRightTruncation as e:
            raise ValidationError({LABEL_FIELD: [LABEL_TOO_LONG]}) from e
        except (pg_errors.CheckViolation, pg_errors.NotNullViolation) as e:
            raise ValidationError({LABEL_FIELD: [LABEL_REQUIRED]}) from e
        except psycopg2.Error as e:
            raise StoreError(f"Failed to insert node: {e}") from e
        return _row_to_node(row)

    def exists(self, node_id: int) -> bool:
        try:
            return db.node_exists(node_id)
        except psycopg2.Error as e:
            raise StoreError(f"Failed to look up node {node_id}: {e}") from e

    def find_roots(self) -> list[Node]:
        try:
            rows = db.get_root_nodes()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to load root nodes: {e}") from e
        return [_row_to_node(row) for row in rows]

    def find_children(self, node_id: int) -> list[Node]:
        try:
            rows = db.get_child_nodes(node_id)
        except psycopg2.Error as e:
            raise StoreError(f"Failed to load children of node {node_id}: {e}") from e
        return [_row_to_node(row) for row in rows]

    def find_all(self) -> list[Node]:
        try:
            rows = db.get_all_nodes()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to load nodes: {e}") from e
        return [_row_to_node(row) for row in rows]


# =============================================================================
# Memory
# =============================================================================

class MemoryNodeStore:
    """Node store kept in process memory; contents vanish with the process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._nodes: dict[int, Node] = {}  # insertion order == id order

    def create(self, label: str, parent_id: Optional[int] = None) -> Node:
        with self._lock:
            errors = collect_node_errors(label, parent_id, self._nodes.__contains__)
            if errors:
                raise ValidationError(errors)

            now = datetime.now(timezone.utc)
            node = Node(
                id=next(self._ids),
                label=label,
                parent_id=parent_id,
                created_at=now,
                updated_at=now,
            )
            self._nodes[node.id] = node
            return node

    def exists(self, node_id: int) -> bool:
        with self._lock:
            return node_id in self._nodes

    def find_roots(self) -> list[Node]:
        with self._lock:
            return [n for n in self._nodes.values() if n.parent_id is None]

    def find_children(self, node_id: int) -> list[Node]:
        with self._lock:
            return [n for n in self._nodes.values() if n.parent_id == node_id]

    def find_all(self) -> list[Node]:
        with self._lock:
            return list(self._nodes.values())


@lru_cache(maxsize=1)
def get_node_store() -> NodeStore:
    """Return the process-wide node store selected by config.yaml / NODE_STORE."""
    backend = _get_store_config()["backend"]
    if backend == "postgres":
        store: NodeStore = PostgresNodeStore()
    elif backend == "memory":
        store = MemoryNodeStore()
    else:
        raise ValueError(f"Unknown node store backend: {backend}")
    logger.info(f"Using {backend} node store")
    return store
