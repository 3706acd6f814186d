"""Nested forest assembly and validated node insertion."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Optional

from errors import ValidationError
from models import Node, collect_node_errors, normalize_label
from store import NodeStore

logger = logging.getLogger(__name__)


def build_children_index(nodes: Iterable[Node]) -> dict[Optional[int], list[Node]]:
    """Map each parent id (``None`` for roots) to its children, preserving input order."""
    index: dict[Optional[int], list[Node]] = defaultdict(list)
    for node in nodes:
        index[node.parent_id].append(node)
    return index


def build_forest(nodes: Iterable[Node]) -> list[dict[str, Any]]:
    """Serialize nodes as nested ``{id, label, children}`` trees.

    Expansion starts from the roots, so nodes whose parent chain never reaches
    a root are left out rather than looping forever.
    """
    index = build_children_index(nodes)

    def build_subtree(node: Node) -> dict[str, Any]:
        return {
            "id": node.id,
            "label": node.label,
            "children": [build_subtree(child) for child in index.get(node.id, [])],
        }

    return [build_subtree(root) for root in index.get(None, [])]


class TreeAssembler:
    """Lists the stored forest and inserts nodes under validated parents."""

    def __init__(self, store: NodeStore):
        self.store = store

    def list_forest(self) -> list[dict[str, Any]]:
        # One bulk read; ordering comes from the store (ascending id).
        return build_forest(self.store.find_all())

    def validate(self, label: Any, parent_id: Any) -> dict[str, list[str]]:
        """Return every field error for a prospective node; empty when valid."""
        return collect_node_errors(label, parent_id, self.store.exists)

    def create_node(self, label: Any, parent_id: Any = None) -> Node:
        """Validate and persist a node.

        Raises:
            ValidationError: label or parent reference is invalid. Nothing is written.
        """
        label = normalize_label(label)
        errors = self.validate(label, parent_id)
        if errors:
            logger.info(f"Rejected node label={label!r} parentId={parent_id!r}: {errors}")
            raise ValidationError(errors)

        # Parent existence is not re-checked atomically with the insert; nothing
        # deletes nodes, so the parent cannot disappear in between.
        node = self.store.create(label, parent_id)
        logger.info(f"Created node {node.id} ({node.label!r}) under parent {node.parent_id}")
        return node
