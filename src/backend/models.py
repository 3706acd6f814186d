"""Pydantic models for tree nodes and node payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_LABEL_LENGTH = 255

LABEL_FIELD = "label"
PARENT_FIELD = "parentId"

LABEL_REQUIRED = "The label field is required."
LABEL_NOT_STRING = "The label field must be a string."
LABEL_TOO_LONG = f"The label field must not be greater than {MAX_LABEL_LENGTH} characters."
LABEL_HAS_NUL = "The label field must not contain null characters."
PARENT_NOT_INTEGER = "The parent id field must be an integer."
PARENT_INVALID = "The selected parent id is invalid."


class Node(BaseModel):
    """A persisted tree node, as returned after creation."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    parent_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CreateNodeRequest(BaseModel):
    # Left untyped so every field check runs in collect_node_errors
    label: Any = Field(default=None, description="Node label, up to 255 characters")
    parent_id: Any = Field(default=None, alias="parentId", description="Id of an existing parent node")


def normalize_label(label: Any) -> Any:
    """Strip surrounding whitespace from string labels; other values pass through."""
    return label.strip() if isinstance(label, str) else label


def label_errors(label: Any) -> list[str]:
    if label is None or (isinstance(label, str) and not label.strip()):
        return [LABEL_REQUIRED]
    if not isinstance(label, str):
        return [LABEL_NOT_STRING]
    if "\x00" in label:
        return [LABEL_HAS_NUL]
    if len(label) > MAX_LABEL_LENGTH:
        return [LABEL_TOO_LONG]
    return []


def parent_errors(parent_id: Any, exists: Callable[[int], bool]) -> list[str]:
    """Check an optional parent reference; ``exists`` is only called for integer ids."""
    if parent_id is None:
        return []
    if isinstance(parent_id, bool) or not isinstance(parent_id, int):
        return [PARENT_NOT_INTEGER]
    if not exists(parent_id):
        return [PARENT_INVALID]
    return []


def collect_node_errors(label: Any, parent_id: Any, exists: Callable[[int], bool]) -> dict[str, list[str]]:
    """Run every field check and return the failures keyed by payload field name."""
    errors: dict[str, list[str]] = {}
    reasons = label_errors(label)
    if reasons:
        errors[LABEL_FIELD] = reasons
    reasons = parent_errors(parent_id, exists)
    if reasons:
        errors[PARENT_FIELD] = reasons
    return errors
