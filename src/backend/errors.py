"""Domain-level errors for the label tree."""
from __future__ import annotations


class ValidationError(Exception):
    """Raised when one or more node fields fail their constraints.

    ``messages`` maps each invalid field to the reasons it was rejected.
    """

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        fields = ", ".join(sorted(messages))
        super().__init__(f"Validation failed for: {fields}")


class UnexpectedError(Exception):
    """Raised for failures that are not caused by invalid input."""


class StoreError(UnexpectedError):
    """Raised when the node store cannot complete a read or write."""
