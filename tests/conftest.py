"""Shared pytest fixtures for all tests."""
import sys
from pathlib import Path

import pytest

# Add src/backend to path for imports (but don't import app yet)
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))


@pytest.fixture
def store():
    """Empty in-memory node store."""
    from store import MemoryNodeStore
    return MemoryNodeStore()


@pytest.fixture
def assembler(store):
    from tree import TreeAssembler
    return TreeAssembler(store)


@pytest.fixture
def client(assembler):
    """Create a test client that returns HTTP responses instead of raising exceptions.

    The app is wired to the in-memory store from the ``store`` fixture, so
    tests can seed data directly and no database is needed.
    """
    from fastapi.testclient import TestClient
    from app import app, get_tree_assembler

    app.dependency_overrides[get_tree_assembler] = lambda: assembler
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_forest(store):
    """root -> bear -> cat, root -> frog."""
    root = store.create("root")
    bear = store.create("bear", root.id)
    cat = store.create("cat", bear.id)
    frog = store.create("frog", root.id)
    return {"root": root, "bear": bear, "cat": cat, "frog": frog}
