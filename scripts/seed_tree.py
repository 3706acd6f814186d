#!/usr/bin/env python3
"""
Create the trees table and insert the demo forest:

    root
    ├── bear
    │   └── cat
    └── frog

Usage:
    python scripts/seed_tree.py [--fresh]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))

import db
from config import _get_store_config
from logging_config import setup_logging
from store import get_node_store
from tree import TreeAssembler


def seed(assembler: TreeAssembler) -> None:
    root = assembler.create_node("root")
    bear = assembler.create_node("bear", root.id)
    assembler.create_node("cat", bear.id)
    assembler.create_node("frog", root.id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the label tree with demo nodes")
    parser.add_argument("--fresh", action="store_true", help="Empty the trees table before seeding")
    args = parser.parse_args()

    setup_logging()

    if _get_store_config()["backend"] == "postgres":
        db.init_db()
        if args.fresh:
            db.reset_nodes()
            print("Cleared existing nodes")

    assembler = TreeAssembler(get_node_store())
    seed(assembler)

    print(f"Seeded {len(assembler.store.find_all())} nodes")


if __name__ == "__main__":
    main()
