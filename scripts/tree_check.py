#!/usr/bin/env python3
"""Report integrity problems in the stored forest."""
from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))

from models import MAX_LABEL_LENGTH, Node
from store import get_node_store
from tree import build_children_index


def check_forest(nodes: list[Node]) -> dict[str, object]:
    """Collect integrity findings for a flat list of nodes."""
    ids = {n.id for n in nodes}
    index = build_children_index(nodes)

    dangling = [n.id for n in nodes if n.parent_id is not None and n.parent_id not in ids]
    blank_labels = [n.id for n in nodes if not n.label.strip()]
    long_labels = [n.id for n in nodes if len(n.label) > MAX_LABEL_LENGTH]
    label_counts = Counter(n.label for n in nodes)
    duplicate_labels = {k: v for k, v in label_counts.items() if v > 1}

    reachable: set[int] = set()
    max_depth = 0
    stack = [(root, 1) for root in index.get(None, [])]
    while stack:
        node, depth = stack.pop()
        reachable.add(node.id)
        max_depth = max(max_depth, depth)
        stack.extend((child, depth + 1) for child in index.get(node.id, []))

    # Either part of a cycle or below a dangling reference
    unreachable = [n.id for n in nodes if n.id not in reachable and n.id not in dangling]

    return {
        "total": len(nodes),
        "roots": len(index.get(None, [])),
        "max_depth": max_depth,
        "dangling_parents": dangling,
        "unreachable": unreachable,
        "blank_labels": blank_labels,
        "long_labels": long_labels,
        "duplicate_labels": duplicate_labels,
    }


def main() -> None:
    report = check_forest(get_node_store().find_all())

    lines: list[str] = []
    lines.append("Tree checks:")
    lines.append(f"- Total nodes: {report['total']}")
    lines.append(f"- Root nodes: {report['roots']}")
    lines.append(f"- Max depth: {report['max_depth']}")
    lines.append(f"- Dangling parent references: {len(report['dangling_parents'])}")
    lines.append(f"- Unreachable from any root: {len(report['unreachable'])}")
    lines.append(f"- Blank labels: {len(report['blank_labels'])}")
    lines.append(f"- Labels over {MAX_LABEL_LENGTH} chars: {len(report['long_labels'])}")
    lines.append(f"- Duplicate labels: {len(report['duplicate_labels'])}")

    if report["dangling_parents"]:
        lines.append("")
        lines.append("Sample dangling node ids:")
        for node_id in report["dangling_parents"][:10]:
            lines.append(f"  {node_id}")

    if report["unreachable"]:
        lines.append("")
        lines.append("Sample unreachable node ids:")
        for node_id in report["unreachable"][:10]:
            lines.append(f"  {node_id}")

    if report["duplicate_labels"]:
        lines.append("")
        lines.append("Sample duplicate labels:")
        for label, count in list(report["duplicate_labels"].items())[:10]:
            lines.append(f"  {label}: {count}")

    print("\n".join(lines))


if __name__ == "__main__":
    main()
