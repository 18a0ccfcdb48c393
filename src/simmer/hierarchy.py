from __future__ import annotations

from typing import TYPE_CHECKING

from .models import DomNode

if TYPE_CHECKING:
    from .query_engine import QueryEngine


def stack_hierarchy(node: DomNode, depth: int, query: QueryEngine) -> tuple[DomNode, ...]:
    """Return ``node`` followed by at most ``depth`` of its ancestors, nearest first."""
    chain = [node]
    current = node
    while len(chain) <= depth:
        parent = query.parent(current)
        if parent is None:
            break
        chain.append(parent)
        current = parent
    return tuple(chain)
