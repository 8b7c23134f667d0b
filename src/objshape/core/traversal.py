# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Depth-first traversal of a tagged object graph.

Children are the ``Base`` values found in a node's properties, directly
or inside lists and mappings. Nodes are tracked by identity, so shared
nodes are visited once and cycles terminate.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional
import logging

from .objects import Base

logger = logging.getLogger(__name__)


@dataclass
class TraversalContext:
    """
    A visited node and how it was reached.

    Attributes:
        current: The visited node
        parent: Context of the node it was reached from (None for the root)
        member_name: Property of the parent that holds this node
    """
    current: Base
    parent: Optional["TraversalContext"] = None
    member_name: Optional[str] = None

    @property
    def depth(self) -> int:
        """Number of edges between this node and the root."""
        depth = 0
        context = self.parent
        while context is not None:
            depth += 1
            context = context.parent
        return depth

    def path(self) -> list[str]:
        """Property names leading from the root to this node."""
        names = []
        context = self
        while context is not None and context.member_name is not None:
            names.append(context.member_name)
            context = context.parent
        return list(reversed(names))


def traverse(root: Base) -> Iterator[TraversalContext]:
    """
    Visit ``root`` and every node reachable from it, depth first.

    Nodes are yielded in pre-order. Children of a node are visited in
    property insertion order, list items in list order. The iterator is
    single-use; call ``traverse`` again to restart.

    Args:
        root: Node to start from

    Yields:
        TraversalContext for each node, exactly once per node
    """
    visited: set[int] = set()
    stack: list[TraversalContext] = [TraversalContext(current=root)]

    while stack:
        context = stack.pop()
        node = context.current
        if id(node) in visited:
            continue
        visited.add(id(node))

        yield context

        children = [
            TraversalContext(current=child, parent=context, member_name=name)
            for name, value in node.members()
            for child in _child_nodes(value)
            if id(child) not in visited
        ]
        stack.extend(reversed(children))


def flatten(root: Base) -> Iterator[Base]:
    """Yield every node reachable from ``root`` in traversal order."""
    for context in traverse(root):
        yield context.current


def _child_nodes(value: Any) -> Iterator[Base]:
    if isinstance(value, Base):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from _child_nodes(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _child_nodes(item)
