"""Prefix-free hint generation.

Hints are the leaf paths of a k-ary Huffman tree built over ``n`` equally
important leaves, where ``k`` is the alphabet size. Every edge is labelled
with the alphabet symbol at its child position, so no hint is a prefix of
another and typing one never needs a terminating key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from fingers.errors import AlphabetError
from fingers.priority_queue import PriorityQueue

logger = logging.getLogger(__name__)


@dataclass
class _HuffmanNode:
    weight: int
    children: list[_HuffmanNode] = field(default_factory=list)


def generate_hints(alphabet: Sequence[str], n: int) -> list[str]:
    """Return ``n`` prefix-free hints over *alphabet*, shortest first.

    When the alphabet is large enough every hint is a single symbol, taken
    in alphabet order. Otherwise hints are built by a k-ary Huffman merge
    whose first merge is narrowed so the tree ends with a full root.

    Raises:
        AlphabetError: if the alphabet cannot produce ``n`` distinct hints.
    """
    if n <= 0:
        return []

    if n <= len(alphabet):
        return list(alphabet[:n])

    arity = len(alphabet)
    if arity < 2:
        raise AlphabetError(
            f"cannot build {n} prefix-free hints from an alphabet of {arity} symbol(s)"
        )

    queue = _build_heap(n)

    first = _new_node_from(_take(queue, _initial_number_of_branches(n, arity)))
    queue.push(first.weight, first)

    while queue.size() > 1:
        node = _new_node_from(_take(queue, arity))
        queue.push(node.weight, node)

    root = queue.pop()
    assert root is not None

    paths = _leaf_paths(root)
    paths.sort(key=len)
    hints = ["".join(alphabet[i] for i in path) for path in paths]

    logger.debug("Generated %d hints over a %d symbol alphabet", n, arity)
    return hints


def _initial_number_of_branches(n: int, arity: int) -> int:
    """Width of the first merge so that later ``arity``-wide merges end in one root."""
    for t in range(1, n // arity + 2):
        branches = n - t * (arity - 1)
        if 2 <= branches <= arity:
            return branches
    return arity


def _build_heap(n: int) -> PriorityQueue[_HuffmanNode]:
    # Strictly decreasing weights keep the merge order reproducible.
    queue: PriorityQueue[_HuffmanNode] = PriorityQueue()
    for i in range(n):
        queue.push(-i, _HuffmanNode(weight=-i))
    return queue


def _take(queue: PriorityQueue[_HuffmanNode], count: int) -> list[_HuffmanNode]:
    nodes: list[_HuffmanNode] = []
    for _ in range(min(count, queue.size())):
        node = queue.pop()
        if node is None:
            break
        nodes.append(node)
    return nodes


def _new_node_from(nodes: list[_HuffmanNode]) -> _HuffmanNode:
    return _HuffmanNode(weight=sum(node.weight for node in nodes), children=nodes)


def _leaf_paths(root: _HuffmanNode) -> list[tuple[int, ...]]:
    """Pre-order list of child-index paths from *root* to each leaf."""
    paths: list[tuple[int, ...]] = []
    stack: list[tuple[_HuffmanNode, tuple[int, ...]]] = [(root, ())]

    while stack:
        node, path = stack.pop()
        if not node.children:
            paths.append(path)
            continue
        for index in reversed(range(len(node.children))):
            stack.append((node.children[index], path + (index,)))

    return paths
