"""
Parse cursor over a flattened parse tree.

A lark Tree is flattened in pre-order into an immutable queue of pending
nodes. Each entry remembers the index just past its last descendant, so the
children of the node at ``i`` are exactly the queue slice ``i+1 .. end`` and
skipping a node (consuming it) is a single jump to ``end``.

Tokens are not pending nodes: they only contribute to the span text of the
rule that contains them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from lark import Tree

from .config import DEFAULT_OPTIONS, Options
from .tree import node_position, span_text, subtrees


@dataclass(frozen=True)
class PendingNode:
    rule: str
    text: str
    end: int
    line: Optional[int] = None
    column: Optional[int] = None


def flatten(root: Tree, source: Optional[str] = None) -> Tuple[PendingNode, ...]:
    """Pre-order queue of ``root`` and its rule descendants.

    Walks with an explicit stack, so tree depth is not bounded by the
    interpreter's recursion limit.
    """
    order: List[Tree] = []
    parents: List[int] = []
    stack: List[Tuple[Tree, int]] = [(root, -1)]

    while stack:
        node, parent = stack.pop()
        index = len(order)
        order.append(node)
        parents.append(parent)
        for child in reversed(subtrees(node)):
            stack.append((child, index))

    # descendants always sit after their ancestor, so one backwards pass sums subtree sizes
    sizes = [1] * len(order)
    for index in range(len(order) - 1, 0, -1):
        sizes[parents[index]] += sizes[index]

    queue = []
    for index, node in enumerate(order):
        line, column = node_position(node)
        queue.append(PendingNode(
            rule=str(node.data),
            text=span_text(node, source),
            end=index + sizes[index],
            line=line,
            column=column,
        ))

    return tuple(queue)


class Pair:
    """One pending node, addressed by its slot in the shared queue."""

    __slots__ = ("_queue", "_index", "options")

    def __init__(self, queue: Sequence[PendingNode], index: int, options: Options):
        self._queue = queue
        self._index = index
        self.options = options

    @property
    def _node(self) -> PendingNode:
        return self._queue[self._index]

    @property
    def rule(self) -> str:
        return self._node.rule

    @property
    def line(self) -> Optional[int]:
        return self._node.line

    @property
    def column(self) -> Optional[int]:
        return self._node.column

    @property
    def location(self) -> str:
        if self.line is None:
            return "?"
        return f"{self.line}:{self.column}"

    def as_str(self) -> str:
        return self._node.text

    def into_inner(self) -> Pairs:
        return Pairs(self._queue, self._index + 1, self._node.end, self.options)

    def __repr__(self) -> str:
        return f"Pair({self.rule!r}, {self.as_str()!r})"


class Pairs:
    """Sibling cursor: peek at or consume the next pending node in order."""

    def __init__(
        self,
        queue: Sequence[PendingNode],
        start: int = 0,
        end: Optional[int] = None,
        options: Optional[Options] = None,
    ):
        self._queue = queue
        self.pos = start
        self.end = len(queue) if end is None else end
        self.options = options if options is not None else DEFAULT_OPTIONS

    @classmethod
    def from_tree(cls, root: Tree, source: Optional[str] = None, options: Optional[Options] = None) -> Pairs:
        return cls(flatten(root, source), options=options)

    def peek(self) -> Optional[Pair]:
        if self.pos >= self.end:
            return None
        return Pair(self._queue, self.pos, self.options)

    def check(self, *rules: str) -> bool:
        pair = self.peek()
        return pair is not None and pair.rule in rules

    def advance(self) -> Pair:
        """Consume the next pending node together with its whole subtree."""
        pair = self.peek()
        if pair is None:
            raise IndexError("advance past end of pairs")
        self.pos = self._queue[self.pos].end
        return pair

    def remaining(self) -> int:
        count = 0
        pos = self.pos
        while pos < self.end:
            pos = self._queue[pos].end
            count += 1
        return count

    def __iter__(self) -> Iterator[Pair]:
        while self.pos < self.end:
            yield self.advance()

    def __repr__(self) -> str:
        rules = []
        pos = self.pos
        while pos < self.end:
            rules.append(self._queue[pos].rule)
            pos = self._queue[pos].end
        return f"Pairs({rules!r})"
