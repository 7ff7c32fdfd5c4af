"""Read-only views over lark parse trees.

The converter only ever looks at rule labels, child order and source spans,
so everything it needs from a parse tree goes through these functions.
"""
from __future__ import annotations
from typing import Any, List, Optional, Tuple

from lark import Token, Tree
from typing_extensions import TypeAlias

Node: TypeAlias = Tree | Token


def _is_token(node: Any) -> bool:
    return isinstance(node, Token)

def subtrees(node: Node) -> List[Tree]:
    """Rule children of ``node`` in order; tokens are skipped."""
    if _is_token(node):
        return []
    return [ch for ch in node.children if isinstance(ch, Tree)]

def node_meta(node: Node) -> Optional[Any]:
    meta = getattr(node, "meta", None)
    if meta is None or getattr(meta, "empty", True):
        return None

    return meta

def span_text(node: Node, source: Optional[str] = None) -> str:
    """Source text covered by ``node``.

    Slices ``source`` when the parser propagated positions; hand-built trees
    fall back to the concatenated token values of the subtree.
    """
    if _is_token(node):
        return str(node.value)

    meta = node_meta(node)
    if source is not None and meta is not None:
        return source[meta.start_pos:meta.end_pos]

    return "".join(str(tok.value) for tok in node.scan_values(_is_token))

def node_position(node: Node) -> Tuple[Optional[int], Optional[int]]:
    if _is_token(node):
        return getattr(node, "line", None), getattr(node, "column", None)

    meta = node_meta(node)
    if meta is not None:
        return meta.line, meta.column

    for tok in node.scan_values(_is_token):
        line = getattr(tok, "line", None)
        if line is not None:
            return line, getattr(tok, "column", None)

    return None, None
