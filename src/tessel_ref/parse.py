from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Type, TypeVar

from lark import Lark, Tree, UnexpectedInput

from .ast_nodes import AstNode, Expression, Program
from .config import DEFAULT_OPTIONS, Options
from .errors import FatalError, NoMatch
from .pairs import Pairs

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
START_SYMBOLS = ("main", "expr")

N = TypeVar("N", bound=AstNode)


class ParseError(Exception):
    """Source text the grammar rejects, with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None, context: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.context = context
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

def read_grammar(grammar_path: Optional[str] = None) -> str:
    if grammar_path:
        p = Path(grammar_path)
        if not p.exists():
            raise FileNotFoundError(f"grammar file not found: {grammar_path}")
        return p.read_text(encoding="utf-8")

    return GRAMMAR_PATH.read_text(encoding="utf-8")

@lru_cache(maxsize=8)
def _build_parser(grammar_text: str, parser_kind: str) -> Lark:
    logger.debug("building %s parser", parser_kind)
    return Lark(
        grammar_text,
        parser=parser_kind,
        lexer="basic",
        start=list(START_SYMBOLS),
        maybe_placeholders=False,
        propagate_positions=True,
    )

def make_parser(options: Optional[Options] = None) -> Lark:
    opts = options or DEFAULT_OPTIONS
    return _build_parser(read_grammar(opts.grammar_path), opts.parser)

def parse_tree(source: str, start: str = "main", options: Optional[Options] = None) -> Tree:
    if start not in START_SYMBOLS:
        raise ValueError(f"unknown start symbol {start!r}")

    parser = make_parser(options)
    try:
        return parser.parse(source, start=start)
    except UnexpectedInput as exc:
        raise ParseError(
            f"unexpected input for {start}",
            getattr(exc, "line", None),
            getattr(exc, "column", None),
            exc.get_context(source),
        ) from exc

def convert(
    tree: Tree,
    source: Optional[str] = None,
    node_type: Type[N] = Program,  # type: ignore[assignment]
    options: Optional[Options] = None,
) -> N:
    """Build ``node_type`` from the root of ``tree``; the root must be consumed whole."""
    pairs = Pairs.from_tree(tree, source, options)
    root = pairs.peek()

    try:
        node = node_type.from_pairs(pairs)
    except NoMatch as exc:
        raise FatalError(f"cannot build {node_type.__name__}: {exc}", root) from exc
    except RecursionError as exc:
        # builders recurse once per nested group
        raise FatalError(f"cannot build {node_type.__name__}: nesting too deep", root) from exc

    logger.debug("converted %s from %s", node_type.__name__, tree.data)
    return node

def parse_program(source: str, options: Optional[Options] = None) -> Program:
    tree = parse_tree(source, "main", options)
    program = convert(tree, source, Program, options)
    logger.debug("parsed program with %d statements", len(program.statements))
    return program

def parse_expression(source: str, options: Optional[Options] = None) -> Expression:
    tree = parse_tree(source, "expr", options)
    return convert(tree, source, Expression, options)
