"""
Conversion protocol shared by every tree builder.

A builder is a ``from_pairs(pairs)`` callable. It either returns a node with
the cursor moved exactly past what it consumed, raises NoMatch without
touching the cursor, or raises a FatalError once it has committed to a
pending node whose content does not convert.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Tuple, TypeVar

from .errors import Extraneous, LiteralError, MissingChild, NoMatch
from .literals import LiteralDecodeError
from .pairs import Pair, Pairs

logger = logging.getLogger(__name__)

T = TypeVar("T")
Builder = Callable[[Pairs], T]


def expect(pairs: Pairs, rule: str) -> Pair:
    """The next pending node, if it carries ``rule``. Nothing is consumed."""
    pair = pairs.peek()
    if pair is None or pair.rule != rule:
        raise NoMatch(rule, pair.rule if pair is not None else None)
    return pair


def commit(pairs: Pairs, pair: Pair) -> None:
    pairs.advance()
    logger.debug("%s matched at %s", pair.rule, pair.location)


def enter(pairs: Pairs, rule: str) -> Tuple[Pair, Pairs]:
    """Consume the next pending node if it carries ``rule``; return it and its children."""
    pair = expect(pairs, rule)
    commit(pairs, pair)
    return pair, pair.into_inner()


def finish(pair: Pair, inner: Pairs) -> None:
    leftover = inner.peek()
    if leftover is not None:
        raise Extraneous(pair, leftover)


def required(build: Builder[T], inner: Pairs, parent: Pair, what: str) -> T:
    """Build a field the parent cannot do without; NoMatch here is fatal."""
    try:
        return build(inner)
    except NoMatch as exc:
        raise MissingChild(parent, what, exc.found) from exc


def optional(build: Builder[T], pairs: Pairs) -> Optional[T]:
    try:
        return build(pairs)
    except NoMatch:
        return None


def first_match(pairs: Pairs, candidates: Sequence[Any]) -> Any:
    """Ordered choice: the first candidate whose builder matches wins.

    A FatalError from a candidate is not a reason to try the next one: its
    tag matched, so it propagates as is.
    """
    for candidate in candidates:
        try:
            return candidate.from_pairs(pairs)
        except NoMatch:
            continue

    pair = pairs.peek()
    raise NoMatch([c.RULE for c in candidates], pair.rule if pair is not None else None)


def decode(pair: Pair, decoder: Callable[..., T], *args: Any) -> T:
    try:
        return decoder(pair.as_str(), *args)
    except LiteralDecodeError as exc:
        raise LiteralError(pair, exc.reason) from exc
