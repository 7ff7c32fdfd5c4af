from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

if TYPE_CHECKING:
    from .pairs import Pair

# ---------- Conversion errors (NoMatch is a signal, FatalError aborts) ----------

class ConversionError(Exception):
    pass

class NoMatch(ConversionError):
    """The next pending node is not the one a builder expects.

    Raised before anything is consumed, so a sibling alternative or an
    optional caller may retry from the same cursor position.
    """

    def __init__(self, expected: Union[str, Sequence[str]], found: Optional[str] = None):
        self.expected: Tuple[str, ...] = (expected,) if isinstance(expected, str) else tuple(expected)
        self.found = found
        wanted = " | ".join(self.expected)
        super().__init__(f"expected {wanted}, found {found or 'end of input'}")

class FatalError(ConversionError):
    rule: Optional[str]
    text: Optional[str]
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str, pair: Optional[Pair] = None):
        super().__init__(message)
        self.rule = pair.rule if pair is not None else None
        self.text = pair.as_str() if pair is not None else None
        self.line = pair.line if pair is not None else None
        self.column = pair.column if pair is not None else None

    def __str__(self) -> str:
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class MissingChild(FatalError):
    def __init__(self, parent: Pair, what: str, found: Optional[str] = None):
        super().__init__(
            f"{parent.rule}: missing {what}, found {found or 'end of node'}", parent
        )
        self.what = what
        self.found = found

class Extraneous(FatalError):
    def __init__(self, parent: Pair, extra: Pair):
        super().__init__(f"{parent.rule}: unexpected {extra.rule} {extra.as_str()!r}", parent)
        self.extra_rule = extra.rule

class LiteralError(FatalError):
    def __init__(self, pair: Pair, reason: str):
        super().__init__(f"bad {pair.rule} literal {pair.as_str()!r}: {reason}", pair)
        self.reason = reason
