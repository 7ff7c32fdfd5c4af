"""
Literal decoders.

Pure functions from the source span of a literal to its value. They raise
LiteralDecodeError instead of returning sentinels; the tree builders attach
rule and position info and re-raise as a conversion error.

Integer and float decoding follows the usual 64-bit parser rules rather than
Python's own int()/float(): no underscores, no surrounding whitespace, no
embedded radix prefix, and integers must fit in a signed 64-bit word.
"""

from __future__ import annotations

import re
from typing import Dict, Pattern, Tuple

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

RADIX_PREFIXES: Dict[int, Tuple[str, str]] = {
    2: ("0b", "0B"),
    8: ("0o", "0O"),
    16: ("0x", "0X"),
}

_DIGIT_CLASSES = {2: "01", 8: "0-7", 10: "0-9", 16: "0-9a-fA-F"}
_INT_PATTERNS: Dict[int, Pattern[str]] = {
    radix: re.compile(rf"[+-]?[{digits}]+") for radix, digits in _DIGIT_CLASSES.items()
}
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


class LiteralDecodeError(ValueError):
    def __init__(self, text: str, reason: str):
        super().__init__(reason)
        self.text = text
        self.reason = reason


def decode_integer(text: str, radix: int = 10) -> int:
    """Decode an integer literal; radix 2/8/16 literals carry a 2-char prefix."""
    if radix not in _INT_PATTERNS:
        raise ValueError(f"unsupported radix {radix}")

    digits = text
    if radix != 10:
        prefixes = RADIX_PREFIXES[radix]
        if text[:2] not in prefixes:
            raise LiteralDecodeError(text, f"expected a {' or '.join(prefixes)} prefix")
        digits = text[2:]

    if digits in ("", "+", "-"):
        raise LiteralDecodeError(text, "cannot parse integer from empty string")

    if not _INT_PATTERNS[radix].fullmatch(digits):
        raise LiteralDecodeError(text, f"invalid digit found in base {radix} literal")

    value = int(digits, radix)
    if value > I64_MAX:
        raise LiteralDecodeError(text, "number too large to fit in a signed 64-bit integer")
    if value < I64_MIN:
        raise LiteralDecodeError(text, "number too small to fit in a signed 64-bit integer")

    return value


def decode_float(text: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise LiteralDecodeError(text, "invalid float literal")
    return float(text)


def decode_radix_float(text: str) -> float:
    """Float whose integer part may carry a radix prefix: ``0x1A.5`` -> 26.5.

    The integer part is rewritten in decimal and glued back onto the
    (always decimal) fraction before parsing.
    """
    integer, sep, fraction = text.partition(".")
    if not sep:
        raise LiteralDecodeError(text, "missing decimal point")

    try:
        for radix, prefixes in RADIX_PREFIXES.items():
            if integer[:2] in prefixes:
                integer = str(decode_integer(integer, radix))
                break

        return decode_float(f"{integer}.{fraction}")
    except LiteralDecodeError as exc:
        raise LiteralDecodeError(text, exc.reason) from exc


def decode_char(text: str) -> str:
    stripped = text.strip("'")
    if not stripped:
        raise LiteralDecodeError(text, "empty character literal")
    return stripped[0]


def decode_string(text: str) -> str:
    # every leading/trailing quote goes, including quotes that belong to the content
    return text.strip('"')
