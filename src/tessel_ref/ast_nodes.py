"""
Typed AST for Tessel and the builders that produce it from a Pairs cursor.

Every node class knows the rule tag it is built from (RULE) and exposes
``from_pairs``. Choice nodes (Term, Value, PrimitiveValue, Integer, Operator)
hold the matched alternative in ``variant``; the class of that alternative
is the tag. Nodes are frozen: nothing is mutated after its builder returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator, Optional, Tuple, Type, TypeVar, Union

from .literals import decode_char, decode_float, decode_integer, decode_radix_float, decode_string
from .pairs import Pairs
from .protocol import commit, decode, enter, expect, finish, first_match, optional, required

N = TypeVar("N", bound="AstNode")


class AstNode:
    RULE: ClassVar[str] = ""

    @classmethod
    def from_pairs(cls: Type[N], pairs: Pairs) -> N:
        raise NotImplementedError


# ---------- Program / statements ----------

@dataclass(frozen=True)
class Statement(AstNode):
    """Statement marker. Carries no payload yet."""

    RULE: ClassVar[str] = "stmt"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Statement:
        pair, inner = enter(pairs, cls.RULE)

        # the body still has to convert cleanly even though nothing keeps it
        while optional(Expression.from_pairs, inner) is not None:
            pass

        finish(pair, inner)
        return cls()

@dataclass(frozen=True)
class Program(AstNode):
    statements: Tuple[Statement, ...] = ()

    RULE: ClassVar[str] = "main"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Program:
        pair, inner = enter(pairs, cls.RULE)
        statements = []

        while True:
            stmt = optional(Statement.from_pairs, inner)
            if stmt is None:
                break
            statements.append(stmt)

        finish(pair, inner)
        return cls(tuple(statements))


# ---------- Expressions ----------

@dataclass(frozen=True)
class Expression(AstNode):
    """``lhs`` optionally followed by one operator and a right-hand term.

    There is a single operator slot: chains such as ``1 + 2 + 3`` only exist
    when the grammar nests a parenthesized expression into a term.
    """

    lhs: Term
    rhs: Optional[Tuple[Operator, Term]] = None

    RULE: ClassVar[str] = "expr"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Expression:
        pair, inner = enter(pairs, cls.RULE)
        lhs = required(Term.from_pairs, inner, pair, "left operand")

        rhs = None
        op = optional(Operator.from_pairs, inner)
        if op is not None:
            rhs = (op, required(Term.from_pairs, inner, pair, "right operand"))

        finish(pair, inner)
        return cls(lhs, rhs)

    @property
    def operator(self) -> Optional[Operator]:
        return self.rhs[0] if self.rhs is not None else None

@dataclass(frozen=True)
class Params(AstNode):
    """Zero or more expressions; has no rule tag of its own."""

    exprs: Tuple[Expression, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Params:
        exprs = []

        while True:
            expr = optional(Expression.from_pairs, pairs)
            if expr is None:
                break
            exprs.append(expr)

        return cls(tuple(exprs))

    def __len__(self) -> int:
        return len(self.exprs)

    def __iter__(self) -> Iterator[Expression]:
        return iter(self.exprs)

@dataclass(frozen=True)
class SequenceLiteral(AstNode):
    params: Params

    @classmethod
    def from_pairs(cls, pairs: Pairs):
        pair, inner = enter(pairs, cls.RULE)
        params = Params.from_pairs(inner)
        finish(pair, inner)
        return cls(params)

class ArrayLiteral(SequenceLiteral):
    RULE = "array"

class TupleLiteral(SequenceLiteral):
    RULE = "tuple"


# ---------- Ordered choices ----------

@dataclass(frozen=True)
class Choice(AstNode):
    variant: AstNode

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        raise NotImplementedError

    @classmethod
    def from_pairs(cls, pairs: Pairs):
        # the tag is only consumed once a variant has matched underneath it
        pair = expect(pairs, cls.RULE)
        inner = pair.into_inner()
        variant = first_match(inner, cls.variants())
        finish(pair, inner)
        commit(pairs, pair)
        return cls(variant)

@dataclass(frozen=True)
class Term(Choice):
    variant: Union[Value, Expression]

    RULE: ClassVar[str] = "term"

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        return (Value, Expression)

    @property
    def is_group(self) -> bool:
        return isinstance(self.variant, Expression)

@dataclass(frozen=True)
class Value(Choice):
    variant: Union[PrimitiveValue, StringLiteral, ArrayLiteral, TupleLiteral]

    RULE: ClassVar[str] = "value"

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        return (PrimitiveValue, StringLiteral, ArrayLiteral, TupleLiteral)

@dataclass(frozen=True)
class PrimitiveValue(Choice):
    variant: Union[Integer, Float, Char]

    RULE: ClassVar[str] = "primitive_value"

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        return (Integer, Float, Char)


# ---------- Operators ----------

@dataclass(frozen=True)
class Marker(AstNode):
    SYMBOL: ClassVar[str] = ""

    @classmethod
    def from_pairs(cls, pairs: Pairs):
        pair, inner = enter(pairs, cls.RULE)
        finish(pair, inner)
        return cls()

class Add(Marker):
    RULE = "op_add"
    SYMBOL = "+"

class Sub(Marker):
    RULE = "op_sub"
    SYMBOL = "-"

class Mul(Marker):
    RULE = "op_mul"
    SYMBOL = "*"

class Div(Marker):
    RULE = "op_div"
    SYMBOL = "/"

class Pow(Marker):
    RULE = "op_pow"
    SYMBOL = "**"

@dataclass(frozen=True)
class Operator(Choice):
    variant: Union[Add, Sub, Mul, Div, Pow]

    RULE: ClassVar[str] = "operator"

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        return (Add, Sub, Mul, Div, Pow)

    @property
    def symbol(self) -> str:
        return self.variant.SYMBOL


# ---------- Literals ----------

@dataclass(frozen=True)
class RadixInteger(AstNode):
    val: int

    RADIX: ClassVar[int] = 10

    @classmethod
    def from_pairs(cls, pairs: Pairs):
        pair, inner = enter(pairs, cls.RULE)
        val = decode(pair, decode_integer, cls.RADIX)
        finish(pair, inner)
        return cls(val)

class IntegerDec(RadixInteger):
    RULE = "integer_dec"
    RADIX = 10

class IntegerBin(RadixInteger):
    RULE = "integer_bin"
    RADIX = 2

class IntegerOct(RadixInteger):
    RULE = "integer_oct"
    RADIX = 8

class IntegerHex(RadixInteger):
    RULE = "integer_hex"
    RADIX = 16

@dataclass(frozen=True)
class Integer(Choice):
    variant: Union[IntegerDec, IntegerBin, IntegerOct, IntegerHex]

    RULE: ClassVar[str] = "integer"

    @classmethod
    def variants(cls) -> Tuple[Type[AstNode], ...]:
        return (IntegerDec, IntegerBin, IntegerOct, IntegerHex)

    def as_i64(self) -> int:
        return self.variant.val

    @property
    def radix(self) -> int:
        return self.variant.RADIX

@dataclass(frozen=True)
class Float(AstNode):
    val: float

    RULE: ClassVar[str] = "float"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Float:
        pair, inner = enter(pairs, cls.RULE)
        decoder = decode_radix_float if pair.options.radix_floats else decode_float
        val = decode(pair, decoder)
        finish(pair, inner)
        return cls(val)

@dataclass(frozen=True)
class Char(AstNode):
    val: str

    RULE: ClassVar[str] = "char"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> Char:
        pair, inner = enter(pairs, cls.RULE)
        val = decode(pair, decode_char)
        finish(pair, inner)
        return cls(val)

@dataclass(frozen=True)
class StringLiteral(AstNode):
    val: str

    RULE: ClassVar[str] = "string"

    @classmethod
    def from_pairs(cls, pairs: Pairs) -> StringLiteral:
        pair, inner = enter(pairs, cls.RULE)
        val = decode(pair, decode_string)
        finish(pair, inner)
        return cls(val)
