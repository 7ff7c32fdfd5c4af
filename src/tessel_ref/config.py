from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "TESSEL_"
PARSER_KINDS = ("lalr", "earley")

_TRUTHY = {"1", "true", "yes"}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Options:
    """Knobs shared by the front end and the tree builders.

    ``radix_floats`` switches float literals to the radix-aware decoder
    (``0x1A.5`` -> 26.5). It is off by default: the language has not
    committed to radix-prefixed floats.
    """

    parser: str = "lalr"
    grammar_path: Optional[str] = None
    radix_floats: bool = False

    def __post_init__(self) -> None:
        if self.parser not in PARSER_KINDS:
            raise ValueError(
                f"unknown parser kind {self.parser!r}; expected one of {', '.join(PARSER_KINDS)}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Options:
        env = os.environ if environ is None else environ
        parser = env.get(ENV_PREFIX + "PARSER", cls.parser).strip().lower()
        grammar_path = env.get(ENV_PREFIX + "GRAMMAR") or None

        return cls(
            parser=parser,
            grammar_path=grammar_path,
            radix_floats=_env_flag(env, "RADIX_FLOATS", cls.radix_floats),
        )


DEFAULT_OPTIONS = Options()
