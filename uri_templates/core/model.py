from __future__ import annotations

from dataclasses import dataclass
from typing import Literal as TypingLiteral, Optional, Union


ModifierKind = TypingLiteral["none", "prefix", "explode"]

MAX_PREFIX_LENGTH = 10000


@dataclass(frozen=True)
class Operator:
    symbol: str
    first: str  # emitted once before the first unit
    separator: str
    named: bool
    if_empty: str  # appended to a named key when the value is empty
    allow_reserved: bool


OPERATORS: dict[str, Operator] = {
    "": Operator("", "", ",", False, "", False),
    "+": Operator("+", "", ",", False, "", True),
    "#": Operator("#", "#", ",", False, "", True),
    ".": Operator(".", ".", ".", False, "", False),
    "/": Operator("/", "/", "/", False, "", False),
    ";": Operator(";", ";", ";", True, "", False),
    "?": Operator("?", "?", "&", True, "=", False),
    "&": Operator("&", "&", "&", True, "=", False),
}

# Reserved by RFC 6570 for future extensions.
RESERVED_OPERATORS: frozenset[str] = frozenset("=,!@|")


@dataclass(frozen=True)
class VarSpec:
    name: str
    modifier: ModifierKind = "none"
    prefix: Optional[int] = None

    @property
    def explode(self) -> bool:
        return self.modifier == "explode"

    def __str__(self) -> str:
        if self.modifier == "explode":
            return f"{self.name}*"
        if self.modifier == "prefix":
            return f"{self.name}:{self.prefix}"
        return self.name


@dataclass(frozen=True)
class Expression:
    raw: str  # text between the braces
    operator: Operator
    varspecs: tuple[VarSpec, ...]
    position: int = 0

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.varspecs)

    def __str__(self) -> str:
        return "{" + self.raw + "}"


@dataclass(frozen=True)
class Literal:
    text: str
    position: int = 0

    def __str__(self) -> str:
        return self.text


Component = Union[Literal, Expression]
