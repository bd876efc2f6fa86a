from __future__ import annotations

import re

from uri_templates.core.errors import ExpressionParseException
from uri_templates.core.model import (
    MAX_PREFIX_LENGTH,
    OPERATORS,
    RESERVED_OPERATORS,
    Expression,
    VarSpec,
)


_VARCHAR = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})"
_VARNAME = re.compile(rf"{_VARCHAR}(?:\.?{_VARCHAR})*")
_BROKEN_PCT = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PREFIX_DIGITS = re.compile(r"[1-9][0-9]*")


def parse_expression(raw: str, position: int = 0) -> Expression:
    """Parse the body of one ``{...}`` expression (braces excluded).

    Grammar, applied in order:

    1. optional operator symbol; ``= , ! @ |`` are reserved and rejected
    2. comma separated varspecs, at least one
    3. each varspec is ``name``, ``name*`` or ``name:N`` with 1 <= N <= 10000
    4. names are varchars (ALPHA / DIGIT / "_" / pct-encoded) joined by
       optional single dots

    Duplicate names within one expression are rejected.
    """

    def fail(code: str, message: str) -> ExpressionParseException:
        return ExpressionParseException(
            code=code, message=message, expression="{" + raw + "}", position=position
        )

    if not raw:
        raise fail("E_EMPTY_EXPRESSION", "expression is empty")

    head = raw[0]
    if head in RESERVED_OPERATORS:
        raise fail("E_RESERVED_OPERATOR", f"operator '{head}' is reserved and not supported")
    if head in OPERATORS:
        operator = OPERATORS[head]
        body = raw[1:]
    else:
        operator = OPERATORS[""]
        body = raw

    if not body:
        raise fail("E_EMPTY_VARSPEC", "expression has no variables")

    varspecs: list[VarSpec] = []
    seen: set[str] = set()
    for token in body.split(","):
        if not token:
            raise fail("E_EMPTY_VARSPEC", "empty variable in variable list")

        if token.endswith("*"):
            name = token[:-1]
            if ":" in name:
                raise fail("E_PREFIX_AND_EXPLODE", f"'{token}' combines a prefix with explode")
            spec = VarSpec(name=name, modifier="explode")
        elif ":" in token:
            name, _, length = token.partition(":")
            if (
                not _PREFIX_DIGITS.fullmatch(length)
                or len(length) > len(str(MAX_PREFIX_LENGTH))
                or int(length) > MAX_PREFIX_LENGTH
            ):
                raise fail(
                    "E_INVALID_PREFIX",
                    f"prefix length in '{token}' must be an integer from 1 to {MAX_PREFIX_LENGTH}",
                )
            spec = VarSpec(name=name, modifier="prefix", prefix=int(length))
        else:
            name = token
            spec = VarSpec(name=name)

        if _BROKEN_PCT.search(name):
            raise fail("E_INVALID_PCT_ENCODING", f"unterminated percent-encoding in '{name}'")
        if not _VARNAME.fullmatch(name):
            raise fail("E_INVALID_VARNAME", f"invalid variable name: '{name}'")
        if name in seen:
            raise fail("E_DUPLICATE_VARNAME", f"variable '{name}' appears twice")
        seen.add(name)
        varspecs.append(spec)

    return Expression(raw=raw, operator=operator, varspecs=tuple(varspecs), position=position)
