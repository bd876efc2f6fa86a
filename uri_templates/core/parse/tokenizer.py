from __future__ import annotations

from dataclasses import dataclass
from typing import Literal as TypingLiteral

from uri_templates.core.errors import MalformedTemplate


TokenKind = TypingLiteral["literal", "expression"]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str  # literal text, or the expression body without braces
    position: int  # offset of the first character (the "{" for expressions)


def tokenize(template: str) -> list[Token]:
    """Split a template into literal runs and brace-delimited expression bodies.

    Raises MalformedTemplate on an unclosed "{", a stray "}", or a "{" nested
    inside another expression.
    """
    tokens: list[Token] = []
    buf: list[str] = []
    start = 0
    open_at: int | None = None

    for i, ch in enumerate(template):
        if ch == "{":
            if open_at is not None:
                raise MalformedTemplate(
                    code="E_NESTED_BRACE",
                    message="'{' found inside an open expression",
                    expression=template[open_at:i + 1],
                    position=i,
                )
            if buf:
                tokens.append(Token("literal", "".join(buf), start))
                buf = []
            open_at = i
        elif ch == "}":
            if open_at is None:
                raise MalformedTemplate(
                    code="E_UNMATCHED_CLOSE",
                    message="'}' without a matching '{'",
                    expression=template,
                    position=i,
                )
            tokens.append(Token("expression", "".join(buf), open_at))
            buf = []
            open_at = None
            start = i + 1
        else:
            if not buf and open_at is None:
                start = i
            buf.append(ch)

    if open_at is not None:
        raise MalformedTemplate(
            code="E_UNCLOSED_EXPRESSION",
            message="expression is never closed with '}'",
            expression=template[open_at:],
            position=open_at,
        )
    if buf:
        tokens.append(Token("literal", "".join(buf), start))
    for tok in tokens:
        if tok.kind == "literal":
            _check_text(tok)
    return tokens


def _check_text(tok: Token) -> None:
    try:
        tok.text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedTemplate(
            code="E_INVALID_UNICODE",
            message="literal text contains an unpaired surrogate",
            expression=tok.text.encode("utf-8", "backslashreplace").decode("utf-8"),
            position=tok.position + e.start,
        ) from e
