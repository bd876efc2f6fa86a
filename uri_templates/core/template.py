from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from uri_templates.core.encode.percent import encode_literal
from uri_templates.core.errors import TemplateParseError
from uri_templates.core.expand.engine import expand_expression, render_expression, resolve_variable
from uri_templates.core.expand.settings import DEFAULT_SETTINGS, ExpansionSettings
from uri_templates.core.expand.store import as_store
from uri_templates.core.model import Component, Expression, Literal
from uri_templates.core.parse.expression_parser import parse_expression
from uri_templates.core.parse.tokenizer import tokenize
from uri_templates.logging import get_logger

logger = get_logger(__name__)

# Operators whose trailing variables can be carried over into a follow-up
# expression during partial expansion.
_CONTINUATION: dict[str, str] = {"?": "&", "&": "&", ";": ";", ".": ".", "/": "/"}


@dataclass(frozen=True)
class UriTemplate:
    """A parsed RFC 6570 template. Immutable and safe to share between threads."""

    source: str
    components: tuple[Component, ...]

    @property
    def expressions(self) -> tuple[Expression, ...]:
        return tuple(c for c in self.components if isinstance(c, Expression))

    @property
    def variables(self) -> list[str]:
        names: list[str] = []
        for expr in self.expressions:
            for name in expr.names:
                if name not in names:
                    names.append(name)
        return names

    def has_variable(self, name: str) -> bool:
        return any(name in expr.names for expr in self.expressions)

    def expand(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        /,
        settings: Optional[ExpansionSettings] = None,
        **kwargs: Any,
    ) -> str:
        """Expand every expression; unbound variables vanish."""
        store = as_store(variables, **kwargs)
        cfg = settings or DEFAULT_SETTINGS
        out: list[str] = []
        for c in self.components:
            if isinstance(c, Literal):
                out.append(encode_literal(c.text))
            else:
                out.append(expand_expression(c, store, cfg))
        return "".join(out)

    def expand_partial(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        /,
        settings: Optional[ExpansionSettings] = None,
        **kwargs: Any,
    ) -> "UriTemplate":
        """Expand what can be expanded and keep the rest as expressions.

        - every variable bound: the expression is expanded
        - no variable bound: the expression is kept as written
        - a leading run bound, for ``? & ; . /``: that run is expanded and the
          remaining variables continue in a new expression (``?`` continues
          as ``&``)
        - anything else is kept as written
        """
        store = as_store(variables, **kwargs)
        cfg = settings or DEFAULT_SETTINGS
        out: list[str] = []
        for c in self.components:
            if isinstance(c, Literal):
                out.append(c.text)
                continue

            values = [resolve_variable(c, spec, store, cfg) for spec in c.varspecs]
            bound = [v.kind != "undefined" for v in values]
            if all(bound):
                out.append(render_expression(c, values))
                continue

            lead = bound.index(False)
            cont = _CONTINUATION.get(c.operator.symbol)
            if lead == 0 or cont is None or any(bound[lead:]):
                out.append(str(c))
                continue

            head = Expression(
                raw=c.raw,
                operator=c.operator,
                varspecs=c.varspecs[:lead],
                position=c.position,
            )
            rest = ",".join(str(spec) for spec in c.varspecs[lead:])
            out.append(render_expression(head, values[:lead]) + "{" + cont + rest + "}")

        return parse("".join(out))

    def __str__(self) -> str:
        return self.source


def _build(source: str, errors: list[TemplateParseError]) -> Optional[UriTemplate]:
    try:
        tokens = tokenize(source)
    except TemplateParseError as e:
        errors.append(e)
        return None

    components: list[Component] = []
    for tok in tokens:
        if tok.kind == "literal":
            components.append(Literal(text=tok.text, position=tok.position))
            continue
        try:
            components.append(parse_expression(tok.text, position=tok.position))
        except TemplateParseError as e:
            errors.append(e)

    if errors:
        return None
    return UriTemplate(source=source, components=tuple(components))


def try_parse(source: str) -> tuple[Optional[UriTemplate], list[TemplateParseError]]:
    """Parse a template without raising.

    Returns (template, errors). Template is None when errors exist; every
    malformed expression is reported, not just the first.
    """
    errors: list[TemplateParseError] = []
    template = _build(source, errors)
    if errors:
        logger.debug("template_rejected", template=source, error_count=len(errors))
    return template, errors


def parse(source: str) -> UriTemplate:
    """Parse a template, raising the first MalformedTemplate/ExpressionParseException."""
    template, errors = try_parse(source)
    if errors:
        raise errors[0]
    assert template is not None
    logger.debug("template_parsed", template=source, expressions=len(template.expressions))
    return template


def expand(source: str, variables: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> str:
    return parse(source).expand(variables, **kwargs)
