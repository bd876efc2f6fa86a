from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Sequence

from uri_templates.core.encode.percent import encode
from uri_templates.core.errors import ResolutionError
from uri_templates.core.expand.settings import DEFAULT_SETTINGS, ExpansionSettings
from uri_templates.core.expand.values import UNDEFINED, ResolvedValue, resolve
from uri_templates.core.model import Expression, Operator, VarSpec
from uri_templates.logging import get_logger

logger = get_logger(__name__)


def expand_expression(
    expression: Expression,
    variables: Mapping[str, Any],
    settings: ExpansionSettings = DEFAULT_SETTINGS,
) -> str:
    """Expand one expression against the bound variables.

    Units from every varspec are joined with the operator separator; the
    operator prefix is emitted only when at least one unit was produced.
    """
    values = [
        resolve_variable(expression, spec, variables, settings) for spec in expression.varspecs
    ]
    return render_expression(expression, values)


def render_expression(expression: Expression, values: Sequence[ResolvedValue]) -> str:
    """Render values already resolved for each varspec, in varspec order."""
    op = expression.operator
    units: list[str] = []
    for spec, value in zip(expression.varspecs, values):
        units.extend(render(spec, value, op))

    logger.debug("expression_expanded", expression=str(expression), units=len(units))
    if not units:
        return ""
    return op.first + op.separator.join(units)


def resolve_variable(
    expression: Expression,
    spec: VarSpec,
    variables: Mapping[str, Any],
    settings: ExpansionSettings = DEFAULT_SETTINGS,
) -> ResolvedValue:
    try:
        return resolve(variables.get(spec.name), settings)
    except ResolutionError as e:
        err = dataclasses.replace(
            e,
            message=f"variable '{spec.name}': {e.message}",
            expression=str(expression),
            position=expression.position,
        )
        if settings.on_resolution_error == "abort":
            raise err from e
        logger.warning(
            "variable_resolution_failed",
            variable=spec.name,
            code=e.code,
            detail=e.message,
        )
        return UNDEFINED


def render(spec: VarSpec, value: ResolvedValue, op: Operator) -> list[str]:
    """Render one resolved value into zero or more output units."""

    def enc(s: str) -> str:
        return encode(s, preserve_reserved=op.allow_reserved)

    if value.kind == "undefined":
        return []

    if value.kind == "scalar":
        text = value.scalar
        if spec.modifier == "prefix" and spec.prefix is not None:
            text = text[: spec.prefix]
        return [_unit(spec.name, enc(text), op)]

    # Prefix modifiers have no effect on composite values.
    if value.kind == "list":
        if not spec.explode:
            return [_unit(spec.name, ",".join(enc(x) for x in value.items), op)]
        if op.named:
            return [_unit(spec.name, enc(x), op) for x in value.items]
        return [enc(x) for x in value.items]

    if not spec.explode:
        joined = ",".join(f"{enc(k)},{enc(v)}" for k, v in value.pairs)
        return [_unit(spec.name, joined, op)]
    if op.named:
        return [_unit(enc(k), enc(v), op) for k, v in value.pairs]
    return [f"{enc(k)}={enc(v)}" for k, v in value.pairs]


def _unit(key: str, encoded: str, op: Operator) -> str:
    if not op.named:
        return encoded
    if not encoded:
        return key + op.if_empty
    return f"{key}={encoded}"
