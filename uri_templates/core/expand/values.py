from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Mapping, Union

from uri_templates.core.errors import ResolutionError
from uri_templates.core.expand.settings import DEFAULT_SETTINGS, ExpansionSettings
from uri_templates.core.explode.exploder import explode


ValueKind = Literal["undefined", "scalar", "list", "map"]

_SCALAR_TYPES = (str, bool, int, float, Decimal, uuid.UUID, Enum, datetime.date, datetime.time)


@dataclass(frozen=True)
class ResolvedValue:
    kind: ValueKind
    scalar: str = ""
    items: tuple[str, ...] = ()
    pairs: tuple[tuple[str, str], ...] = ()


UNDEFINED = ResolvedValue(kind="undefined")

Scalar = Union[str, bool, int, float, Decimal, uuid.UUID, Enum, datetime.date, datetime.time]


def is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALAR_TYPES)


def format_scalar(value: Scalar, settings: ExpansionSettings = DEFAULT_SETTINGS) -> str:
    if isinstance(value, Enum):
        inner = value.value
        return format_scalar(inner, settings) if is_scalar(inner) else value.name
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.time)):
        if settings.date_format:
            return value.strftime(settings.date_format)
        return value.isoformat()
    return str(value)


def resolve(value: Any, settings: ExpansionSettings = DEFAULT_SETTINGS) -> ResolvedValue:
    """Classify a bound value as undefined, scalar, list or associative list.

    ``None``, empty lists and empty mappings are undefined. Host objects go
    through the exploder and come back as associative lists.
    """
    if value is None:
        return UNDEFINED
    if is_scalar(value):
        return ResolvedValue(kind="scalar", scalar=_text(format_scalar(value, settings)))
    if isinstance(value, Mapping):
        return _resolve_pairs(value, settings)
    if isinstance(value, (list, tuple)):
        items = tuple(_member(v, settings) for v in value if v is not None)
        if not items:
            return UNDEFINED
        return ResolvedValue(kind="list", items=items)
    return _resolve_pairs(explode(value), settings)


def _resolve_pairs(mapping: Mapping[Any, Any], settings: ExpansionSettings) -> ResolvedValue:
    pairs = tuple(
        (_text(format_scalar(k, settings) if is_scalar(k) else str(k)), _member(v, settings))
        for k, v in mapping.items()
        if v is not None
    )
    if not pairs:
        return UNDEFINED
    return ResolvedValue(kind="map", pairs=pairs)


def _member(value: Any, settings: ExpansionSettings) -> str:
    if not is_scalar(value):
        raise ResolutionError(
            code="E_NESTED_COMPOSITE",
            message=f"list and map members must be scalars, got {type(value).__name__}",
        )
    return _text(format_scalar(value, settings))


def _text(s: str) -> str:
    try:
        s.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ResolutionError(
            code="E_INVALID_UNICODE",
            message=f"value has an unpaired surrogate at index {e.start}",
        ) from e
    return s
