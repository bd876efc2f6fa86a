"""Turn composite host objects into ordered name/value pairs.

Given ``/mapper{?address*}`` and::

    @dataclass
    class Address:
        city: str
        state: str

the expansion of ``Address(city="Newport Beach", state="CA")`` is
``/mapper?city=Newport%20Beach&state=CA``.

Rules for :class:`DefaultVarExploder`:

- public dataclass fields and public properties are included when their value
  is not ``None``; plain instance attributes are used for non-dataclass objects
- ``@uri_transient`` on a getter, or ``uri_var(transient=True)`` on a field,
  excludes it
- ``@var_name("label")`` on a getter, or ``uri_var(name="label")`` on a field,
  renames it
- field markers win over getter markers for the same attribute name

Field markers live in dataclass ``field(metadata=uri_var(...))`` or, for plain
classes, in a ``__uri_fields__ = {"attr": UriVar(...)}`` class attribute.
"""
from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, TypeVar, runtime_checkable

from uri_templates.core.errors import ResolutionError


F = TypeVar("F", bound=Callable[..., Any])

URI_VAR_KEY = "uri_var"


@runtime_checkable
class VarExploder(Protocol):
    def name_value_pairs(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class UriVar:
    name: Optional[str] = None
    transient: bool = False


def uri_var(name: Optional[str] = None, transient: bool = False) -> dict[str, UriVar]:
    """Field-level marker, for use as ``field(metadata=uri_var(...))``."""
    return {URI_VAR_KEY: UriVar(name=name, transient=transient)}


def var_name(label: str) -> Callable[[F], F]:
    """Getter-level rename marker; apply beneath ``@property``."""

    def deco(fn: F) -> F:
        setattr(fn, "__uri_var_name__", label)
        return fn

    return deco


def uri_transient(fn: F) -> F:
    """Getter-level exclusion marker; apply beneath ``@property``."""
    setattr(fn, "__uri_transient__", True)
    return fn


class DefaultVarExploder:
    def __init__(self, source: Any) -> None:
        if inspect.isclass(source) or isinstance(source, Enum) or callable(source):
            raise ResolutionError(
                code="E_NOT_EXPLODABLE",
                message=f"value of type {type(source).__name__} must be an object instance",
            )
        self._source = source
        self._pairs = self._collect()

    def name_value_pairs(self) -> dict[str, Any]:
        return dict(self._pairs)

    def _collect(self) -> dict[str, Any]:
        source = self._source
        cls = type(source)

        # attribute name -> (label, value)
        found: dict[str, tuple[str, Any]] = {}

        if dataclasses.is_dataclass(source):
            for f in dataclasses.fields(source):
                if f.name.startswith("_"):
                    continue
                value = getattr(source, f.name)
                if value is not None:
                    found[f.name] = (f.name, value)
        else:
            for attr, value in getattr(source, "__dict__", {}).items():
                if not attr.startswith("_") and value is not None:
                    found[attr] = (attr, value)

        for attr, prop in _properties(cls).items():
            getter = prop.fget
            if getter is None:
                continue
            if getattr(getter, "__uri_transient__", False):
                found.pop(attr, None)
                continue
            try:
                value = getter(source)
            except Exception as e:
                raise ResolutionError(
                    code="E_EXPLODE_FAILED",
                    message=f"reading property '{attr}' of {cls.__name__} failed: {e}",
                ) from e
            if value is None:
                continue
            found[attr] = (getattr(getter, "__uri_var_name__", attr), value)

        for attr, marker in _field_markers(cls).items():
            if attr not in found:
                continue
            if marker.transient:
                del found[attr]
            elif marker.name:
                found[attr] = (marker.name, found[attr][1])

        return {label: value for label, value in found.values()}


def _properties(cls: type) -> dict[str, property]:
    props: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for attr, obj in vars(klass).items():
            if isinstance(obj, property) and not attr.startswith("_"):
                props[attr] = obj
    return props


def _field_markers(cls: type) -> dict[str, UriVar]:
    markers: dict[str, UriVar] = {}
    for klass in reversed(cls.__mro__):
        if dataclasses.is_dataclass(klass):
            for f in dataclasses.fields(klass):
                marker = f.metadata.get(URI_VAR_KEY)
                if isinstance(marker, UriVar):
                    markers[f.name] = marker
        declared = vars(klass).get("__uri_fields__")
        if isinstance(declared, Mapping):
            for attr, marker in declared.items():
                if isinstance(marker, UriVar):
                    markers[attr] = marker
    return markers


def explode(value: Any) -> dict[str, Any]:
    """Resolve a host object to an ordered name/value mapping.

    Objects implementing :class:`VarExploder` are asked directly; anything else
    goes through :class:`DefaultVarExploder`. Raises ResolutionError when no
    pair can be extracted.
    """
    if isinstance(value, VarExploder):
        try:
            pairs = dict(value.name_value_pairs())
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(
                code="E_EXPLODE_FAILED",
                message=f"{type(value).__name__}.name_value_pairs() failed: {e}",
            ) from e
    else:
        pairs = DefaultVarExploder(value).name_value_pairs()

    if not pairs:
        raise ResolutionError(
            code="E_NO_VALUES",
            message=f"no name/value pairs could be extracted from {type(value).__name__}",
        )
    return pairs
