from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional


class VariableStore(Mapping[str, Any]):
    """Immutable name -> value bindings consumed by one or more expansions.

    ``set`` returns a new store; the receiver is never modified.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Mapping[str, Any] = MappingProxyType(dict(values or {}))

    @classmethod
    def of(cls, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "VariableStore":
        merged = dict(values or {})
        merged.update(kwargs)
        return cls(merged)

    def set(self, name: str, value: Any) -> "VariableStore":
        merged = dict(self._values)
        merged[name] = value
        return VariableStore(merged)

    def names(self) -> list[str]:
        return list(self._values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableStore({dict(self._values)!r})"


def as_store(variables: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> VariableStore:
    """Normalize caller input; keyword arguments override mapping entries."""
    if isinstance(variables, VariableStore) and not kwargs:
        return variables
    return VariableStore.of(variables, **kwargs)
