from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UriTemplateError(Exception):
    """Base error envelope. Carries a stable code plus the offending text."""

    code: str
    message: str
    expression: Optional[str] = None
    position: Optional[int] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.position is not None:
            parts.append(str(self.position))
        loc = ":".join(parts) if parts else "<template>"
        return f"{loc}: {self.code}: {self.message}"


class TemplateParseError(UriTemplateError):
    pass


class MalformedTemplate(TemplateParseError):
    """Unbalanced or nested braces."""


class ExpressionParseException(TemplateParseError):
    """The text between braces violates the expression grammar."""


class ResolutionError(UriTemplateError):
    """A bound value could not be turned into something expandable."""


class VariablesLoadError(UriTemplateError):
    pass
