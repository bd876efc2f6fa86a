"""Read variable bindings for ``uritemplate expand --vars``.

A bindings file is a YAML or JSON object whose keys are variable names. An
empty file binds nothing. Values pass through untouched so that lists, maps
and dates reach the expansion engine with their native types.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import yaml

from uri_templates.core.errors import VariablesLoadError

# suffix -> (parser, error code when the parser rejects the text)
_PARSERS: dict[str, tuple[Callable[[str], Any], str]] = {
    ".yaml": (yaml.safe_load, "E_YAML_PARSE"),
    ".yml": (yaml.safe_load, "E_YAML_PARSE"),
    ".json": (json.loads, "E_JSON_PARSE"),
}


def load_variables(path: str) -> dict[str, Any]:
    source = Path(path)
    parser = _PARSERS.get(source.suffix.lower())
    if not source.exists():
        raise VariablesLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=path)
    if parser is None:
        raise VariablesLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message=f"cannot read '{source.suffix}' files; use one of {', '.join(_PARSERS)}",
            file=path,
        )

    parse_text, parse_code = parser
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as e:  # pragma: no cover
        raise VariablesLoadError(code="E_FILE_READ", message=str(e), file=path) from e
    try:
        document = parse_text(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise VariablesLoadError(code=parse_code, message=str(e), file=path) from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise VariablesLoadError(
            code="E_INVALID_TOP_LEVEL",
            message=f"expected an object of name: value bindings, got {type(document).__name__}",
            file=path,
        )
    return {str(name): value for name, value in document.items()}
