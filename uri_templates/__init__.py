"""RFC 6570 URI Template parsing and expansion."""
from __future__ import annotations

from uri_templates.core.errors import (
    ExpressionParseException,
    MalformedTemplate,
    ResolutionError,
    TemplateParseError,
    UriTemplateError,
    VariablesLoadError,
)
from uri_templates.core.expand.settings import ExpansionSettings, SettingsError, load_settings
from uri_templates.core.expand.store import VariableStore
from uri_templates.core.explode.exploder import (
    DefaultVarExploder,
    UriVar,
    VarExploder,
    uri_transient,
    uri_var,
    var_name,
)
from uri_templates.core.template import UriTemplate, expand, parse, try_parse

__version__ = "0.1.0"

__all__ = [
    "DefaultVarExploder",
    "ExpansionSettings",
    "ExpressionParseException",
    "MalformedTemplate",
    "ResolutionError",
    "SettingsError",
    "TemplateParseError",
    "UriTemplate",
    "UriTemplateError",
    "UriVar",
    "VarExploder",
    "VariableStore",
    "VariablesLoadError",
    "expand",
    "load_settings",
    "parse",
    "try_parse",
    "uri_transient",
    "uri_var",
    "var_name",
]
