from __future__ import annotations

import json
from typing import Any, List, NoReturn, Optional

import typer

from uri_templates.core.errors import (
    ResolutionError,
    TemplateParseError,
    UriTemplateError,
    VariablesLoadError,
)
from uri_templates.core.expand.settings import SettingsError, load_settings
from uri_templates.core.io.load_variables import load_variables
from uri_templates.core.model import Expression
from uri_templates.core.template import try_parse
from uri_templates.logging import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback() -> None:
    """URI Template CLI."""
    return


def _check_format(format: str, command: str) -> None:
    if format not in ("text", "json"):
        err = UriTemplateError(
            code=f"E_{command.upper()}_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: text, json)",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _to_item(e: UriTemplateError) -> dict:
    if isinstance(e, VariablesLoadError):
        source = "load"
    elif isinstance(e, TemplateParseError):
        source = "parse"
    elif isinstance(e, ResolutionError):
        source = "resolve"
    else:
        source = "cli"
    return {
        "code": e.code,
        "message": e.message,
        "expression": e.expression,
        "position": e.position,
        "file": e.file,
        "severity": "error",
        "source": source,
    }


def _emit_json(
    command: str, *, ok: bool, exit_code: int, errors: list[UriTemplateError], **extra: Any
) -> NoReturn:
    payload = {
        "tool": "uritemplate",
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
    }
    payload.update(extra)
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _describe(expr: Expression) -> dict:
    return {
        "raw": str(expr),
        "operator": expr.operator.symbol,
        "position": expr.position,
        "varspecs": [
            {"name": v.name, "modifier": v.modifier, "prefix": v.prefix} for v in expr.varspecs
        ],
    }


@app.command("validate")
def validate(
    template: str = typer.Argument(..., help="URI template to check"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Parse a template and list its expressions."""
    _check_format(format, "validate")

    parsed, errors = try_parse(template)
    if errors or parsed is None:
        if format == "json":
            _emit_json("validate", ok=False, exit_code=2, errors=list(errors), summary=None)
        _print_errors(list(errors))
        raise typer.Exit(code=2)

    if format == "json":
        summary = {
            "expression_count": len(parsed.expressions),
            "expressions": [_describe(e) for e in parsed.expressions],
            "variables": parsed.variables,
        }
        _emit_json("validate", ok=True, exit_code=0, errors=[], summary=summary)

    typer.echo(f"Template: {parsed.source}")
    typer.echo(f"Expressions: {len(parsed.expressions)}")
    for expr in parsed.expressions:
        specs = ", ".join(str(v) for v in expr.varspecs)
        op = expr.operator.symbol or "(simple)"
        typer.echo(f"- {expr} at {expr.position}: operator {op}; vars {specs}")


@app.command("variables")
def variables(
    template: str = typer.Argument(..., help="URI template to inspect"),
) -> None:
    """Print the variable names a template references, in order."""
    parsed, errors = try_parse(template)
    if errors or parsed is None:
        _print_errors(list(errors))
        raise typer.Exit(code=2)
    for name in parsed.variables:
        typer.echo(name)


@app.command("expand")
def expand(
    template: str = typer.Argument(..., help="URI template to expand"),
    vars_file: Optional[str] = typer.Option(
        None, "--vars", help="YAML/JSON file mapping variable names to values"
    ),
    assignments: Optional[List[str]] = typer.Option(
        None, "--set", help="NAME=VALUE binding; repeatable, overrides --vars"
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="Optional YAML file with expansion settings"
    ),
    partial: bool = typer.Option(
        False, "--partial", help="Keep expressions with unbound variables in the output"
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Expand a template with variables from a file and/or the command line."""
    _check_format(format, "expand")

    def fail(errors: list[UriTemplateError], exit_code: int) -> NoReturn:
        if format == "json":
            _emit_json("expand", ok=False, exit_code=exit_code, errors=errors, result=None)
        _print_errors(errors)
        raise typer.Exit(code=exit_code)

    try:
        settings = load_settings(config)
    except FileNotFoundError:
        fail(
            [
                UriTemplateError(
                    code="E_CONFIG_FILE_NOT_FOUND",
                    message=f"config file not found: {config}",
                    file=config,
                )
            ],
            1,
        )
    except SettingsError as e:
        fail([UriTemplateError(code="E_CONFIG_INVALID", message=str(e), file=config)], 2)

    bindings: dict[str, Any] = {}
    if vars_file:
        try:
            bindings.update(load_variables(vars_file))
        except VariablesLoadError as e:
            fail([e], 1)

    for item in assignments or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            fail(
                [
                    UriTemplateError(
                        code="E_EXPAND_BAD_ASSIGNMENT",
                        message=f"--set expects NAME=VALUE, got: {item}",
                    )
                ],
                2,
            )
        bindings[name] = value

    parsed, errors = try_parse(template)
    if errors or parsed is None:
        fail(list(errors), 2)

    try:
        if partial:
            result = str(parsed.expand_partial(bindings, settings=settings))
        else:
            result = parsed.expand(bindings, settings=settings)
    except ResolutionError as e:
        fail([e], 2)

    if format == "json":
        _emit_json("expand", ok=True, exit_code=0, errors=[], result=result)
    typer.echo(result)


def _print_errors(errors: list[UriTemplateError]) -> None:
    errors_sorted = sorted(
        errors, key=lambda e: (e.file or "", e.position if e.position is not None else -1, e.code)
    )
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    configure_logging()
    app(prog_name="uritemplate")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
