"""Command line interface for oslquery.

This module provides the ``oslq`` command, which lists the parameters of
compiled OSL shaders (``.oso`` files) as aligned text or as JSON.
"""

import json
import sys
import time
from collections.abc import Callable
from typing import Any, Optional, TypeVar, cast

import typer
from loguru import logger

from oslquery import types as t
from oslquery.errors import IncompleteError, OsoError, ParseError
from oslquery.query import OslQuery, find_shader, parameter_to_dict

F = TypeVar("F", bound=Callable[..., Any])


def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="oslq",
    help="Query OSL shader parameters.",
    add_completion=False,
)

OUTPUT_PREFIX = "output "


class Styles:
    """Colors for the text listing, disabled with ``--no-color``."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def _paint(self, text: str, **style: Any) -> str:
        return typer.style(text, **style) if self.enabled else text

    def keyword(self, text: str) -> str:
        return self._paint(text, fg=typer.colors.MAGENTA, bold=True)

    def type_name(self, text: str) -> str:
        return self._paint(text, fg=typer.colors.CYAN)

    def identifier(self, text: str) -> str:
        return self._paint(text, fg=typer.colors.GREEN)

    def value(self, text: str) -> str:
        return self._paint(text, fg=typer.colors.YELLOW)

    def delimiter(self, text: str) -> str:
        return self._paint(text, fg=typer.colors.WHITE, dim=True)


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )


def _format_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_value(value: Any) -> str:
    """Format a default or metadata value the way the listing prints it."""
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    if isinstance(value, tuple):
        return "[" + " ".join(format_value(item) for item in value) + "]"
    return _format_number(value)


def _format_default(param: t.Parameter, styles: Styles) -> str:
    default = param.default
    if param.is_output or default is None:
        return styles.delimiter("<") + styles.value("no default") + styles.delimiter(">")
    if isinstance(default, str):
        return (
            styles.delimiter('"')
            + styles.value(_escape(default))
            + styles.delimiter('"')
        )
    if isinstance(default, tuple):
        return (
            styles.delimiter("[")
            + styles.value(format_value(default)[1:-1])
            + styles.delimiter("]")
        )
    return styles.value(_format_number(default))


def _format_metadata(meta: t.Metadata, indent: str, styles: Styles) -> str:
    return (
        f"{indent}metadata: {styles.keyword(meta.kind.name.lower())} "
        f"{styles.identifier(meta.name)} = {styles.value(format_value(meta.value))}"
    )


def render_query(
    query: OslQuery, styles: Styles, verbose: bool = False, param: str | None = None
) -> list[str]:
    """Render a query as text lines.

    Args:
        query: Parsed shader
        styles: Output colors
        verbose: Print one block per parameter including metadata
        param: Only list the parameter with this name

    Returns:
        Lines to print, without trailing newlines
    """
    lines = [
        f"{styles.keyword(query.shader_type)} "
        f'{styles.identifier(query.shader_name)} "{query.shader_name}"'
    ]
    for meta in query.metadata:
        lines.append(_format_metadata(meta, "\t", styles))

    params = [p for p in query.parameters if param is None or p.name == param]
    name_width = max((len(p.name) for p in params), default=0)
    type_width = max(
        (
            len(t.format_type(p.typed)) + (len(OUTPUT_PREFIX) if p.is_output else 0)
            for p in params
        ),
        default=0,
    )

    for p in params:
        typestring = t.format_type(p.typed)
        if verbose:
            type_text = styles.type_name(typestring)
            if p.is_output:
                type_text = f"{styles.keyword('output')} {type_text}"
            padding = " " * (name_width - len(p.name) + 1)
            lines.append(f'    "{styles.identifier(p.name)}"{padding} "{type_text}"')
            lines.append(f"\t\tDefault value: {_format_default(p, styles)}")
            for meta in p.metadata:
                lines.append(_format_metadata(meta, "\t\t", styles))
            continue

        width = len(typestring) + (len(OUTPUT_PREFIX) if p.is_output else 0)
        prefix = styles.keyword("output") + " " if p.is_output else ""
        lines.append(
            f"{styles.identifier(p.name)}{' ' * (name_width - len(p.name))} "
            f"{prefix}{styles.type_name(typestring)}{' ' * (type_width - width)}"
            f"  {_format_default(p, styles)}"
        )
    return lines


def render_diagnostic(error: ParseError, filename: str, source: str) -> str:
    """Render a parse error with the offending line and a caret marker."""
    lines = source.split("\n")
    text = lines[error.line - 1].rstrip("\r") if 0 < error.line <= len(lines) else ""
    column = 0
    width = max(len(text), 1)
    if error.token:
        found = text.find(error.token)
        if found >= 0:
            column = found
            width = len(error.token)
    gutter = f"{error.line} | "
    return "\n".join(
        [
            f"Error: {error}",
            f"  --> {filename}:{error.line}:{column + 1}",
            f"{gutter}{text}",
            " " * (len(gutter) + column) + "^" * width + f" {error.reason}",
        ]
    )


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _report_error(filename: str, error: OsoError, searchpath: str) -> None:
    if isinstance(error, ParseError):
        found = find_shader(filename, searchpath)
        if found is not None:
            source = found.read_text(encoding="utf-8", errors="replace")
            typer.echo(render_diagnostic(error, str(found), source), err=True)
            return
    typer.echo(f"Error reading {filename}: {error}", err=True)


@typed_command(app.command())
def main(
    files: Optional[list[str]] = typer.Argument(None, help="OSO files to query"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show verbose output"),
    searchpath: str = typer.Option(
        "", "--searchpath", "-p", help="Search path for shaders (colon-separated)"
    ),
    param: Optional[str] = typer.Option(
        None, "--param", help="Query specific parameter by name"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output in JSON format"),
    runstats: bool = typer.Option(False, "--runstats", help="Show timing statistics"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
) -> None:
    """Query OSL shader parameters.

    Example: oslq -p shaders:lib/osl --param Kd lambert
    """
    _configure_logging(verbose)

    if not files:
        typer.echo("Error: No input files specified", err=True)
        typer.echo("Usage: oslq [OPTIONS] FILES...", err=True)
        raise typer.Exit(1)

    styles = Styles(enabled=not no_color and sys.stdout.isatty())

    for filename in files:
        start = time.perf_counter()
        try:
            query = OslQuery.open(filename, searchpath)
            if not query.is_valid():
                raise IncompleteError(f"no shader declaration found in {filename}")
        except OsoError as e:
            logger.error(f"Failed to read {filename}: {e}")
            _report_error(filename, e, searchpath)
            raise typer.Exit(1) from e

        if as_json:
            if param is not None:
                selected = query.param_by_name(param)
                if selected is None:
                    typer.echo(f"Parameter '{param}' not found", err=True)
                    raise typer.Exit(1)
                output: Any = parameter_to_dict(selected)
            else:
                output = query.to_dict()
            typer.echo(json.dumps(output, indent=2))
        else:
            for line in render_query(query, styles, verbose=verbose, param=param):
                typer.echo(line)

        if runstats:
            elapsed = (time.perf_counter() - start) * 1000.0
            typer.echo(f"Parse time: {elapsed:.3f}ms", err=True)


if __name__ == "__main__":
    app()
