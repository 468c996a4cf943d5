"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pagelinks.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from pagelinks.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns an empty string for results that produce no output
    (successful construction commands).
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "is_connected":
        return _connected_flag(result)
    return ""


# ── Helpers ───────────────────────────────────────────────────────────


def _connected_flag(result: ServiceResult) -> str:
    return "1" if result.data.get("connected") else "0"


def _line_number(result: ServiceResult) -> int | None:
    if result.meta is None:
        return None
    return result.meta.get("line")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pl.key")
    if isinstance(value, list):
        v = Text(", ".join(str(item) for item in value) or "-")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with timings."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    line = Text(f"{prefix}{name} ", style="dim")
    line.append(f"{duration:.2f}ms")
    for key, value in span_data.get("annotations", {}).items():
        line.append(f"  {key}={value}", style="pl.key")
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 2)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    line = Text("ERROR", style="pl.error")
    line.append(f"  {result.op}", style="pl.op")
    lineno = _line_number(result)
    if lineno is not None:
        line.append(f"  line {lineno}", style="pl.line")
    message = result.error.message if result.error else "Unknown error"
    line.append(f": {message}")
    console.print(line)
    if verbose and result.error is not None:
        _field(console, "code", result.error.code)
        for key, value in result.error.detail.items():
            _field(console, key, value)
    if verbose and result.meta and "telemetry" in result.meta:
        console.print(Text("  telemetry:", style="dim"))
        _render_telemetry_tree(console, result.meta["telemetry"])


def _render_silent(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Construction commands print nothing on success."""


def _render_connected(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(_connected_flag(result))


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    table = Table(title="Run summary", show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="pl.key")
    table.add_column("value")
    table.add_row("lines", str(data.get("lines", 0)))
    errors = data.get("errors", 0)
    table.add_row("errors", Text(str(errors), style="pl.error" if errors else "pl.ok"))
    if data.get("failed_lines"):
        table.add_row("failed lines", ", ".join(str(n) for n in data["failed_lines"]))
    table.add_row("pages", str(data.get("pages", 0)))
    table.add_row("links", str(data.get("links", 0)))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    label = Text("OK", style="pl.ok")
    label.append(f"  {result.op}", style="pl.op")
    console.print(label)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "add_pages": _render_silent,
    "add_links": _render_silent,
    "is_connected": _render_connected,
    "run": _render_run,
}
