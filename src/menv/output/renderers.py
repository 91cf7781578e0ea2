"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from menv.output.console import create_console, get_output, style_for_source

if TYPE_CHECKING:
    from rich.console import Console

    from menv.services.result import ServiceResult

_VALUE_WIDTH = 50


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if not result.ok:
        _render_error(result, console, verbose=verbose)
    elif result.cancelled:
        _render_cancelled(result, console, verbose=verbose)
    else:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "menv.ok"), (f"  {result.op}", "menv.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="menv.key")
    if value is None:
        v = Text("(not set)", style="menv.missing")
    elif key == "name":
        v = Text(str(value), style="menv.name")
    elif key == "path":
        v = Text(str(value), style="menv.path")
    elif isinstance(value, list):
        v = Text(", ".join(str(item) for item in value) or "-")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _flatten(value: str | None, *, verbose: bool = False) -> str:
    """Collapse a value onto one line, truncating long values unless verbose."""
    if value is None:
        return ""
    flat = " ".join(value.split("\n"))
    if not verbose and len(flat) > _VALUE_WIDTH:
        return flat[: _VALUE_WIDTH - 3] + "..."
    return flat


def _sources_text(sources: list[str]) -> Text:
    text = Text()
    for index, source in enumerate(sources):
        if index:
            text.append(", ")
        text.append(source, style=style_for_source(source))
    return text


def _heading(console: Console, title: str) -> None:
    console.print()
    console.print(Text(title, style="bold"))


# ── Error and cancellation ────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "menv.error"), (f"  {result.op}", "menv.op"), f" — {msg}")
    )

    detail = err.detail if err else {}
    if "inherited_value" in detail:
        _field(console, "inherited value", detail["inherited_value"])
    if "hint" in detail:
        console.print(Text(f"  {detail['hint']}"))
    if verbose and detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in detail.items():
            console.print(Text(f"    {k}: {v}"))
    if verbose:
        for outcome in result.outcomes:
            _outcome_line(console, outcome, verbose=verbose)


def _render_cancelled(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    reason = result.data.get("reason", "")
    console.print(
        Text.assemble(("CANCELLED", "menv.warning"), (f"  {result.op}", "menv.op"), f" — {reason}")
    )


# ── List ──────────────────────────────────────────────────────────────


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("NAME", style="menv.name", no_wrap=True)
    table.add_column("VALUE", overflow="fold")
    table.add_column("SOURCES")

    for item in items:
        table.add_row(
            Text(str(item["name"])),
            Text(_flatten(item.get("value"), verbose=verbose)),
            _sources_text(item.get("sources", [])),
        )
    console.print(table)

    summary = result.data.get("summary", {})
    console.print()
    console.print(
        Text(
            f"{summary.get('total', len(items))} variables "
            f"({summary.get('managed', 0)} user-managed, "
            f"{summary.get('inherited', 0)} inherited)"
        )
    )


# ── Mutations ─────────────────────────────────────────────────────────


def _outcome_line(console: Console, outcome: dict[str, Any], *, verbose: bool = False) -> None:
    ok = outcome.get("ok", True)
    mark = Text("  ✓ " if ok else "  ✗ ", style="menv.ok" if ok else "menv.error")
    source = str(outcome.get("source", ""))
    console.print(
        Text.assemble(mark, (source, style_for_source(source)), f"  {outcome.get('detail', '')}")
    )
    for path in outcome.get("paths", []):
        console.print(Text(f"      {path}", style="menv.path"))
    if verbose:
        for backup in outcome.get("backups", []):
            console.print(Text(f"      backup: {backup}", style="menv.path"))


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render set/add_path/remove_path/delete results."""
    _status_line(console, result)
    d = result.data
    for key in ("name", "entry", "mode", "value", "previous", "positions", "contributors"):
        if key not in d:
            continue
        if key in ("value", "previous"):
            if key == "previous" and not verbose:
                continue
            _field(console, key, _flatten(d[key], verbose=True) if d[key] else d[key])
        elif d[key] is not None:
            _field(console, key, d[key])
    if "removed_from" in d:
        _field(console, "removed from", d["removed_from"])

    if result.outcomes:
        console.print()
        for outcome in result.outcomes:
            _outcome_line(console, outcome, verbose=verbose)


# ── Inspection ────────────────────────────────────────────────────────


def _probe_line(console: Console, label: str, probe: dict[str, Any]) -> None:
    if probe.get("error"):
        status = Text(f"error: {probe['error']}", style="menv.error")
    elif probe.get("visible"):
        status = Text(f"visible = {probe.get('value')}", style="menv.ok")
    else:
        status = Text("not visible", style="menv.missing")
    console.print(Text.assemble((f"  {label}: ", "menv.key"), status))


def _render_info(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name"))
    _field(console, "path-like", "yes" if d.get("path_like") else "no")
    console.print(Text.assemble(("  sources: ", "menv.key"), _sources_text(d.get("sources", []))))
    _field(console, "value", d.get("value"))

    _heading(console, "Current process")
    _field(console, "value", d.get("process"))

    _heading(console, "Launchctl session")
    _field(console, "value", d.get("session"))

    _heading(console, "Shell profiles")
    profiles = d.get("profiles", [])
    if not profiles:
        console.print(Text("  (no declarations)"))
    for hit in profiles:
        console.print(Text.assemble((f"  {hit['path']}", "menv.path"), f"  {hit['value']}"))

    _heading(console, "Descriptors")
    for source, descriptor in d.get("descriptors", {}).items():
        value = descriptor.get("value")
        console.print(
            Text.assemble(
                (f"  {source}", style_for_source(source)),
                (f"  {descriptor.get('path')}", "menv.path"),
                f"  {value}" if value is not None else "  (not set)",
            )
        )

    _heading(console, "Fresh shell")
    _probe_line(console, "new terminal", d.get("fresh_shell", {}))


def _render_test(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name"))
    _probe_line(console, "new terminal", d.get("fresh_shell", {}))
    _probe_line(console, "launchctl", d.get("session", {}))


def _render_analyze(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name"))
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ENTRY", overflow="fold")
    table.add_column("STATUS")
    for entry in d.get("entries", []):
        if entry.get("empty"):
            status = Text("empty", style="menv.warning")
        elif entry.get("occurrences", 1) > 1:
            status = Text(f"duplicate ×{entry['occurrences']}", style="menv.warning")
        elif entry.get("exists"):
            status = Text("exists", style="menv.ok")
        else:
            status = Text("missing", style="menv.missing")
        table.add_row(str(entry["position"]), Text(entry["text"] or "(empty)"), status)
    console.print(table)

    _heading(console, "Summary")
    summary = d.get("summary", {})
    for key in (
        "total_entries",
        "unique_entries",
        "duplicate_count",
        "empty_count",
        "existing_dir_count",
        "nonexistent_count",
    ):
        _field(console, key.replace("_", " "), summary.get(key, 0))

    duplicates = d.get("duplicates", [])
    if duplicates:
        _heading(console, "Duplicates")
        for dup in duplicates:
            positions = ", ".join(str(p) for p in dup["positions"])
            console.print(Text(f"  {dup['entry']}  (positions {positions})"))
            for contributor in dup.get("contributors", []):
                console.print(Text(f"      from {contributor}", style="menv.path"))

    sources = d.get("potential_sources", [])
    if sources:
        _heading(console, "Potential sources")
        for source in sources:
            console.print(Text(f"  {source}", style="menv.path"))

    _heading(console, "Recommendations")
    for tip in d.get("recommendations", []):
        console.print(Text(f"  • {tip}"))


# ── Generic ───────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "list": _render_list,
    # Mutations
    "set": _render_mutation,
    "add_path": _render_mutation,
    "remove_path": _render_mutation,
    "delete": _render_mutation,
    # Inspection
    "info": _render_info,
    "test": _render_test,
    "analyze": _render_analyze,
}
