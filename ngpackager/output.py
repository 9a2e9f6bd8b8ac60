"""
Output module for ngpackager.

Provides consistent output formatting across all commands:
- JSONL (default): Newline-delimited JSON for piping
- Pretty: Human-readable tables using Rich

Usage:
    from ngpackager.output import emit, emit_error

    # Stream items as JSONL (default) or pretty table
    emit(summary.files, pretty=pretty)

    # Emit error to stderr
    emit_error("Not found", type="storage_error", context={"path": "/foo"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, List

from rich.console import Console
from rich.table import Table

from .domain.operation import PackagingSummary


def emit(
    items: Iterable[Any],
    pretty: bool = False,
    columns: Optional[List[str]] = None,
    err: bool = False
) -> None:
    """
    Emit items as JSONL or pretty table.

    Args:
        items: Items to emit (should have to_dict() method or be dicts)
        pretty: If True, render as table. If False, output JSONL
        columns: Column names for table (auto-detected if None)
        err: If True, output to stderr instead of stdout
    """
    stream = sys.stderr if err else sys.stdout

    if pretty:
        _emit_table(items, columns, stream)
    else:
        _emit_jsonl(items, stream)


def _to_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _emit_jsonl(items: Iterable[Any], stream=sys.stdout) -> None:
    """Emit items as JSONL."""
    for item in items:
        print(json.dumps(_to_dict(item), ensure_ascii=False), file=stream, flush=True)


def _emit_table(items: Iterable[Any], columns: Optional[List[str]] = None, stream=sys.stdout) -> None:
    """Emit items as a Rich table."""
    rows = [_to_dict(item) for item in items]

    if not rows:
        print("No results found", file=stream)
        return

    # Auto-detect columns if not provided
    if not columns:
        columns = _auto_columns(rows)

    console = Console(file=stream)
    table = Table(show_header=True, header_style="bold")

    for col in columns:
        table.add_column(col)

    for row in rows:
        values = [_format_value(row.get(col, '')) for col in columns]
        table.add_row(*values)

    console.print(table)


def _auto_columns(rows: List[Dict]) -> List[str]:
    """Auto-detect columns from rows."""
    if not rows:
        return []

    # Common column order preference
    preferred = ['target', 'kind', 'action', 'entry_point', 'source']

    all_keys = set()
    for row in rows:
        all_keys.update(row.keys())

    # Start with preferred columns that exist
    columns = [col for col in preferred if col in all_keys]

    # Add remaining columns
    for key in sorted(all_keys):
        if key not in columns:
            columns.append(key)

    # Limit to reasonable number
    return columns[:8]


def _format_value(value: Any, max_len: int = 60) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, list):
        s = ', '.join(str(v) for v in value[:3])
        if len(value) > 3:
            s += f' (+{len(value) - 3} more)'
        return s
    if isinstance(value, dict):
        return '{...}'

    s = str(value)
    if len(s) > max_len:
        return '...' + s[-(max_len - 3):]
    return s


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (e.g., "storage_error", "descriptor_parse_error")
        context: Additional context dict
    """
    obj = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)


def emit_summary(summary: PackagingSummary, pretty: bool = False) -> None:
    """
    Emit the summary of a packaging run.

    Args:
        summary: Result of the run
        pretty: If True, print a Rich table to stderr
    """
    if not pretty:
        print(json.dumps(summary.to_dict(), ensure_ascii=False), flush=True)
        return

    console = Console(stderr=True)
    mode = "[bold yellow]DRY RUN[/bold yellow] " if summary.dry_run else ""

    table = Table(title=f"{mode}Package Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Output", summary.output)
    table.add_row("Primary entry point", summary.primary or "-")
    table.add_row("Secondary entry points", _format_value(summary.secondaries) or "-")
    for kind, count in sorted(summary.counts().items()):
        table.add_row(f"  {kind}", str(count))
    if summary.skipped:
        table.add_row("Skipped by-products", str(len(summary.skipped)))
    table.add_row("Total files", str(summary.total))

    console.print(table)
