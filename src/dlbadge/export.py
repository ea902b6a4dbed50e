"""Export badge results in various formats."""

import csv
import io
import json

from tabulate import tabulate

from .types import BadgeResult

_COLUMNS = ["registry", "target", "count", "message", "path", "error"]


def _row(r: BadgeResult) -> list[object]:
    return [
        r["registry"],
        r["target"],
        "" if r["count"] is None else r["count"],
        r["message"],
        r["path"] or "",
        r["error"] or "",
    ]


def export_table(results: list[BadgeResult]) -> str:
    """Render results as a plain-text table for the terminal."""
    rows = [[i] + _row(r) for i, r in enumerate(results, 1)]
    headers = ["#", "Registry", "Target", "Count", "Message", "File", "Error"]
    return tabulate(rows, headers=headers, tablefmt="simple")


def export_csv(results: list[BadgeResult], output: io.StringIO | None = None) -> str:
    """Export results to CSV format."""
    if output is None:
        output = io.StringIO()

    writer = csv.writer(output)
    writer.writerow(_COLUMNS)
    for r in results:
        writer.writerow(_row(r))

    return output.getvalue()


def export_json(results: list[BadgeResult]) -> str:
    """Export results to JSON format."""
    return json.dumps({"badges": results}, indent=2)


def export_markdown(results: list[BadgeResult]) -> str:
    """Export results to Markdown table format."""
    rows = [_row(r) for r in results]
    headers = ["Registry", "Target", "Count", "Message", "File", "Error"]
    return tabulate(rows, headers=headers, tablefmt="github")


EXPORTERS = {
    "table": export_table,
    "csv": export_csv,
    "json": export_json,
    "markdown": export_markdown,
}
