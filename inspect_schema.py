import argparse
import sys
from dataclasses import dataclass
from typing import Optional

from management_api import (
    ConfigurationError,
    SchemaOpsError,
    build_introspection_query,
    execute,
    load_target,
)

# Only these names are ever interpolated into the introspection SQL
INSPECTABLE_TABLES = ('ai_models', 'model_metrics', 'model_logs', 'model_health')

COLUMN_FIELDS = ('column_name', 'data_type', 'is_nullable', 'column_default')


@dataclass(frozen=True)
class TableReport:
    table: str
    rows: Optional[list] = None
    error: Optional[Exception] = None

    @property
    def ok(self):
        return self.error is None


def inspect_tables(target, tables=INSPECTABLE_TABLES, allowed=INSPECTABLE_TABLES):
    """Fetch column metadata for each table, one request at a time.

    A failing table never stops the loop; its error is kept on its report.
    """
    reports = []
    for table in tables:
        if table not in allowed:
            reports.append(TableReport(table, error=ValueError(f"Table '{table}' is not in the allow-list")))
            continue
        try:
            rows = execute(target, build_introspection_query(table))
            reports.append(TableReport(table, rows=rows))
        except SchemaOpsError as e:
            reports.append(TableReport(table, error=e))
    return reports


def format_columns(rows):
    if not rows:
        return "(no columns - table missing or empty)"

    widths = {f: len(f) for f in COLUMN_FIELDS}
    for row in rows:
        for f in COLUMN_FIELDS:
            widths[f] = max(widths[f], len(str(row.get(f))))

    lines = ["  ".join(f.ljust(widths[f]) for f in COLUMN_FIELDS)]
    lines.append("  ".join("-" * widths[f] for f in COLUMN_FIELDS))
    for row in rows:
        lines.append("  ".join(str(row.get(f)).ljust(widths[f]) for f in COLUMN_FIELDS))
    return "\n".join(lines)


def print_report(report):
    print(f"\n=== {report.table.upper()} ===")
    if report.ok:
        print(format_columns(report.rows))
    else:
        print(f"Error: {report.error}", file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Show column definitions for public tables via the Supabase Management API.")
    parser.add_argument('tables', nargs='*', help=f"Tables to inspect (default: {', '.join(INSPECTABLE_TABLES)})")
    args = parser.parse_args(argv)

    try:
        target = load_target()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reports = inspect_tables(target, args.tables or INSPECTABLE_TABLES)
    for report in reports:
        print_report(report)

    failed = [r.table for r in reports if not r.ok]
    if failed:
        print(f"\n{len(failed)} of {len(reports)} table(s) failed: {', '.join(failed)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
