import json
import sys

from management_api import SchemaOpsError, build_list_tables_query, execute, load_target


def list_tables(target):
    rows = execute(target, build_list_tables_query())
    return [row.get('table_name') for row in rows]


def main():
    print("Fetching tables via Management API...")
    try:
        tables = list_tables(load_target())
    except SchemaOpsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("Tables found in public schema:")
    print(json.dumps(tables, indent=2))


if __name__ == "__main__":
    main()
