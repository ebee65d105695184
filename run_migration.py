import argparse
import sys

from management_api import (
    LocalIOError,
    RemoteRejection,
    SchemaOpsError,
    execute,
    load_target,
)

DEFAULT_SCRIPT = "SUPABASE_NEWS_TILES.sql"


def read_script(path):
    """Read the whole migration file as UTF-8 text."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise LocalIOError(path, e) from e


def run_migration(target, path):
    """Submit a SQL script as one payload.

    Not idempotent: re-running a CREATE TABLE script is expected to come back
    as a RemoteRejection unless the script guards itself (IF NOT EXISTS).
    """
    sql = read_script(path)
    return execute(target, sql)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Execute a SQL migration script via the Supabase Management API.")
    parser.add_argument('script', nargs='?', default=DEFAULT_SCRIPT, help=f"Path to the .sql file, relative to the current working directory (default: {DEFAULT_SCRIPT})")
    args = parser.parse_args(argv)

    try:
        target = load_target()
        sql = read_script(args.script)
        print(f"Executing {args.script} via Management API...")
        execute(target, sql)
    except RemoteRejection as e:
        print(f"Error {e.status_code}: {e.body}", file=sys.stderr)
        sys.exit(1)
    except SchemaOpsError as e:
        print(f"Migration failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{args.script} executed successfully!")


if __name__ == "__main__":
    main()
