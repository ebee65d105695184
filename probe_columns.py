import os
import json
import sys
from supabase import create_client
from dotenv import load_dotenv

from inspect_schema import INSPECTABLE_TABLES

# Fallback for when no Management API token is at hand: read one row through
# PostgREST and report its keys. Empty tables cannot be described this way.


def probe_columns(client, tables=INSPECTABLE_TABLES):
    schema_info = {}
    for table in tables:
        if table not in INSPECTABLE_TABLES:
            schema_info[table] = "Error: table is not in the allow-list"
            continue
        try:
            res = client.table(table).select("*").limit(1).execute()
            if res.data:
                schema_info[table] = list(res.data[0].keys())
            else:
                schema_info[table] = "Empty Table (Columns unknown via simple select)"
        except Exception as e:
            schema_info[table] = f"Error: {str(e)}"
    return schema_info


def main():
    load_dotenv()

    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY") or os.environ.get("SUPABASE_KEY")

    if not url or not key:
        print("Missing Supabase credentials", file=sys.stderr)
        sys.exit(1)

    client = create_client(url, key)
    print(json.dumps(probe_columns(client), indent=2))


if __name__ == "__main__":
    main()
