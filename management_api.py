import math
import os
from dataclasses import dataclass
from urllib.parse import urlparse

import requests
from dotenv import load_dotenv

DEFAULT_API_HOST = "api.supabase.com"
DEFAULT_TIMEOUT = 30

INTROSPECTION_TEMPLATE = """
SELECT column_name, data_type, is_nullable, column_default
FROM information_schema.columns
WHERE table_schema = 'public' AND table_name = '{table}'
ORDER BY ordinal_position;
"""

LIST_TABLES_QUERY = (
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = 'public' ORDER BY table_name;"
)


# ==========================================
# ERRORS
# ==========================================
class SchemaOpsError(Exception):
    """Base class for every failure raised by the schema scripts."""


class ConfigurationError(SchemaOpsError):
    pass


class TransportError(SchemaOpsError):
    """The HTTP request never completed (DNS, reset, timeout)."""


class RemoteRejection(SchemaOpsError):
    """The Management API answered with a non-success status."""

    def __init__(self, status_code, body):
        super().__init__(f"Error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(SchemaOpsError):
    def __init__(self, message, body):
        super().__init__(message)
        self.body = body


class LocalIOError(SchemaOpsError):
    def __init__(self, path, message):
        super().__init__(f"Could not read {path}: {message}")
        self.path = path


# ==========================================
# TARGET / CONFIG
# ==========================================
@dataclass(frozen=True)
class Target:
    """Which project to hit and the personal access token to hit it with."""

    project_ref: str
    access_token: str
    api_host: str = DEFAULT_API_HOST
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.project_ref or not self.project_ref.strip():
            raise ConfigurationError("Missing Supabase project ref (SUPABASE_PROJECT_REF)")
        if not self.access_token or not self.access_token.strip():
            raise ConfigurationError("Missing Supabase access token (SUPABASE_ACCESS_TOKEN)")
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ConfigurationError(f"SUPABASE_QUERY_TIMEOUT must be a positive number of seconds, got {self.timeout!r}")

    @property
    def query_url(self):
        return f"https://{self.api_host}/v1/projects/{self.project_ref}/database/query"

    def __repr__(self):
        # Keep the token out of tracebacks and prints
        return f"Target(project_ref={self.project_ref!r}, api_host={self.api_host!r})"


def project_ref_from_url(url):
    """https://<ref>.supabase.co -> <ref>"""
    if not url:
        return None
    host = urlparse(url).hostname or ""
    if not host.endswith(".supabase.co"):
        return None
    return host.split(".")[0] or None


def load_target(env=None):
    """Build a Target from the environment (and .env when env is not given)."""
    if env is None:
        load_dotenv()
        env = os.environ

    project_ref = env.get("SUPABASE_PROJECT_REF") or project_ref_from_url(env.get("SUPABASE_URL"))
    access_token = env.get("SUPABASE_ACCESS_TOKEN")
    api_host = env.get("SUPABASE_API_HOST") or DEFAULT_API_HOST

    raw_timeout = env.get("SUPABASE_QUERY_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"SUPABASE_QUERY_TIMEOUT must be a number, got {raw_timeout!r}")

    return Target(project_ref or "", access_token or "", api_host=api_host, timeout=timeout)


# ==========================================
# QUERIES
# ==========================================
def build_introspection_query(table_name):
    """Column listing for one public table.

    The name is interpolated as-is, so it must come from a fixed allow-list.
    """
    if not table_name:
        raise ValueError("table_name must not be empty")
    return INTROSPECTION_TEMPLATE.format(table=table_name)


def build_list_tables_query():
    return LIST_TABLES_QUERY


def execute(target, statement):
    """Run one SQL statement through the Management API and return its rows.

    Raises TransportError, RemoteRejection or DecodeError. Nothing is retried;
    a multi-statement script is sent and executed as a single payload.
    """
    if not statement or not statement.strip():
        raise ValueError("statement must not be empty")

    headers = {
        "Authorization": f"Bearer {target.access_token}",
        "Content-Type": "application/json"
    }

    try:
        response = requests.post(
            target.query_url,
            headers=headers,
            json={"query": statement},
            timeout=target.timeout
        )
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Network error: {e}") from e

    if not response.ok:
        raise RemoteRejection(response.status_code, response.text)

    body = response.text
    if not body.strip():
        return []

    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(f"Response was not valid JSON: {e}", body) from e

    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of rows, got {type(data).__name__}", body)
    if not all(isinstance(row, dict) for row in data):
        raise DecodeError("Expected every row to be a JSON object", body)
    return data
