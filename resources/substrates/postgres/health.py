"""Health-check utilities for the Postgres shared substrate."""

from __future__ import annotations

from sqlalchemy import Engine, text

from packages.contacts_shared.logging import get_logger

_LOGGER = get_logger(__name__)


def ping(engine: Engine, *, timeout_seconds: float = 1.0) -> bool:
    """Return True when the database can answer a trivial query quickly.

    ``statement_timeout`` is only applied on Postgres connections; other
    dialects (SQLite in tests) run the bare liveness query.
    """
    timeout_ms = max(1, int(timeout_seconds * 1000))
    try:
        with engine.connect() as conn:
            if _dialect_name(conn) == "postgresql":
                conn.execute(
                    text(
                        "SELECT set_config('statement_timeout', :timeout_value, false)"
                    ),
                    {"timeout_value": f"{timeout_ms}ms"},
                )
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:  # noqa: BLE001
        _LOGGER.warning(
            "Postgres health check failed: %s", f"{type(exc).__name__}: {exc}"
        )
        return False


def _dialect_name(conn: object) -> str:
    dialect = getattr(conn, "dialect", None)
    return str(getattr(dialect, "name", "postgresql"))
