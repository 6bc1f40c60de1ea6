"""Transactions scoped to the schema that owns the contact tables."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres.session import transactional_session

_SCHEMA_NAME = re.compile(r"[a-z_][a-z0-9_]*")


class ServiceSchemaSessionProvider:
    """Open audited transactions whose unqualified names resolve in ``schema``.

    On Postgres each transaction issues ``SET LOCAL search_path`` so the pin
    ends with the transaction. Other dialects have no search path and get a
    plain transaction.
    """

    def __init__(self, *, session_factory: sessionmaker[Session], schema: str) -> None:
        if not _SCHEMA_NAME.fullmatch(schema):
            raise ValueError(f"invalid postgres schema name: {schema!r}")
        self._session_factory = session_factory
        self.schema = schema

    @contextmanager
    def session(self) -> Iterator[Session]:
        with transactional_session(self._session_factory) as db:
            if db.get_bind().dialect.name == "postgresql":
                db.execute(text(f"SET LOCAL search_path TO {self.schema}, public"))
            yield db
