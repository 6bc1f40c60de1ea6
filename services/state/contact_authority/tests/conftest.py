"""Shared fixtures for Contact Authority Service tests.

Service tests run the real audited unit of work against file-backed SQLite so
stamping, soft deletes and queries behave end to end.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from packages.contacts_shared.envelope import EnvelopeKind, EnvelopeMeta, new_meta
from services.state.contact_authority.config import ContactAuthoritySettings
from services.state.contact_authority.data import (
    Company,
    Contact,
    ContactDataUnitOfWork,
    ContactPostgresRuntime,
    Group,
    SqlContactRepository,
    metadata,
)
from services.state.contact_authority.implementation import (
    DefaultContactAuthorityService,
)


class SteppingClock:
    """Deterministic clock advancing one minute per read."""

    def __init__(self) -> None:
        self.current = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(minutes=1)
        return self.current


class Seeder:
    """Write fixture rows through the audited session factory."""

    def __init__(self, runtime: ContactPostgresRuntime) -> None:
        self._runtime = runtime

    def group(self, name: str, *, deleted: bool = False) -> Group:
        return self._add(Group(name=name, deleted=deleted))

    def company(self, name: str, *, deleted: bool = False) -> Company:
        return self._add(Company(name=name, deleted=deleted))

    def contact(
        self,
        first_name: str,
        last_name: str,
        *,
        nick_name: str | None = None,
        group: Group | None = None,
        deleted: bool = False,
    ) -> Contact:
        return self._add(
            Contact(
                first_name=first_name,
                last_name=last_name,
                nick_name=nick_name,
                group_id=None if group is None else group.id,
                deleted=deleted,
            )
        )

    def soft_delete(self, entity_type: type, entity_id: bytes) -> None:
        """Delete one row through the unit of work, as a caller would."""
        with self._runtime.session_factory() as session:
            session.delete(session.get(entity_type, entity_id))
            session.commit()

    def _add(self, entity):
        with self._runtime.session_factory() as session:
            session.add(entity)
            session.commit()
        return entity


@pytest.fixture()
def clock() -> SteppingClock:
    """Return a fresh deterministic clock."""
    return SteppingClock()


@pytest.fixture()
def runtime(
    tmp_path: Path, clock: SteppingClock
) -> Generator[ContactPostgresRuntime, None, None]:
    """Provide a CAS runtime over a fresh file-backed SQLite schema."""
    engine = create_engine(f"sqlite:///{tmp_path / 'contacts.db'}")
    metadata.create_all(engine)
    yield ContactPostgresRuntime.for_engine(engine, clock=clock)
    engine.dispose()


@pytest.fixture()
def seed(runtime: ContactPostgresRuntime) -> Seeder:
    """Return a row seeder bound to the test runtime."""
    return Seeder(runtime)


@pytest.fixture()
def service(runtime: ContactPostgresRuntime) -> DefaultContactAuthorityService:
    """Build CAS over the test runtime with small paging limits."""
    return DefaultContactAuthorityService(
        settings=ContactAuthoritySettings(
            default_page_size=10, max_page_size=25, max_search_length=16
        ),
        unit_of_work=ContactDataUnitOfWork(runtime),
        repository=SqlContactRepository(),
    )


@pytest.fixture()
def meta() -> EnvelopeMeta:
    """Return valid envelope metadata for CAS test requests."""
    return new_meta(kind=EnvelopeKind.COMMAND, source="test", principal="operator")
