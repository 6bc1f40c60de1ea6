"""Schema bootstrap and Alembic upgrade orchestration for CAS."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config

from packages.contacts_shared.config import ContactsSettings
from packages.contacts_shared.logging import get_logger
from resources.substrates.postgres.bootstrap import bootstrap_service_schemas
from services.state.contact_authority.data.runtime import contact_postgres_schema

ALEMBIC_CONFIG_PATH = Path(__file__).resolve().parents[1] / "migrations" / "alembic.ini"

_LOGGER = get_logger(__name__)


class MigrationExecutionError(RuntimeError):
    """Raised when CAS migration execution fails."""


@dataclass(frozen=True, slots=True)
class MigrationRunResult:
    """Summary of one CAS migration pass."""

    provisioned_schemas: tuple[str, ...]
    alembic_config: str


def run_contact_migrations(
    *,
    settings: ContactsSettings,
    config_path: Path = ALEMBIC_CONFIG_PATH,
    upgrade_fn: Callable[[Config, str], None] = command.upgrade,
) -> MigrationRunResult:
    """Provision the CAS schema and upgrade it to Alembic head."""
    bootstrap_result = bootstrap_service_schemas(
        (contact_postgres_schema(),), settings=settings
    )
    try:
        upgrade_fn(Config(str(config_path)), "head")
    except Exception as exc:
        raise MigrationExecutionError(
            f"migration failed for config '{config_path}'"
        ) from exc
    _LOGGER.info(
        "Contact authority migrations applied: schemas=%s",
        ",".join(bootstrap_result.provisioned_schemas),
    )
    return MigrationRunResult(
        provisioned_schemas=bootstrap_result.provisioned_schemas,
        alembic_config=str(config_path),
    )
