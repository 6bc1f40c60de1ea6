"""Data-layer exports for Contact Authority Service."""

from services.state.contact_authority.data.repository import SqlContactRepository
from services.state.contact_authority.data.runtime import (
    ContactPostgresRuntime,
    contact_postgres_schema,
)
from services.state.contact_authority.data.schema import (
    Address,
    Base,
    Company,
    Contact,
    EmailAddress,
    Group,
    PhoneNumber,
    Relative,
    metadata,
)
from services.state.contact_authority.data.unit_of_work import ContactDataUnitOfWork

__all__ = [
    "Address",
    "Base",
    "Company",
    "Contact",
    "ContactDataUnitOfWork",
    "ContactPostgresRuntime",
    "EmailAddress",
    "Group",
    "PhoneNumber",
    "Relative",
    "SqlContactRepository",
    "contact_postgres_schema",
    "metadata",
]
