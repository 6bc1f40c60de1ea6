"""Protocol interfaces used by Contact Authority Service."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

from sqlalchemy.orm import Session

from services.state.contact_authority.data.schema import Company, Contact, Group
from services.state.contact_authority.domain import ContactSort

T = TypeVar("T")


class ContactUnitOfWork(Protocol):
    """Protocol for one-transaction-per-call persistence scopes."""

    def run(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` in one transaction committed on return."""

    def is_healthy(self) -> bool:
        """Return backing store reachability."""


class ContactRepository(Protocol):
    """Protocol for contact, group and company queries inside one session."""

    def page_contacts(
        self,
        session: Session,
        *,
        search: str,
        sort: ContactSort,
        page_index: int,
        page_size: int,
    ) -> tuple[list[Contact], int]:
        """Return one page of non-deleted contacts plus total match count."""

    def get_contact(
        self,
        session: Session,
        *,
        contact_id: bytes,
        include_children: bool = False,
        include_deleted: bool = False,
    ) -> Contact | None:
        """Read one contact, optionally with relations or soft-deleted rows."""

    def list_contacts_by_group(
        self, session: Session, *, group_id: bytes
    ) -> list[Contact]:
        """List non-deleted contacts in one group, newest first."""

    def find_duplicate(
        self,
        session: Session,
        *,
        first_name: str,
        last_name: str,
        nick_name: str | None,
        exclude_id: bytes | None = None,
    ) -> Contact | None:
        """Return a non-deleted contact sharing first, last or nick name."""

    def get_group(self, session: Session, *, group_id: bytes) -> Group | None:
        """Read one non-deleted group."""

    def get_company(self, session: Session, *, company_id: bytes) -> Company | None:
        """Read one non-deleted company."""

    def add_contact(self, session: Session, contact: Contact) -> None:
        """Queue one new contact, with its children, for insert."""
