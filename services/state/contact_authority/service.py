"""Authoritative in-process Python API for Contact Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from packages.contacts_shared.config import ContactsSettings
from packages.contacts_shared.envelope import Envelope, EnvelopeMeta
from resources.substrates.postgres.audit import Clock
from services.state.contact_authority.domain import (
    ContactPage,
    ContactRecord,
    ContactSummary,
    EmailAddressInput,
    HealthStatus,
    PhoneNumberInput,
)


class ContactAuthorityService(ABC):
    """Public API for contact directory operations."""

    @abstractmethod
    def list_contacts(
        self,
        *,
        meta: EnvelopeMeta,
        search: str | None = None,
        sort: str | None = None,
        page_index: int = 1,
        page_size: int | None = None,
    ) -> Envelope[ContactPage]:
        """List non-deleted contacts filtered by last name, sorted and paged."""

    @abstractmethod
    def get_contact(
        self, *, meta: EnvelopeMeta, contact_id: str
    ) -> Envelope[ContactRecord]:
        """Read one non-deleted contact with its relations."""

    @abstractmethod
    def list_contacts_by_group(
        self, *, meta: EnvelopeMeta, group_id: str
    ) -> Envelope[list[ContactSummary]]:
        """List non-deleted contacts of one non-deleted group, newest first."""

    @abstractmethod
    def create_contact(
        self,
        *,
        meta: EnvelopeMeta,
        first_name: str,
        last_name: str,
        nick_name: str | None = None,
        birthday: date | None = None,
        note: str | None = None,
        group_id: str | None = None,
        company_id: str | None = None,
        phone_numbers: Sequence[PhoneNumberInput] = (),
        email_addresses: Sequence[EmailAddressInput] = (),
    ) -> Envelope[ContactRecord]:
        """Create one contact unless a non-deleted contact shares a name."""

    @abstractmethod
    def update_contact(
        self,
        *,
        meta: EnvelopeMeta,
        contact_id: str,
        first_name: str,
        last_name: str,
        nick_name: str | None = None,
        birthday: date | None = None,
        note: str | None = None,
        group_id: str | None = None,
        company_id: str | None = None,
        phone_numbers: Sequence[PhoneNumberInput] = (),
        email_addresses: Sequence[EmailAddressInput] = (),
    ) -> Envelope[ContactRecord]:
        """Overwrite one contact and merge its phone numbers and emails by id."""

    @abstractmethod
    def delete_contact(self, *, meta: EnvelopeMeta, contact_id: str) -> Envelope[bool]:
        """Delete one contact; not supported and always fails."""

    @abstractmethod
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return CAS and owned substrate readiness status."""


def build_contact_authority_service(
    *,
    settings: ContactsSettings,
    clock: Clock | None = None,
) -> ContactAuthorityService:
    """Build default Contact Authority implementation from typed settings."""
    from services.state.contact_authority.implementation import (
        DefaultContactAuthorityService,
    )

    return DefaultContactAuthorityService.from_settings(settings, clock=clock)
