"""Mapping helpers between CAS ORM entities and domain payloads."""

from __future__ import annotations

from datetime import UTC, datetime

from packages.contacts_shared.ids import ulid_bytes_to_str
from services.state.contact_authority.data.schema import (
    Address,
    Company,
    Contact,
    EmailAddress,
    Group,
    PhoneNumber,
    Relative,
)
from services.state.contact_authority.domain import (
    AddressRecord,
    CompanyRef,
    ContactRecord,
    ContactSummary,
    EmailAddressRecord,
    GroupRef,
    PhoneNumberRecord,
    RelativeRecord,
)


def contact_to_summary(contact: Contact) -> ContactSummary:
    """Convert one contact entity into a listing summary."""
    return ContactSummary(
        id=ulid_bytes_to_str(contact.id),
        first_name=contact.first_name,
        last_name=contact.last_name,
        nick_name=contact.nick_name,
        birthday=contact.birthday,
        group_id=_optional_id(contact.group_id),
        company_id=_optional_id(contact.company_id),
        created_time=_utc(contact.created_time),
        modified_time=_optional_utc(contact.modified_time),
    )


def contact_to_record(contact: Contact) -> ContactRecord:
    """Convert one contact entity and its loaded relations into a record."""
    return ContactRecord(
        id=ulid_bytes_to_str(contact.id),
        first_name=contact.first_name,
        last_name=contact.last_name,
        nick_name=contact.nick_name,
        birthday=contact.birthday,
        note=contact.note,
        creator_id=contact.creator_id,
        created_time=_utc(contact.created_time),
        modified_time=_optional_utc(contact.modified_time),
        group=_group_ref(contact.group) if _visible(contact.group) else None,
        company=_company_ref(contact.company) if _visible(contact.company) else None,
        phone_numbers=[_phone_record(item) for item in contact.phone_numbers],
        email_addresses=[_email_record(item) for item in contact.email_addresses],
        addresses=[_address_record(item) for item in contact.addresses],
        relatives=[_relative_record(item) for item in contact.relatives],
    )


def _group_ref(group: Group) -> GroupRef:
    return GroupRef(
        id=ulid_bytes_to_str(group.id),
        name=group.name,
        description=group.description,
    )


def _company_ref(company: Company) -> CompanyRef:
    return CompanyRef(
        id=ulid_bytes_to_str(company.id),
        name=company.name,
        department=company.department,
        job_title=company.job_title,
    )


def _phone_record(item: PhoneNumber) -> PhoneNumberRecord:
    return PhoneNumberRecord(
        id=ulid_bytes_to_str(item.id),
        phone=item.phone,
        type=item.type,
        formatted_type=item.formatted_type,
        created_time=_utc(item.created_time),
        modified_time=_optional_utc(item.modified_time),
    )


def _email_record(item: EmailAddress) -> EmailAddressRecord:
    return EmailAddressRecord(
        id=ulid_bytes_to_str(item.id),
        email=item.email,
        type=item.type,
        formatted_type=item.formatted_type,
        created_time=_utc(item.created_time),
        modified_time=_optional_utc(item.modified_time),
    )


def _address_record(item: Address) -> AddressRecord:
    return AddressRecord(
        id=ulid_bytes_to_str(item.id),
        street=item.street,
        city=item.city,
        region=item.region,
        postal_code=item.postal_code,
        country=item.country,
        type=item.type,
        created_time=_utc(item.created_time),
    )


def _relative_record(item: Relative) -> RelativeRecord:
    return RelativeRecord(
        id=ulid_bytes_to_str(item.id),
        name=item.name,
        relation=item.relation,
    )


def _optional_id(value: bytes | None) -> str | None:
    return None if value is None else ulid_bytes_to_str(value)


def _utc(value: datetime) -> datetime:
    """Normalize driver datetimes (naive on SQLite) to UTC-aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _optional_utc(value: datetime | None) -> datetime | None:
    return None if value is None else _utc(value)


def _visible(entity: Group | Company | None) -> bool:
    """Return whether a related group/company exists and is not soft-deleted."""
    return entity is not None and not entity.deleted
