"""Request validation models for Contact Authority Service public API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.contacts_shared.ids import ulid_str_to_bytes
from services.state.contact_authority.domain import (
    ContactSort,
    EmailAddressInput,
    PhoneNumberInput,
)

_SORT_KEYS = ", ".join(item.value for item in ContactSort)


def _validate_ulid(value: str) -> str:
    """Return canonical upper-case ULID text or raise on malformed ids."""
    normalized = value.strip().upper()
    ulid_str_to_bytes(normalized)
    return normalized


def _blank_to_none(value: object) -> object:
    """Treat empty or whitespace-only optional strings as absent."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class ListContactsRequest(BaseModel):
    """Validate paged contact listing payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: str = ""
    sort: ContactSort = ContactSort.DEFAULT
    page_index: int = Field(default=1, ge=1)
    page_size: int = Field(gt=0)

    @field_validator("search", mode="before")
    @classmethod
    def _normalize_search(cls, value: object) -> object:
        """Strip surrounding whitespace; ``None`` means no filter."""
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("sort", mode="before")
    @classmethod
    def _normalize_sort(cls, value: object) -> object:
        """Match sort keys case-insensitively; blank selects the default."""
        if value is None:
            return ContactSort.DEFAULT
        if isinstance(value, ContactSort):
            return value
        if not isinstance(value, str):
            return value
        normalized = value.strip().lower()
        if normalized == "":
            return ContactSort.DEFAULT
        if normalized not in {item.value for item in ContactSort}:
            raise ValueError(
                f"unknown sort key '{value}'; expected one of: {_SORT_KEYS}"
            )
        return normalized


class ContactIdRequest(BaseModel):
    """Validate one contact-id payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    contact_id: str = Field(min_length=1)

    @field_validator("contact_id")
    @classmethod
    def _validate_contact_id(cls, value: str) -> str:
        return _validate_ulid(value)


class GroupIdRequest(BaseModel):
    """Validate one group-id payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    group_id: str = Field(min_length=1)

    @field_validator("group_id")
    @classmethod
    def _validate_group_id(cls, value: str) -> str:
        return _validate_ulid(value)


class ContactEditRequest(BaseModel):
    """Validate create-contact payload fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    nick_name: str | None = Field(default=None, max_length=128)
    birthday: date | None = None
    note: str | None = Field(default=None, max_length=4000)
    group_id: str | None = None
    company_id: str | None = None
    phone_numbers: list[PhoneNumberInput] = Field(default_factory=list)
    email_addresses: list[EmailAddressInput] = Field(default_factory=list)

    @field_validator("nick_name", "note", "group_id", "company_id", mode="before")
    @classmethod
    def _normalize_optional_text(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("group_id", "company_id")
    @classmethod
    def _validate_reference_ids(cls, value: str | None) -> str | None:
        """Reject malformed group/company ids."""
        return None if value is None else _validate_ulid(value)

    @field_validator("phone_numbers")
    @classmethod
    def _validate_phone_ids(
        cls, value: list[PhoneNumberInput]
    ) -> list[PhoneNumberInput]:
        for item in value:
            if item.id is not None and item.id != "":
                _validate_ulid(item.id)
        return value

    @field_validator("email_addresses")
    @classmethod
    def _validate_email_entries(
        cls, value: list[EmailAddressInput]
    ) -> list[EmailAddressInput]:
        for item in value:
            if item.id is not None and item.id != "":
                _validate_ulid(item.id)
            if "@" not in item.email:
                raise ValueError(f"invalid email address '{item.email}'")
        return value


class UpdateContactRequest(ContactEditRequest):
    """Validate update-contact payload fields."""

    contact_id: str = Field(min_length=1)

    @field_validator("contact_id")
    @classmethod
    def _validate_contact_id(cls, value: str) -> str:
        return _validate_ulid(value)
