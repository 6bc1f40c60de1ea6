"""Domain models for Contact Authority Service payloads."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ContactSort(StrEnum):
    """Supported orderings for paged contact listings."""

    DEFAULT = "default"
    LAST_NAME_ASC = "last_name_asc"
    LAST_NAME_DESC = "last_name_desc"
    CREATE_TIME_ASC = "create_time_asc"
    CREATE_TIME_DESC = "create_time_desc"


class PhoneNumberInput(BaseModel):
    """Caller-supplied phone number; ``id`` targets an existing entry."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    id: str | None = None
    phone: str = Field(min_length=1, max_length=64)
    type: str | None = Field(default=None, max_length=64)
    formatted_type: str | None = Field(default=None, max_length=64)


class EmailAddressInput(BaseModel):
    """Caller-supplied email address; ``id`` targets an existing entry."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    id: str | None = None
    email: str = Field(min_length=3, max_length=320)
    type: str | None = Field(default=None, max_length=64)
    formatted_type: str | None = Field(default=None, max_length=64)


class GroupRef(BaseModel):
    """Group a contact belongs to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    description: str | None


class CompanyRef(BaseModel):
    """Company a contact works for."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    department: str | None
    job_title: str | None


class PhoneNumberRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    phone: str
    type: str | None
    formatted_type: str | None
    created_time: datetime
    modified_time: datetime | None


class EmailAddressRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    email: str
    type: str | None
    formatted_type: str | None
    created_time: datetime
    modified_time: datetime | None


class AddressRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    street: str | None
    city: str | None
    region: str | None
    postal_code: str | None
    country: str | None
    type: str | None
    created_time: datetime


class RelativeRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    relation: str | None


class ContactSummary(BaseModel):
    """Contact row as returned by listing operations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    first_name: str
    last_name: str
    nick_name: str | None
    birthday: date | None
    group_id: str | None
    company_id: str | None
    created_time: datetime
    modified_time: datetime | None


class ContactRecord(BaseModel):
    """Authoritative contact with its group, company and child entries."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    first_name: str
    last_name: str
    nick_name: str | None
    birthday: date | None
    note: str | None
    creator_id: str | None
    created_time: datetime
    modified_time: datetime | None
    group: GroupRef | None
    company: CompanyRef | None
    phone_numbers: list[PhoneNumberRecord]
    email_addresses: list[EmailAddressRecord]
    addresses: list[AddressRecord]
    relatives: list[RelativeRecord]


class ContactPage(BaseModel):
    """One page of contact summaries plus paging totals."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    items: list[ContactSummary]
    page_index: int
    page_size: int
    total_count: int
    total_pages: int


class HealthStatus(BaseModel):
    """CAS and owned substrate readiness."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
