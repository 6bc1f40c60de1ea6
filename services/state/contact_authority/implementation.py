"""Concrete Contact Authority Service implementation."""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from packages.contacts_shared.config import ContactsSettings
from packages.contacts_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.contacts_shared.errors import ErrorDetail, codes, make_error
from packages.contacts_shared.ids import ulid_str_to_bytes
from packages.contacts_shared.logging import get_logger, public_api_instrumented
from resources.substrates.postgres.audit import Clock
from resources.substrates.postgres.errors import normalize_postgres_error
from services.state.contact_authority.component import SERVICE_COMPONENT_ID
from services.state.contact_authority.config import (
    ContactAuthoritySettings,
    resolve_contact_authority_settings,
)
from services.state.contact_authority.data import (
    Company,
    Contact,
    ContactDataUnitOfWork,
    ContactPostgresRuntime,
    EmailAddress,
    Group,
    PhoneNumber,
    SqlContactRepository,
)
from services.state.contact_authority.data.mappers import (
    contact_to_record,
    contact_to_summary,
)
from services.state.contact_authority.domain import (
    ContactPage,
    ContactRecord,
    ContactSummary,
    EmailAddressInput,
    HealthStatus,
    PhoneNumberInput,
)
from services.state.contact_authority.interfaces import (
    ContactRepository,
    ContactUnitOfWork,
)
from services.state.contact_authority.service import ContactAuthorityService
from services.state.contact_authority.validation import (
    ContactEditRequest,
    ContactIdRequest,
    GroupIdRequest,
    ListContactsRequest,
    UpdateContactRequest,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class _RequestRejected(Exception):
    """Abort one unit of work and surface ``error`` in the result envelope."""

    def __init__(self, error: ErrorDetail) -> None:
        super().__init__(error.message)
        self.error = error


class DefaultContactAuthorityService(ContactAuthorityService):
    """Default CAS implementation backed by audited Postgres sessions."""

    def __init__(
        self,
        *,
        settings: ContactAuthoritySettings,
        unit_of_work: ContactUnitOfWork,
        repository: ContactRepository,
    ) -> None:
        self._settings = settings
        self._unit_of_work = unit_of_work
        self._repository = repository

    @classmethod
    def from_settings(
        cls, settings: ContactsSettings, *, clock: Clock | None = None
    ) -> "DefaultContactAuthorityService":
        """Build CAS from typed settings and owned resources."""
        runtime = ContactPostgresRuntime.from_settings(settings, clock=clock)
        return cls(
            settings=resolve_contact_authority_settings(settings),
            unit_of_work=ContactDataUnitOfWork(runtime),
            repository=SqlContactRepository(),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
    )
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return CAS readiness based on owned Postgres availability."""
        errors = self._validate_meta(meta)
        if errors:
            return failure(meta=meta, errors=errors)

        try:
            substrate_ready = self._unit_of_work.is_healthy()
        except Exception as exc:  # noqa: BLE001
            return self._handle_exception(meta=meta, operation="health", exc=exc)
        return success(
            meta=meta,
            payload=HealthStatus(
                service_ready=True,
                substrate_ready=substrate_ready,
                detail="ok" if substrate_ready else "contact store did not answer",
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
    )
    def list_contacts(
        self,
        *,
        meta: EnvelopeMeta,
        search: str | None = None,
        sort: str | None = None,
        page_index: int = 1,
        page_size: int | None = None,
    ) -> Envelope[ContactPage]:
        """List one page of non-deleted contacts matching ``search``."""
        request, errors = self._validate_request(
            meta=meta,
            model=ListContactsRequest,
            payload={
                "search": search,
                "sort": sort,
                "page_index": page_index,
                "page_size": (
                    self._settings.default_page_size if page_size is None else page_size
                ),
            },
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, ListContactsRequest)

        if request.page_size > self._settings.max_page_size:
            return failure(
                meta=meta,
                errors=[
                    make_error(
                        codes.INVALID_ARGUMENT,
                        "page_size exceeds max_page_size",
                        metadata={"field": "page_size"},
                    )
                ],
            )
        if len(request.search) > self._settings.max_search_length:
            return failure(
                meta=meta,
                errors=[
                    make_error(
                        codes.INVALID_ARGUMENT,
                        "search exceeds max_search_length",
                        metadata={"field": "search"},
                    )
                ],
            )

        def _work(session: Session) -> ContactPage:
            rows, total = self._repository.page_contacts(
                session,
                search=request.search,
                sort=request.sort,
                page_index=request.page_index,
                page_size=request.page_size,
            )
            return ContactPage(
                items=[contact_to_summary(row) for row in rows],
                page_index=request.page_index,
                page_size=request.page_size,
                total_count=total,
                total_pages=math.ceil(total / request.page_size),
            )

        return self._execute(meta=meta, operation="list_contacts", work=_work)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("contact_id",),
    )
    def get_contact(
        self, *, meta: EnvelopeMeta, contact_id: str
    ) -> Envelope[ContactRecord]:
        """Read one non-deleted contact with group, company and children."""
        request, errors = self._validate_request(
            meta=meta,
            model=ContactIdRequest,
            payload={"contact_id": contact_id},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, ContactIdRequest)

        def _work(session: Session) -> ContactRecord:
            contact = self._require_contact(session, contact_id=request.contact_id)
            return contact_to_record(contact)

        return self._execute(meta=meta, operation="get_contact", work=_work)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("group_id",),
    )
    def list_contacts_by_group(
        self, *, meta: EnvelopeMeta, group_id: str
    ) -> Envelope[list[ContactSummary]]:
        """List non-deleted members of one group, newest first."""
        request, errors = self._validate_request(
            meta=meta,
            model=GroupIdRequest,
            payload={"group_id": group_id},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, GroupIdRequest)

        def _work(session: Session) -> list[ContactSummary]:
            group_key = ulid_str_to_bytes(request.group_id)
            if self._repository.get_group(session, group_id=group_key) is None:
                raise _RequestRejected(_not_found("group", request.group_id))
            rows = self._repository.list_contacts_by_group(session, group_id=group_key)
            return [contact_to_summary(row) for row in rows]

        return self._execute(meta=meta, operation="list_contacts_by_group", work=_work)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
    )
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
        """Create one contact after the weak name-uniqueness check."""
        request, errors = self._validate_request(
            meta=meta,
            model=ContactEditRequest,
            payload={
                "first_name": first_name,
                "last_name": last_name,
                "nick_name": nick_name,
                "birthday": birthday,
                "note": note,
                "group_id": group_id,
                "company_id": company_id,
                "phone_numbers": list(phone_numbers),
                "email_addresses": list(email_addresses),
            },
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, ContactEditRequest)

        def _work(session: Session) -> ContactRecord:
            self._reject_duplicate(session, request=request, exclude_id=None)
            contact = Contact(
                first_name=request.first_name,
                last_name=request.last_name,
                nick_name=request.nick_name,
                birthday=request.birthday,
                note=request.note,
                creator_id=meta.principal,
                group=self._resolve_group(session, group_id=request.group_id),
                company=self._resolve_company(session, company_id=request.company_id),
            )
            for phone in request.phone_numbers:
                contact.phone_numbers.append(
                    _new_phone_number(phone, creator_id=meta.principal)
                )
            for email in request.email_addresses:
                contact.email_addresses.append(
                    _new_email_address(email, creator_id=meta.principal)
                )
            self._repository.add_contact(session, contact)
            session.flush()
            return contact_to_record(contact)

        return self._execute(meta=meta, operation="create_contact", work=_work)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("contact_id",),
    )
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
        """Overwrite scalar fields and merge child entries by id."""
        request, errors = self._validate_request(
            meta=meta,
            model=UpdateContactRequest,
            payload={
                "contact_id": contact_id,
                "first_name": first_name,
                "last_name": last_name,
                "nick_name": nick_name,
                "birthday": birthday,
                "note": note,
                "group_id": group_id,
                "company_id": company_id,
                "phone_numbers": list(phone_numbers),
                "email_addresses": list(email_addresses),
            },
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, UpdateContactRequest)

        def _work(session: Session) -> ContactRecord:
            contact = self._require_contact(session, contact_id=request.contact_id)
            self._reject_duplicate(session, request=request, exclude_id=contact.id)

            contact.first_name = request.first_name
            contact.last_name = request.last_name
            contact.nick_name = request.nick_name
            contact.birthday = request.birthday
            contact.note = request.note
            contact.group = self._resolve_group(session, group_id=request.group_id)
            contact.company = self._resolve_company(
                session, company_id=request.company_id
            )
            _merge_phone_numbers(
                contact, request.phone_numbers, creator_id=meta.principal
            )
            _merge_email_addresses(
                contact, request.email_addresses, creator_id=meta.principal
            )
            session.flush()
            return contact_to_record(contact)

        return self._execute(meta=meta, operation="update_contact", work=_work)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("contact_id",),
    )
    def delete_contact(self, *, meta: EnvelopeMeta, contact_id: str) -> Envelope[bool]:
        """Reject contact deletion; the operation is not supported."""
        errors = self._validate_meta(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        return failure(
            meta=meta,
            errors=[
                make_error(
                    codes.NOT_IMPLEMENTED,
                    "delete_contact is not implemented",
                    metadata={"contact_id": contact_id},
                )
            ],
        )

    def _require_contact(self, session: Session, *, contact_id: str) -> Contact:
        """Load one non-deleted contact with relations or reject as not found."""
        contact = self._repository.get_contact(
            session,
            contact_id=ulid_str_to_bytes(contact_id),
            include_children=True,
        )
        if contact is None:
            raise _RequestRejected(_not_found("contact", contact_id))
        return contact

    def _reject_duplicate(
        self,
        session: Session,
        *,
        request: ContactEditRequest,
        exclude_id: bytes | None,
    ) -> None:
        """Reject edits whose first, last or nick name is already taken."""
        duplicate = self._repository.find_duplicate(
            session,
            first_name=request.first_name,
            last_name=request.last_name,
            nick_name=request.nick_name,
            exclude_id=exclude_id,
        )
        if duplicate is not None:
            raise _RequestRejected(
                make_error(
                    codes.ALREADY_EXISTS,
                    "contact already exists",
                    metadata={"last_name": request.last_name},
                )
            )

    def _resolve_group(
        self, session: Session, *, group_id: str | None
    ) -> Group | None:
        if group_id is None:
            return None
        group = self._repository.get_group(
            session, group_id=ulid_str_to_bytes(group_id)
        )
        if group is None:
            raise _RequestRejected(_not_found("group", group_id))
        return group

    def _resolve_company(
        self, session: Session, *, company_id: str | None
    ) -> Company | None:
        if company_id is None:
            return None
        company = self._repository.get_company(
            session, company_id=ulid_str_to_bytes(company_id)
        )
        if company is None:
            raise _RequestRejected(_not_found("company", company_id))
        return company

    def _execute(
        self,
        *,
        meta: EnvelopeMeta,
        operation: str,
        work: Callable[[Session], T],
    ) -> Envelope[T]:
        """Run ``work`` in one unit of work and wrap its outcome."""
        try:
            payload = self._unit_of_work.run(work)
        except _RequestRejected as rejected:
            return failure(meta=meta, errors=[rejected.error])
        except Exception as exc:  # noqa: BLE001
            return self._handle_exception(meta=meta, operation=operation, exc=exc)
        return success(meta=meta, payload=payload)

    def _validate_meta(self, meta: EnvelopeMeta) -> list[ErrorDetail]:
        """Return an invalid-argument error when caller metadata is unusable."""
        try:
            validate_meta(meta)
        except ValueError as exc:
            return [make_error(codes.INVALID_ARGUMENT, str(exc))]
        return []

    def _validate_request(
        self,
        *,
        meta: EnvelopeMeta,
        model: type[BaseModel],
        payload: dict[str, object],
    ) -> tuple[BaseModel | None, list[ErrorDetail]]:
        """Check caller metadata, then parse the contact request arguments."""
        errors = self._validate_meta(meta)
        if errors:
            return None, errors

        try:
            return model.model_validate(payload), []
        except ValidationError as exc:
            issue = exc.errors()[0]
            field = ".".join(str(item) for item in issue.get("loc", ()))
            field_name = field if field else "payload"
            message = f"{field_name}: {issue.get('msg', 'invalid value')}"
            return None, [
                make_error(
                    codes.INVALID_ARGUMENT,
                    message,
                    metadata={"field": field_name},
                )
            ]

    def _handle_exception(
        self,
        *,
        meta: EnvelopeMeta,
        operation: str,
        exc: Exception,
    ) -> Envelope[Any]:
        """Turn a failure inside the unit of work into a failed contact envelope."""
        _LOGGER.warning(
            "CAS operation failed: operation=%s exception_type=%s",
            operation,
            type(exc).__name__,
            exc_info=exc,
        )
        if _is_postgres_error(exc):
            return failure(meta=meta, errors=[normalize_postgres_error(exc)])
        return failure(
            meta=meta,
            errors=[
                make_error(
                    codes.DEPENDENCY_FAILURE,
                    f"{operation} failed",
                    metadata={"exception_type": type(exc).__name__},
                )
            ],
        )


class AsyncContactAuthorityService:
    """Coroutine facade running a blocking CAS in worker threads."""

    def __init__(self, service: ContactAuthorityService) -> None:
        self._service = service

    async def list_contacts(
        self,
        *,
        meta: EnvelopeMeta,
        search: str | None = None,
        sort: str | None = None,
        page_index: int = 1,
        page_size: int | None = None,
    ) -> Envelope[ContactPage]:
        return await asyncio.to_thread(
            self._service.list_contacts,
            meta=meta,
            search=search,
            sort=sort,
            page_index=page_index,
            page_size=page_size,
        )

    async def get_contact(
        self, *, meta: EnvelopeMeta, contact_id: str
    ) -> Envelope[ContactRecord]:
        return await asyncio.to_thread(
            self._service.get_contact, meta=meta, contact_id=contact_id
        )

    async def list_contacts_by_group(
        self, *, meta: EnvelopeMeta, group_id: str
    ) -> Envelope[list[ContactSummary]]:
        return await asyncio.to_thread(
            self._service.list_contacts_by_group, meta=meta, group_id=group_id
        )

    async def create_contact(
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
        return await asyncio.to_thread(
            self._service.create_contact,
            meta=meta,
            first_name=first_name,
            last_name=last_name,
            nick_name=nick_name,
            birthday=birthday,
            note=note,
            group_id=group_id,
            company_id=company_id,
            phone_numbers=phone_numbers,
            email_addresses=email_addresses,
        )

    async def update_contact(
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
        return await asyncio.to_thread(
            self._service.update_contact,
            meta=meta,
            contact_id=contact_id,
            first_name=first_name,
            last_name=last_name,
            nick_name=nick_name,
            birthday=birthday,
            note=note,
            group_id=group_id,
            company_id=company_id,
            phone_numbers=phone_numbers,
            email_addresses=email_addresses,
        )

    async def delete_contact(
        self, *, meta: EnvelopeMeta, contact_id: str
    ) -> Envelope[bool]:
        return await asyncio.to_thread(
            self._service.delete_contact, meta=meta, contact_id=contact_id
        )

    async def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        return await asyncio.to_thread(self._service.health, meta=meta)


def _new_phone_number(item: PhoneNumberInput, *, creator_id: str) -> PhoneNumber:
    return PhoneNumber(
        phone=item.phone,
        type=item.type,
        formatted_type=item.formatted_type,
        creator_id=creator_id,
    )


def _new_email_address(item: EmailAddressInput, *, creator_id: str) -> EmailAddress:
    return EmailAddress(
        email=item.email,
        type=item.type,
        formatted_type=item.formatted_type,
        creator_id=creator_id,
    )


def _merge_phone_numbers(
    contact: Contact, items: Sequence[PhoneNumberInput], *, creator_id: str
) -> None:
    """Update matching phone numbers in place and append the rest.

    Entries missing from ``items`` are kept; nothing is pruned.
    """
    existing = {entry.id: entry for entry in contact.phone_numbers}
    for item in items:
        target = existing.get(_optional_key(item.id))
        if target is None:
            contact.phone_numbers.append(
                _new_phone_number(item, creator_id=creator_id)
            )
            continue
        target.phone = item.phone
        target.type = item.type
        target.formatted_type = item.formatted_type


def _merge_email_addresses(
    contact: Contact, items: Sequence[EmailAddressInput], *, creator_id: str
) -> None:
    """Update matching email addresses in place and append the rest."""
    existing = {entry.id: entry for entry in contact.email_addresses}
    for item in items:
        target = existing.get(_optional_key(item.id))
        if target is None:
            contact.email_addresses.append(
                _new_email_address(item, creator_id=creator_id)
            )
            continue
        target.email = item.email
        target.type = item.type
        target.formatted_type = item.formatted_type


def _optional_key(value: str | None) -> bytes | None:
    return ulid_str_to_bytes(value) if value else None


def _not_found(kind: str, identifier: str) -> ErrorDetail:
    return make_error(
        codes.RESOURCE_NOT_FOUND,
        f"{kind} not found",
        metadata={f"{kind}_id": identifier},
    )


def _is_postgres_error(exc: Exception) -> bool:
    """Return whether one exception appears to originate from the SQL stack."""
    module = type(exc).__module__
    return module.startswith("sqlalchemy") or module.startswith("psycopg")
