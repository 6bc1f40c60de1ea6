"""Authoritative ORM repository for Contact Authority Service state.

Queries exclude soft-deleted rows unless a caller explicitly asks for them;
the service itself never exposes them.
Repositories run inside a caller-owned session so one unit of work spans all
reads and writes of a service call.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, selectinload

from services.state.contact_authority.data.schema import Company, Contact, Group
from services.state.contact_authority.domain import ContactSort

_LAST_NAME_ASC = (Contact.last_name.asc(), Contact.first_name.asc())
_LAST_NAME_DESC = (Contact.last_name.desc(), Contact.first_name.desc())

_SORT_ORDERINGS: dict[ContactSort, tuple[Any, ...]] = {
    ContactSort.DEFAULT: _LAST_NAME_ASC,
    ContactSort.LAST_NAME_ASC: _LAST_NAME_ASC,
    ContactSort.LAST_NAME_DESC: _LAST_NAME_DESC,
    ContactSort.CREATE_TIME_ASC: (Contact.created_time.asc(), Contact.id.asc()),
    ContactSort.CREATE_TIME_DESC: (Contact.created_time.desc(), Contact.id.desc()),
}


class SqlContactRepository:
    """SQLAlchemy ORM repository over CAS-owned tables."""

    def page_contacts(
        self,
        session: Session,
        *,
        search: str,
        sort: ContactSort,
        page_index: int,
        page_size: int,
    ) -> tuple[list[Contact], int]:
        """Return one 1-based page of matching contacts and the total count."""
        criteria = [Contact.deleted.is_(False)]
        if search:
            criteria.append(Contact.last_name.icontains(search, autoescape=True))

        total = session.scalar(
            select(func.count()).select_from(Contact).where(*criteria)
        )
        rows = session.scalars(
            select(Contact)
            .where(*criteria)
            .order_by(*_SORT_ORDERINGS[sort])
            .offset((page_index - 1) * page_size)
            .limit(page_size)
        ).all()
        return list(rows), int(total or 0)

    def get_contact(
        self,
        session: Session,
        *,
        contact_id: bytes,
        include_children: bool = False,
        include_deleted: bool = False,
    ) -> Contact | None:
        """Read one contact by id.

        Soft-deleted rows are returned only when ``include_deleted`` is set.
        """
        statement = select(Contact).where(Contact.id == contact_id)
        if not include_deleted:
            statement = _active(statement, Contact)
        if include_children:
            statement = statement.options(
                selectinload(Contact.group),
                selectinload(Contact.company),
                selectinload(Contact.phone_numbers),
                selectinload(Contact.email_addresses),
                selectinload(Contact.addresses),
                selectinload(Contact.relatives),
            )
        return session.scalars(statement).one_or_none()

    def list_contacts_by_group(
        self, session: Session, *, group_id: bytes
    ) -> list[Contact]:
        """List non-deleted group members ordered newest first."""
        rows = session.scalars(
            _active(select(Contact).where(Contact.group_id == group_id), Contact)
            .order_by(Contact.created_time.desc(), Contact.id.desc())
        ).all()
        return list(rows)

    def find_duplicate(
        self,
        session: Session,
        *,
        first_name: str,
        last_name: str,
        nick_name: str | None,
        exclude_id: bytes | None = None,
    ) -> Contact | None:
        """Return the first non-deleted contact sharing any name field."""
        matches = [Contact.first_name == first_name, Contact.last_name == last_name]
        if nick_name:
            matches.append(Contact.nick_name == nick_name)
        statement = _active(select(Contact).where(or_(*matches)), Contact)
        if exclude_id is not None:
            statement = statement.where(Contact.id != exclude_id)
        return session.scalars(statement.limit(1)).first()

    def get_group(self, session: Session, *, group_id: bytes) -> Group | None:
        """Read one non-deleted group by id."""
        return session.scalars(
            _active(select(Group).where(Group.id == group_id), Group)
        ).one_or_none()

    def get_company(self, session: Session, *, company_id: bytes) -> Company | None:
        """Read one non-deleted company by id."""
        return session.scalars(
            _active(select(Company).where(Company.id == company_id), Company)
        ).one_or_none()

    def add_contact(self, session: Session, contact: Contact) -> None:
        """Queue one new contact for insert on the next flush."""
        session.add(contact)


def _active(
    statement: Select[Any], entity: type[Contact | Group | Company]
) -> Select[Any]:
    """Restrict ``statement`` to rows not flagged as deleted."""
    return statement.where(entity.deleted.is_(False))
