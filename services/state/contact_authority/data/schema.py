"""SQLAlchemy ORM models owned by Contact Authority Service.

Tables are unqualified; sessions reach the service schema through the
``search_path`` pinned by ``ServiceSchemaSessionProvider``. Audit columns are
declared through mixins for convenience only: flush-time stamping detects them
structurally and never consults these classes.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Index, String, Text, false
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from packages.contacts_shared.ids import ulid_foreign_key, ulid_primary_key


class Base(DeclarativeBase):
    """Declarative base for CAS-owned tables."""


class CreationAuditMixin:
    created_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    creator_id: Mapped[str | None] = mapped_column(String(128), nullable=True)


class ModificationAuditMixin:
    modified_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class DeletionAuditMixin:
    deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )


class Group(CreationAuditMixin, ModificationAuditMixin, DeletionAuditMixin, Base):
    __tablename__ = "contact_group"

    id: Mapped[bytes] = ulid_primary_key()
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Company(CreationAuditMixin, ModificationAuditMixin, DeletionAuditMixin, Base):
    __tablename__ = "company"

    id: Mapped[bytes] = ulid_primary_key()
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    department: Mapped[str | None] = mapped_column(String(256), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(256), nullable=True)


class Contact(CreationAuditMixin, ModificationAuditMixin, DeletionAuditMixin, Base):
    __tablename__ = "contact"

    id: Mapped[bytes] = ulid_primary_key()
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    nick_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_id: Mapped[bytes | None] = ulid_foreign_key("contact_group.id", nullable=True)
    company_id: Mapped[bytes | None] = ulid_foreign_key("company.id", nullable=True)

    group: Mapped[Group | None] = relationship()
    company: Mapped[Company | None] = relationship()
    # Children are never cascaded on delete: a soft-deleted contact keeps them.
    phone_numbers: Mapped[list[PhoneNumber]] = relationship(
        back_populates="contact", order_by="PhoneNumber.created_time"
    )
    email_addresses: Mapped[list[EmailAddress]] = relationship(
        back_populates="contact", order_by="EmailAddress.created_time"
    )
    addresses: Mapped[list[Address]] = relationship(
        back_populates="contact", order_by="Address.created_time"
    )
    relatives: Mapped[list[Relative]] = relationship(back_populates="contact")


class PhoneNumber(CreationAuditMixin, ModificationAuditMixin, Base):
    __tablename__ = "phone_number"

    id: Mapped[bytes] = ulid_primary_key()
    contact_id: Mapped[bytes] = ulid_foreign_key("contact.id")
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    formatted_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    contact: Mapped[Contact] = relationship(back_populates="phone_numbers")


class EmailAddress(CreationAuditMixin, ModificationAuditMixin, Base):
    __tablename__ = "email_address"

    id: Mapped[bytes] = ulid_primary_key()
    contact_id: Mapped[bytes] = ulid_foreign_key("contact.id")
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    formatted_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    contact: Mapped[Contact] = relationship(back_populates="email_addresses")


class Address(CreationAuditMixin, Base):
    __tablename__ = "address"

    id: Mapped[bytes] = ulid_primary_key()
    contact_id: Mapped[bytes] = ulid_foreign_key("contact.id")
    street: Mapped[str | None] = mapped_column(String(256), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    region: Mapped[str | None] = mapped_column(String(128), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    country: Mapped[str | None] = mapped_column(String(128), nullable=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    contact: Mapped[Contact] = relationship(back_populates="addresses")


class Relative(Base):
    __tablename__ = "relative"

    id: Mapped[bytes] = ulid_primary_key()
    contact_id: Mapped[bytes] = ulid_foreign_key("contact.id")
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    relation: Mapped[str | None] = mapped_column(String(64), nullable=True)

    contact: Mapped[Contact] = relationship(back_populates="relatives")


Index("ix_contact_last_name", Contact.__table__.c.last_name)
Index("ix_contact_created_time", Contact.__table__.c.created_time)

metadata = Base.metadata
