"""create contact authority tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from services.state.contact_authority.data.runtime import contact_postgres_schema

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _schema() -> str:
    """Resolve canonical CAS-owned schema name."""
    return contact_postgres_schema()


def _ulid(name: str, *, primary_key: bool = False, nullable: bool = False) -> sa.Column:
    """Return one 16-byte ULID column."""
    return sa.Column(
        name, sa.LargeBinary(16), primary_key=primary_key, nullable=nullable
    )


def _ulid_check(name: str, table: str) -> sa.CheckConstraint:
    return sa.CheckConstraint(
        f"{name} IS NULL OR octet_length({name}) = 16",
        name=f"ck_{table}_{name}_ulid",
    )


def _creation_columns() -> list[sa.Column]:
    return [
        sa.Column("created_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("creator_id", sa.String(128), nullable=True),
    ]


def _modification_columns() -> list[sa.Column]:
    return [sa.Column("modified_time", sa.DateTime(timezone=True), nullable=True)]


def _deletion_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "deleted", sa.Boolean(), nullable=False, server_default=sa.false()
        )
    ]


def _child_fk(schema: str, table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["contact_id"],
        [f"{schema}.contact.id"],
        name=f"fk_{table}_contact",
        ondelete="RESTRICT",
    )


def upgrade() -> None:
    """Create CAS authoritative schema objects."""
    schema = _schema()

    op.create_table(
        "contact_group",
        _ulid("id", primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_creation_columns(),
        *_modification_columns(),
        *_deletion_columns(),
        _ulid_check("id", "contact_group"),
        schema=schema,
    )
    op.create_table(
        "company",
        _ulid("id", primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("department", sa.String(256), nullable=True),
        sa.Column("job_title", sa.String(256), nullable=True),
        *_creation_columns(),
        *_modification_columns(),
        *_deletion_columns(),
        _ulid_check("id", "company"),
        schema=schema,
    )
    op.create_table(
        "contact",
        _ulid("id", primary_key=True),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("nick_name", sa.String(128), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _ulid("group_id", nullable=True),
        _ulid("company_id", nullable=True),
        *_creation_columns(),
        *_modification_columns(),
        *_deletion_columns(),
        sa.ForeignKeyConstraint(
            ["group_id"], [f"{schema}.contact_group.id"], name="fk_contact_group"
        ),
        sa.ForeignKeyConstraint(
            ["company_id"], [f"{schema}.company.id"], name="fk_contact_company"
        ),
        _ulid_check("id", "contact"),
        schema=schema,
    )
    op.create_index("ix_contact_last_name", "contact", ["last_name"], schema=schema)
    op.create_index(
        "ix_contact_created_time", "contact", ["created_time"], schema=schema
    )
    op.create_index("ix_contact_group_id", "contact", ["group_id"], schema=schema)
    op.create_index("ix_contact_company_id", "contact", ["company_id"], schema=schema)

    op.create_table(
        "phone_number",
        _ulid("id", primary_key=True),
        _ulid("contact_id"),
        sa.Column("phone", sa.String(64), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("formatted_type", sa.String(64), nullable=True),
        *_creation_columns(),
        *_modification_columns(),
        _child_fk(schema, "phone_number"),
        _ulid_check("id", "phone_number"),
        schema=schema,
    )
    op.create_table(
        "email_address",
        _ulid("id", primary_key=True),
        _ulid("contact_id"),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("formatted_type", sa.String(64), nullable=True),
        *_creation_columns(),
        *_modification_columns(),
        _child_fk(schema, "email_address"),
        _ulid_check("id", "email_address"),
        schema=schema,
    )
    op.create_table(
        "address",
        _ulid("id", primary_key=True),
        _ulid("contact_id"),
        sa.Column("street", sa.String(256), nullable=True),
        sa.Column("city", sa.String(128), nullable=True),
        sa.Column("region", sa.String(128), nullable=True),
        sa.Column("postal_code", sa.String(32), nullable=True),
        sa.Column("country", sa.String(128), nullable=True),
        sa.Column("type", sa.String(64), nullable=True),
        *_creation_columns(),
        _child_fk(schema, "address"),
        _ulid_check("id", "address"),
        schema=schema,
    )
    op.create_table(
        "relative",
        _ulid("id", primary_key=True),
        _ulid("contact_id"),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("relation", sa.String(64), nullable=True),
        _child_fk(schema, "relative"),
        _ulid_check("id", "relative"),
        schema=schema,
    )
    for table in ("phone_number", "email_address", "address", "relative"):
        op.create_index(
            f"ix_{table}_contact_id", table, ["contact_id"], schema=schema
        )


def downgrade() -> None:
    """Drop CAS authoritative schema objects."""
    schema = _schema()
    for table in ("relative", "address", "email_address", "phone_number"):
        op.drop_index(f"ix_{table}_contact_id", table_name=table, schema=schema)
        op.drop_table(table, schema=schema)
    for index in (
        "ix_contact_company_id",
        "ix_contact_group_id",
        "ix_contact_created_time",
        "ix_contact_last_name",
    ):
        op.drop_index(index, table_name="contact", schema=schema)
    op.drop_table("contact", schema=schema)
    op.drop_table("company", schema=schema)
    op.drop_table("contact_group", schema=schema)
