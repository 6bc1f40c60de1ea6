"""Repository read tests for soft-deleted contact visibility."""

from __future__ import annotations

from services.state.contact_authority.data import Contact, SqlContactRepository


def test_get_contact_includes_deleted_rows_only_on_request(runtime, seed) -> None:
    """Soft-deleted rows stay readable through an explicit include filter."""
    contact = seed.contact("Ann", "Lee")
    seed.soft_delete(Contact, contact.id)
    repository = SqlContactRepository()

    with runtime.session_factory() as session:
        hidden = repository.get_contact(session, contact_id=contact.id)
        visible = repository.get_contact(
            session, contact_id=contact.id, include_deleted=True
        )

    assert hidden is None
    assert visible is not None
    assert visible.deleted is True
    assert visible.modified_time is not None


def test_active_contacts_need_no_include_filter(runtime, seed) -> None:
    contact = seed.contact("Bob", "Ray")

    with runtime.session_factory() as session:
        found = SqlContactRepository().get_contact(
            session, contact_id=contact.id, include_children=True
        )
        assert found.first_name == "Bob"
        assert found.phone_numbers == []
