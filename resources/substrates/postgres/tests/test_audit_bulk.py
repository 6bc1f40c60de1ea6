"""Tests for eager audit stamping on bulk insert, update and delete."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from packages.contacts_shared.ids import generate_ulid_bytes
from resources.substrates.postgres.audit import bulk_delete, bulk_insert, bulk_update
from resources.substrates.postgres.tests.audit_models import (
    Label,
    Note,
    Tag,
    TickingClock,
    as_utc,
)


def _notes(*bodies: str) -> list[Note]:
    return [
        Note(id=generate_ulid_bytes(), body=body, deleted=False) for body in bodies
    ]


def test_bulk_insert_stamps_created_time(audited_session_factory, clock) -> None:
    """Bulk insert should stamp every creation-capable member before writing."""
    notes = _notes("a", "b")
    label = Label(id=generate_ulid_bytes(), text="l")
    with audited_session_factory() as session:
        bulk_insert(session, [*notes, label])
        session.commit()

    assert all(note.created_time is not None for note in notes)
    assert notes[0].created_time < notes[1].created_time
    assert label.created_time == clock.current

    with audited_session_factory() as session:
        rows = session.scalars(select(Note).order_by(Note.body)).all()
        assert [as_utc(row.created_time) for row in rows] == [
            notes[0].created_time,
            notes[1].created_time,
        ]
        assert all(row.deleted is False for row in rows)
        assert session.scalar(select(func.count()).select_from(Label)) == 1


def test_bulk_insert_accepts_explicit_clock(audited_session_factory, clock) -> None:
    """An explicit clock should override the session clock."""
    override = TickingClock()
    override.current = clock.current.replace(year=2030)
    notes = _notes("x")
    with audited_session_factory() as session:
        bulk_insert(session, notes, clock=override)
        session.commit()

    assert notes[0].created_time.year == 2030
    assert clock.reads == 0


def test_bulk_update_stamps_modified_time(audited_session_factory, clock) -> None:
    """Bulk update should stamp modification time and keep created_time."""
    notes = _notes("a", "b")
    with audited_session_factory() as session:
        bulk_insert(session, notes)
        session.commit()
    created = [note.created_time for note in notes]

    for note in notes:
        note.body = note.body.upper()
    with audited_session_factory() as session:
        bulk_update(session, notes)
        session.commit()

    with audited_session_factory() as session:
        rows = session.scalars(select(Note).order_by(Note.body)).all()
        assert [row.body for row in rows] == ["A", "B"]
        assert [as_utc(row.created_time) for row in rows] == created
        assert all(as_utc(row.modified_time) > as_utc(row.created_time) for row in rows)


def test_bulk_delete_flags_members_but_removes_rows(audited_session_factory) -> None:
    """Bulk delete flags deletion-capable members yet still deletes physically.

    This diverges from the flush path, where the same delete is retained as a
    soft-deleted row.
    """
    notes = _notes("a", "b", "c")
    with audited_session_factory() as session:
        bulk_insert(session, notes)
        session.commit()

    with audited_session_factory() as session:
        bulk_delete(session, notes[:2])
        session.commit()

    assert [note.deleted for note in notes] == [True, True, False]
    with audited_session_factory() as session:
        remaining = session.scalars(select(Note)).all()
        assert [row.body for row in remaining] == ["c"]
        assert remaining[0].deleted is False


def test_single_delete_and_bulk_delete_diverge(audited_session_factory) -> None:
    """The flush path retains the row where the bulk path removes it."""
    flushed, bulked = _notes("flushed", "bulked")
    with audited_session_factory() as session:
        bulk_insert(session, [flushed, bulked])
        session.commit()

    with audited_session_factory() as session:
        session.delete(session.get(Note, flushed.id))
        session.commit()
    with audited_session_factory() as session:
        bulk_delete(session, [bulked])
        session.commit()

    with audited_session_factory() as session:
        rows = session.scalars(select(Note)).all()
        assert [(row.body, row.deleted) for row in rows] == [("flushed", True)]


def test_bulk_operations_pass_uncapable_records_through(
    audited_session_factory, clock
) -> None:
    """Records with no capability should be written without stamping."""
    tags = [Tag(id=generate_ulid_bytes(), name=name) for name in ("t1", "t2")]
    with audited_session_factory() as session:
        bulk_insert(session, tags)
        session.commit()
        tags[0].name = "renamed"
        bulk_update(session, tags[:1])
        session.commit()
        bulk_delete(session, tags[1:])
        session.commit()

    assert clock.reads == 0
    with audited_session_factory() as session:
        assert session.scalars(select(Tag.name)).all() == ["renamed"]


def test_bulk_operations_with_empty_list_are_noops(audited_session_factory) -> None:
    """Empty entity lists should issue no statements and not fail."""
    with audited_session_factory() as session:
        bulk_insert(session, [])
        bulk_update(session, [])
        bulk_delete(session, [])
        session.commit()
        assert session.scalar(select(func.count()).select_from(Note)) == 0


def test_bulk_insert_writes_generated_defaults_back(audited_session_factory) -> None:
    """Entities built without ids should be usable by later bulk calls."""
    notes = [Note(body="a"), Note(body="b"), Note(body="c")]
    with audited_session_factory() as session:
        bulk_insert(session, notes)
        session.commit()

    assert all(len(note.id) == 16 for note in notes)
    assert [note.deleted for note in notes] == [False, False, False]

    notes[0].body = "A"
    with audited_session_factory() as session:
        bulk_update(session, notes[:1])
        bulk_delete(session, notes[1:])
        session.commit()

    with audited_session_factory() as session:
        rows = session.scalars(select(Note)).all()
        assert [(row.id, row.body) for row in rows] == [(notes[0].id, "A")]
        assert rows[0].modified_time > rows[0].created_time


def test_bulk_update_and_delete_reject_unkeyed_entities(
    audited_session_factory,
) -> None:
    """Entities without primary keys should fail instead of matching nothing."""
    with audited_session_factory() as session:
        with pytest.raises(ValueError, match="primary key"):
            bulk_update(session, [Note(body="x", deleted=False)])
        with pytest.raises(ValueError, match="primary key"):
            bulk_delete(session, [Note(body="y")])


def test_bulk_update_keeps_creation_audit_columns(audited_session_factory) -> None:
    """A detached entity carrying only its id must not clear creation fields."""
    original = Note(body="a", creator_id="operator")
    with audited_session_factory() as session:
        bulk_insert(session, [original])
        session.commit()

    with audited_session_factory() as session:
        bulk_update(session, [Note(id=original.id, body="b", deleted=False)])
        session.commit()

    with audited_session_factory() as session:
        row = session.get(Note, original.id)
        assert row.body == "b"
        assert as_utc(row.created_time) == original.created_time
        assert row.creator_id == "operator"
