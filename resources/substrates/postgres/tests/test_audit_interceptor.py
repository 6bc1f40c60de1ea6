"""Tests for flush-time audit stamping on audited sessions."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from resources.substrates.postgres.audit import (
    AUDIT_CLOCK_KEY,
    CreationAudited,
    DeletionAudited,
    ModificationAudited,
    apply_audit_stamps,
    session_clock,
)
from resources.substrates.postgres.tests.audit_models import Label, Note, Tag, as_utc


def test_capability_checks_are_structural() -> None:
    """Capabilities should be detected from declared attributes alone."""
    note = Note(body="hello")
    label = Label(text="x")
    tag = Tag(name="plain")

    assert isinstance(note, CreationAudited)
    assert isinstance(note, ModificationAudited)
    assert isinstance(note, DeletionAudited)
    assert isinstance(label, CreationAudited)
    assert not isinstance(label, ModificationAudited)
    assert not isinstance(label, DeletionAudited)
    assert not isinstance(tag, (CreationAudited, ModificationAudited, DeletionAudited))


def test_insert_commit_stamps_created_time_only(audited_session_factory, clock) -> None:
    """Pending inserts should receive created_time and nothing else."""
    with audited_session_factory() as session:
        note = Note(body="first")
        session.add(note)
        session.commit()

        assert note.created_time == clock.current
        assert note.modified_time is None
        assert note.deleted is False
        assert note.creator_id is None


def test_created_time_is_not_altered_by_update(audited_session_factory, clock) -> None:
    """Update commits should refresh modified_time and keep created_time."""
    with audited_session_factory() as session:
        note = Note(body="first")
        session.add(note)
        session.commit()
        created = note.created_time

        note.body = "second"
        session.commit()
        first_modified = note.modified_time

        note.body = "third"
        session.commit()

    assert note.created_time == created
    assert first_modified is not None
    assert first_modified > created
    assert note.modified_time > first_modified

    with audited_session_factory() as session:
        reloaded = session.get(Note, note.id)
        assert as_utc(reloaded.created_time) == created
        assert as_utc(reloaded.modified_time) == note.modified_time


def test_dirty_without_net_change_is_not_stamped(audited_session_factory, clock) -> None:
    """Records touched without a net value change should be skipped."""
    with audited_session_factory() as session:
        note = Note(body="same")
        session.add(note)
        session.commit()
        reads_after_insert = clock.reads

        note.body = "same"
        session.commit()

        assert note.modified_time is None
        assert clock.reads == reads_after_insert


def test_delete_of_deletion_audited_record_becomes_update(
    audited_session_factory, clock
) -> None:
    """Deleting a soft-deletable record should retain the row."""
    with audited_session_factory() as session:
        note = Note(body="keep me")
        session.add(note)
        session.commit()
        note_id = note.id

        session.delete(note)
        session.commit()

        assert note.deleted is True
        assert note.modified_time == clock.current

    with audited_session_factory() as session:
        reloaded = session.scalars(select(Note).where(Note.id == note_id)).one()
        assert reloaded.deleted is True
        assert as_utc(reloaded.modified_time) is not None
        assert session.scalar(select(func.count()).select_from(Note)) == 1


def test_delete_without_capability_is_physical(audited_session_factory) -> None:
    """Records lacking the deletion capability should be removed."""
    with audited_session_factory() as session:
        tag = Tag(name="gone")
        label = Label(text="also gone")
        session.add_all([tag, label])
        session.commit()

        session.delete(tag)
        session.delete(label)
        session.commit()

    with audited_session_factory() as session:
        assert session.scalar(select(func.count()).select_from(Tag)) == 0
        assert session.scalar(select(func.count()).select_from(Label)) == 0


def test_uncapable_records_pass_through_unmodified(audited_session_factory) -> None:
    """Commits of records with no capability should only write their own data."""
    with audited_session_factory() as session:
        tag = Tag(name="plain")
        session.add(tag)
        session.commit()

        tag.name = "renamed"
        session.commit()

    with audited_session_factory() as session:
        reloaded = session.get(Tag, tag.id)
        assert reloaded.name == "renamed"


def test_one_commit_stamps_mixed_entity_types(audited_session_factory, clock) -> None:
    """A single flush should stamp every queued change by its own capabilities."""
    with audited_session_factory() as session:
        existing = Note(body="old")
        doomed = Note(body="doomed")
        session.add_all([existing, doomed])
        session.commit()

        fresh_label = Label(text="new")
        session.add(fresh_label)
        existing.body = "changed"
        session.delete(doomed)
        counts = apply_audit_stamps(session)
        session.commit()

        assert counts.inserted == 1
        assert counts.updated == 1
        assert counts.soft_deleted == 1
        assert fresh_label.created_time is not None
        assert existing.modified_time is not None
        assert doomed.deleted is True


def test_repeated_stamping_pass_is_idempotent(audited_session_factory, clock) -> None:
    """Running the pass twice before one flush should only move timestamps."""
    with audited_session_factory() as session:
        note = Note(body="twice")
        session.add(note)
        apply_audit_stamps(session)
        first = note.created_time
        session.commit()

        assert note.created_time >= first

    with audited_session_factory() as session:
        assert session.scalar(select(func.count()).select_from(Note)) == 1


def test_session_clock_defaults_to_utc_wall_clock() -> None:
    """Sessions without an injected clock should stamp UTC wall-clock time."""
    session = Session()
    assert AUDIT_CLOCK_KEY not in session.info

    now = session_clock(session)()

    assert now.tzinfo is not None
    assert now.utcoffset() == UTC.utcoffset(now)
    assert now <= datetime.now(UTC)
