"""Eager audit stamping for bulk insert, update and delete.

Bulk statements bypass the unit of work, so the flush-time interceptor never
sees these rows. Each variant stamps the explicit entity list first and then
issues one ORM bulk statement per mapped class.

Bulk delete flags deletion-audited members as deleted but still removes the
rows physically; unlike the flush path it never turns into an update, and
callers wanting a soft delete must use ``bulk_update`` instead. Bulk update
never rewrites ``created_time`` or ``creator_id``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import delete, insert, inspect, tuple_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapper, Session

from packages.contacts_shared.logging import fields, get_logger, log_context
from resources.substrates.postgres.audit.contracts import Clock, CreationAudited
from resources.substrates.postgres.audit.interceptor import session_clock
from resources.substrates.postgres.audit.stamping import (
    stamp_creation,
    stamp_deletion,
    stamp_modification,
)

_LOGGER = get_logger(__name__)

_CREATION_COLUMNS = ("created_time", "creator_id")


def bulk_insert(
    session: Session, entities: Sequence[object], *, clock: Clock | None = None
) -> None:
    """Stamp creation time on ``entities`` and bulk insert them."""
    _stamp_creations(entities, clock or session_clock(session))
    _execute_insert(session, entities)


def bulk_update(
    session: Session, entities: Sequence[object], *, clock: Clock | None = None
) -> None:
    """Stamp modification time on ``entities`` and bulk update them by key."""
    _stamp_modifications(entities, clock or session_clock(session))
    _execute_update(session, entities)


def bulk_delete(session: Session, entities: Sequence[object]) -> None:
    """Flag deletion-audited ``entities`` and bulk delete their rows."""
    _stamp_deletions(entities)
    _execute_delete(session, entities)


async def bulk_insert_async(
    session: AsyncSession, entities: Sequence[object], *, clock: Clock | None = None
) -> None:
    """Async variant of :func:`bulk_insert`."""
    _stamp_creations(entities, clock or session_clock(session.sync_session))
    await session.run_sync(_execute_insert, entities)


async def bulk_update_async(
    session: AsyncSession, entities: Sequence[object], *, clock: Clock | None = None
) -> None:
    """Async variant of :func:`bulk_update`."""
    _stamp_modifications(entities, clock or session_clock(session.sync_session))
    await session.run_sync(_execute_update, entities)


async def bulk_delete_async(session: AsyncSession, entities: Sequence[object]) -> None:
    """Async variant of :func:`bulk_delete`."""
    _stamp_deletions(entities)
    await session.run_sync(_execute_delete, entities)


def _stamp_creations(entities: Iterable[object], clock: Clock) -> None:
    stamped = sum(1 for entity in entities if stamp_creation(entity, clock))
    _log_bulk_stamps(fields.INSERTED, stamped)


def _stamp_modifications(entities: Iterable[object], clock: Clock) -> None:
    stamped = sum(1 for entity in entities if stamp_modification(entity, clock))
    _log_bulk_stamps(fields.UPDATED, stamped)


def _stamp_deletions(entities: Iterable[object]) -> None:
    stamped = sum(1 for entity in entities if stamp_deletion(entity))
    _log_bulk_stamps(fields.SOFT_DELETED, stamped)


def _execute_insert(session: Session, entities: Sequence[object]) -> None:
    """Issue one ORM bulk INSERT per mapped class.

    Python-side column defaults are written onto each entity first, so the
    generated keys and flags are visible to later bulk calls on the same
    objects.
    """
    for mapper, members in _group_by_mapper(entities):
        for entity in members:
            _apply_python_defaults(mapper, entity)
        session.execute(
            insert(mapper.class_),
            [_insert_values(mapper, entity) for entity in members],
        )


def _execute_update(session: Session, entities: Sequence[object]) -> None:
    """Issue one ORM bulk UPDATE by primary key per mapped class.

    Creation-audit columns are fixed at insert and never written here.
    """
    for mapper, members in _group_by_mapper(entities):
        _require_primary_keys(mapper, members)
        session.execute(
            update(mapper.class_),
            [_update_values(mapper, entity) for entity in members],
        )


def _execute_delete(session: Session, entities: Sequence[object]) -> None:
    """Issue one physical DELETE by primary key per mapped class."""
    for mapper, members in _group_by_mapper(entities):
        keys = _require_primary_keys(mapper, members)
        if len(mapper.primary_key) == 1:
            criterion = mapper.primary_key[0].in_([key[0] for key in keys])
        else:
            criterion = tuple_(*mapper.primary_key).in_(keys)
        session.execute(delete(mapper.class_).where(criterion))


def _group_by_mapper(
    entities: Iterable[object],
) -> list[tuple[Mapper[Any], list[object]]]:
    """Group entities by mapped class, preserving first-seen order."""
    groups: dict[Mapper[Any], list[object]] = {}
    for entity in entities:
        groups.setdefault(inspect(entity).mapper, []).append(entity)
    return list(groups.items())


def _require_primary_keys(
    mapper: Mapper[Any], members: Sequence[object]
) -> list[tuple[Any, ...]]:
    """Return member primary keys, rejecting members without one."""
    keys = [tuple(mapper.primary_key_from_instance(entity)) for entity in members]
    if any(value is None for key in keys for value in key):
        raise ValueError(
            f"bulk statement on {mapper.class_.__name__} requires a primary key "
            "on every entity"
        )
    return keys


def _apply_python_defaults(mapper: Mapper[Any], entity: object) -> None:
    """Fill unset attributes from scalar or callable Python column defaults."""
    for prop in mapper.column_attrs:
        if getattr(entity, prop.key) is not None:
            continue
        default = prop.columns[0].default
        if default is None:
            continue
        if default.is_scalar:
            setattr(entity, prop.key, default.arg)
        elif default.is_callable:
            setattr(entity, prop.key, default.arg(None))


def _insert_values(mapper: Mapper[Any], entity: object) -> dict[str, Any]:
    """Return insert values, leaving server-defaulted nulls to the database."""
    values: dict[str, Any] = {}
    for prop in mapper.column_attrs:
        value = getattr(entity, prop.key)
        if value is None and prop.columns[0].server_default is not None:
            continue
        values[prop.key] = value
    return values


def _update_values(mapper: Mapper[Any], entity: object) -> dict[str, Any]:
    """Return update values by attribute, minus creation-audit columns."""
    fixed = _CREATION_COLUMNS if isinstance(entity, CreationAudited) else ()
    return {
        prop.key: getattr(entity, prop.key)
        for prop in mapper.column_attrs
        if prop.key not in fixed
    }


def _log_bulk_stamps(counter: str, stamped: int) -> None:
    if stamped == 0:
        return
    with log_context(
        {
            fields.EVENT: fields.AUDIT_STAMP_EVENT,
            fields.AUDIT_PATH: "bulk",
            counter: stamped,
        }
    ):
        _LOGGER.debug("Applied audit stamps to bulk entities")
