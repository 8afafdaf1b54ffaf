"""Persistence helpers shared by every entity service.

Soft-deleted rows are hidden by ``visible`` unless the caller passes
``include_deleted=True``; ``only_deleted=True`` selects the deleted rows
alone. Every read in the services goes through these functions so the
deleted-row policy is spelled out at each call site.
"""
import logging
from typing import Optional, Sequence, Type

from sqlalchemy import Select, asc, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)


def visible(stmt: Select, model: Type, include_deleted: bool = False, only_deleted: bool = False) -> Select:
    if only_deleted:
        return stmt.where(model.is_deleted.is_(True))
    if include_deleted:
        return stmt
    return stmt.where(model.is_deleted.is_(False))


def owned(stmt: Select, model: Type, user_id: Optional[str]) -> Select:
    # a None user_id means an admin query across all owners
    if user_id is None:
        return stmt
    return stmt.where(model.user_id == user_id)


def apply_sort(stmt: Select, model: Type, sort: Optional[str], default: Sequence = ()) -> Select:
    """Order by a comma separated field list, ``-field`` meaning descending."""
    if not sort:
        return stmt.order_by(*default) if default else stmt
    clauses = []
    for raw in sort.split(","):
        raw = raw.strip()
        if not raw:
            continue
        direction = desc if raw.startswith("-") else asc
        column = getattr(model, _to_column(raw.lstrip("-")), None)
        if column is None:
            raise BadRequestError(f"Cannot sort by '{raw.lstrip('-')}'")
        clauses.append(direction(column))
    return stmt.order_by(*clauses) if clauses else stmt


def _to_column(name: str) -> str:
    aliases = {"category": "category_id", "account": "account_id", "user": "user_id"}
    if name in aliases:
        return aliases[name]
    return "".join("_" + c.lower() if c.isupper() else c for c in name)


async def fetch_page(db: AsyncSession, stmt: Select, page: int, limit: int):
    """Run ``stmt`` for one page and count every row it matches."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()
    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    return result.scalars().unique().all(), total


async def get_entity(
    db: AsyncSession,
    model: Type,
    entity_id: str,
    user_id: Optional[str],
    include_deleted: bool = False,
    only_deleted: bool = False,
):
    stmt = owned(select(model).where(model.id == entity_id), model, user_id)
    stmt = visible(stmt, model, include_deleted=include_deleted, only_deleted=only_deleted)
    result = await db.execute(stmt.execution_options(populate_existing=True))
    entity = result.scalars().unique().one_or_none()
    if entity is None:
        label = model.__name__
        if only_deleted:
            label = f"Deleted {label.lower()}"
        suffix = " for the current user" if user_id else ""
        raise NotFoundError(f"{label} not found with id {entity_id}{suffix}")
    return entity


async def get_reference(db: AsyncSession, model: Type, entity_id: str, user_id: str):
    """Load a live row referenced by another entity's payload."""
    try:
        return await get_entity(db, model, entity_id, user_id)
    except NotFoundError:
        raise NotFoundError(f"{model.__name__} not found or does not belong to the current user")


async def save(db: AsyncSession, entity, conflict_message: str = "Duplicate value"):
    """Commit ``entity``; unique constraint violations become a 400."""
    db.add(entity)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Rejected write on %s: %s", type(entity).__name__, exc.orig)
        if "unique" in str(exc.orig).lower():
            raise BadRequestError(conflict_message)
        raise BadRequestError(f"Invalid {type(entity).__name__.lower()} data")
    await db.refresh(entity)
    return entity


async def soft_delete(db: AsyncSession, entity):
    # deleting a deleted row is a no-op
    if entity.is_deleted:
        return entity
    entity.is_deleted = True
    return await save(db, entity)


async def get_restorable(db: AsyncSession, model: Type, entity_id: str, user_id: Optional[str]):
    """Load a soft-deleted row; a live row cannot be restored."""
    entity = await get_entity(db, model, entity_id, user_id, include_deleted=True)
    if not entity.is_deleted:
        raise BadRequestError(f"{model.__name__} is not deleted")
    return entity


async def restore(db: AsyncSession, entity, conflict_message: str = "Duplicate value"):
    entity.is_deleted = False
    return await save(db, entity, conflict_message)
