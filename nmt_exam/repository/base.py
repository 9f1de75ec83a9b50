# -*- coding: utf-8 -*-
"""
nmt_exam/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Base repository operations for generic CRUD functionality.

Reusable asynchronous CRUD helpers on SQLAlchemy 2.0 async ORM, with
logging. Stateless, so adapters and tests can call them directly.
"""

from __future__ import annotations

from typing import Any, List, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nmt_exam.config.logger import configure_logger
from nmt_exam.domain.models import Base
from nmt_exam.utils.exceptions import NotFoundError

T = TypeVar("T", bound=Base)

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


async def find_item(session: AsyncSession, model: Type[T], item_id: str) -> T | None:
    """Retrieve a single item by ID or None."""
    result = await session.execute(select(model).where(getattr(model, "id") == item_id))
    return result.scalars().first()


async def get_item(session: AsyncSession, model: Type[T], item_id: str) -> T:
    """Retrieve a single item by ID, raising NotFoundError when missing."""
    item = await find_item(session, model, item_id)
    if item is None:
        raise NotFoundError(resource_type=model.__name__, resource_id=item_id)
    return item


async def create_item(session: AsyncSession, model: Type[T], **kwargs: Any) -> T:
    """Create a new item in the database."""
    instance = model(**kwargs)
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    return instance


async def update_item(
    session: AsyncSession, model: Type[T], item_id: str, **kwargs: Any
) -> T:
    """Update an existing item in the database."""
    instance = await get_item(session, model, item_id)
    for key, value in kwargs.items():
        setattr(instance, key, value)
    await session.commit()
    await session.refresh(instance)
    return instance


async def delete_item(session: AsyncSession, model: Type[T], item_id: str) -> None:
    """Delete an item from the database."""
    instance = await get_item(session, model, item_id)
    await session.delete(instance)
    await session.commit()
    logger.info(f"Удалён {model.__name__} с ID {item_id}")


async def list_items(
    session: AsyncSession,
    model: Type[T],
    skip: int = 0,
    limit: int = 100,
    order_by: Any = None,
    **filters,
) -> List[T]:
    """Retrieve a list of items filtered by the given criteria."""
    stmt = select(model).filter_by(**{k: v for k, v in filters.items() if v is not None})

    if order_by is not None:
        stmt = stmt.order_by(order_by)
    if skip > 0:
        stmt = stmt.offset(skip)
    if limit > 0:
        stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    items = result.scalars().all()
    logger.debug(f"Retrieved {len(items)} {model.__name__} items")
    return list(items)
