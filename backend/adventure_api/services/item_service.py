"""
Shop item catalogue: the prices booking lines are charged against.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.core.errors import NotFoundError
from adventure_api.core.logging import get_logger
from adventure_api.models.item import Item
from adventure_api.schemas.item import ItemCreate

logger = get_logger(__name__)


async def create_item(db: AsyncSession, item_data: ItemCreate) -> Item:
    item = Item(**item_data.model_dump())
    db.add(item)
    await db.flush()
    await db.refresh(item)

    logger.info("item_created", item_id=item.id, name=item.name)
    return item


async def get_item(db: AsyncSession, item_id: int) -> Item:
    result = await db.execute(select(Item).where(Item.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise NotFoundError(f"Item with ID {item_id} not found")
    return item


async def list_items(db: AsyncSession, category: Optional[str] = None) -> list[Item]:
    query = select(Item).order_by(Item.name.asc(), Item.id.asc())
    if category:
        query = query.where(Item.category == category)
    result = await db.execute(query)
    return list(result.scalars().all())
