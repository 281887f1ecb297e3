"""
Shop item catalogue endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.core.security import require_roles
from adventure_api.db.session import get_db
from adventure_api.schemas.envelope import ApiResponse, respond
from adventure_api.schemas.item import ItemCreate, ItemResponse
from adventure_api.services.item_service import create_item, get_item, list_items

router = APIRouter(prefix="/items", tags=["Items"])


@router.get("", response_model=ApiResponse[list[ItemResponse]])
async def list_items_endpoint(
    category: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    items = await list_items(db, category)
    return respond([ItemResponse.model_validate(i) for i in items], "Items retrieved successfully")


@router.get("/{item_id}", response_model=ApiResponse[ItemResponse])
async def get_item_endpoint(item_id: int, db: AsyncSession = Depends(get_db)):
    item = await get_item(db, item_id)
    return respond(ItemResponse.model_validate(item), "Item retrieved successfully")


@router.post(
    "",
    response_model=ApiResponse[ItemResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles("admin", "superadmin"))],
)
async def create_item_endpoint(item_data: ItemCreate, db: AsyncSession = Depends(get_db)):
    """Add an item to the catalogue. Admins only."""
    item = await create_item(db, item_data)
    return respond(ItemResponse.model_validate(item), "Item created successfully", status.HTTP_201_CREATED)
