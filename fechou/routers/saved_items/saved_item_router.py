from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.saved_items.saved_item_schemas import (
    SavedItemCreate,
    SavedItemUpdate,
    SavedItemOut,
    SavedItemListData,
)
from fechou.services.saved_items.saved_item_service import (
    list_saved_items,
    create_saved_item,
    update_saved_item,
    delete_saved_item,
)
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/saved-items", tags=["Saved Items"])


@router.get("", response_model=APIResponse[SavedItemListData])
async def list_saved_items_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_saved_items(db, user)
    return success_response("Saved items fetched", data)


@router.post("", response_model=APIResponse[SavedItemOut], status_code=201)
async def create_saved_item_api(
    payload: SavedItemCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    item = await create_saved_item(db, payload, user)
    return success_response("Saved item created successfully", item)


@router.put("/{item_id}", response_model=APIResponse[SavedItemOut])
async def update_saved_item_api(
    item_id: int,
    payload: SavedItemUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    item = await update_saved_item(db, item_id, payload, user)
    return success_response("Saved item updated successfully", item)


@router.delete("/{item_id}", response_model=APIResponse)
async def delete_saved_item_api(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    await delete_saved_item(db, item_id, user)
    return success_response("Saved item deleted successfully")
