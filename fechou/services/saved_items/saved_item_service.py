# fechou/services/saved_items/saved_item_service.py

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.saved_items.saved_item_models import SavedItem
from fechou.schemas.saved_items.saved_item_schemas import (
    SavedItemCreate,
    SavedItemUpdate,
    SavedItemOut,
    SavedItemListData,
)
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.decimal_utils import to_decimal


async def _get_owned_item(db: AsyncSession, item_id: int, user) -> SavedItem:
    item = await db.get(SavedItem, item_id)
    if not item or item.user_id != user.id:
        raise AppException(404, "Saved item not found", ErrorCode.SAVED_ITEM_NOT_FOUND)
    return item


async def list_saved_items(db: AsyncSession, user) -> SavedItemListData:
    result = await db.execute(
        select(SavedItem)
        .where(SavedItem.user_id == user.id)
        .order_by(func.lower(SavedItem.name), SavedItem.id)
    )
    items = result.scalars().all()
    return SavedItemListData(
        total=len(items),
        items=[SavedItemOut.model_validate(i) for i in items],
    )


async def create_saved_item(db: AsyncSession, payload: SavedItemCreate, user) -> SavedItemOut:
    item = SavedItem(
        user_id=user.id,
        name=payload.name.strip(),
        unit_price=to_decimal(payload.unit_price),
    )
    db.add(item)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.CREATE_SAVED_ITEM,
        actor_email=user.email,
        target_name=item.name,
    )

    await db.commit()
    await db.refresh(item)
    return SavedItemOut.model_validate(item)


async def update_saved_item(
    db: AsyncSession,
    item_id: int,
    payload: SavedItemUpdate,
    user,
) -> SavedItemOut:
    item = await _get_owned_item(db, item_id, user)

    if payload.name is not None:
        item.name = payload.name.strip()
    if payload.unit_price is not None:
        item.unit_price = to_decimal(payload.unit_price)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.UPDATE_SAVED_ITEM,
        actor_email=user.email,
        target_name=item.name,
    )

    await db.commit()
    await db.refresh(item)
    return SavedItemOut.model_validate(item)


async def delete_saved_item(db: AsyncSession, item_id: int, user) -> None:
    item = await _get_owned_item(db, item_id, user)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.DELETE_SAVED_ITEM,
        actor_email=user.email,
        target_name=item.name,
    )

    await db.delete(item)
    await db.commit()
