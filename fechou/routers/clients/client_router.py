from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.clients.client_schemas import (
    ClientCreate,
    ClientUpdate,
    ClientOut,
    ClientListData,
)
from fechou.services.clients.client_service import (
    create_client,
    get_client,
    list_clients,
    update_client,
    delete_client,
)
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse
from fechou.utils.logger import get_logger

router = APIRouter(prefix="/clients", tags=["Clients"])
logger = get_logger(__name__)


@router.get("", response_model=APIResponse[ClientListData])
async def list_clients_api(
    search: Optional[str] = Query(None, min_length=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_clients(db, user, search=search, page=page, page_size=page_size)
    return success_response("Clients fetched", data)


@router.get("/search/{term}", response_model=APIResponse[ClientListData])
async def search_clients_api(
    term: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_clients(db, user, search=term)
    return success_response("Clients fetched", data)


@router.post("", response_model=APIResponse[ClientOut], status_code=201)
async def create_client_api(
    payload: ClientCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Create client", extra={"user_id": user.id})
    client = await create_client(db, payload, user)
    return success_response("Client created successfully", client)


@router.get("/{client_id}", response_model=APIResponse[ClientOut])
async def get_client_api(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    client = await get_client(db, client_id, user)
    return success_response("Client fetched", client)


@router.put("/{client_id}", response_model=APIResponse[ClientOut])
async def update_client_api(
    client_id: int,
    payload: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update client", extra={"client_id": client_id})
    client = await update_client(db, client_id, payload, user)
    return success_response("Client updated successfully", client)


@router.delete("/{client_id}", response_model=APIResponse)
async def delete_client_api(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete client", extra={"client_id": client_id})
    await delete_client(db, client_id, user)
    return success_response("Client deleted successfully")
