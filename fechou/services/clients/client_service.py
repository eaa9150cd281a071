# fechou/services/clients/client_service.py

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from fechou.models.clients.client_models import Client
from fechou.models.quotes.quote_models import Quote
from fechou.schemas.clients.client_schemas import (
    ClientCreate,
    ClientUpdate,
    ClientOut,
    ClientListData,
)
from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


def map_client(client: Client, quote_count: int = 0) -> ClientOut:
    return ClientOut(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        cpf=client.cpf,
        address=client.address,
        number=client.number,
        complement=client.complement,
        city=client.city,
        state=client.state,
        zip_code=client.zip_code,
        notes=client.notes,
        quote_count=quote_count,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


def _quote_count_subquery():
    return (
        select(Quote.client_id, func.count(Quote.id).label("quote_count"))
        .where(Quote.is_deleted.is_(False))
        .group_by(Quote.client_id)
        .subquery()
    )


async def get_owned_client(db: AsyncSession, client_id: int, user) -> Client:
    client = await db.get(Client, client_id)
    if not client or client.is_deleted or client.user_id != user.id:
        raise AppException(
            404,
            "Client not found",
            ErrorCode.CLIENT_NOT_FOUND,
        )
    return client


async def _quote_count(db: AsyncSession, client_id: int) -> int:
    return await db.scalar(
        select(func.count(Quote.id)).where(
            Quote.client_id == client_id,
            Quote.is_deleted.is_(False),
        )
    ) or 0


# =========================
# CREATE
# =========================
async def create_client(db: AsyncSession, payload: ClientCreate, user) -> ClientOut:
    client = Client(user_id=user.id, **payload.model_dump())
    db.add(client)
    await db.flush()

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.CREATE_CLIENT,
        actor_email=user.email,
        target_name=client.name,
    )

    await db.commit()
    await db.refresh(client)

    logger.info("Client created", extra={"client_id": client.id, "user_id": user.id})
    return map_client(client)


# =========================
# GET
# =========================
async def get_client(db: AsyncSession, client_id: int, user) -> ClientOut:
    client = await get_owned_client(db, client_id, user)
    return map_client(client, await _quote_count(db, client.id))


# =========================
# LIST / SEARCH
# =========================
async def list_clients(
    db: AsyncSession,
    user,
    *,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 50,
) -> ClientListData:
    counts = _quote_count_subquery()

    base = (
        select(Client, func.coalesce(counts.c.quote_count, 0).label("quote_count"))
        .outerjoin(counts, counts.c.client_id == Client.id)
        .where(
            Client.user_id == user.id,
            Client.is_deleted.is_(False),
        )
    )

    if search:
        term = f"%{search.strip()}%"
        base = base.where(
            or_(
                Client.name.ilike(term),
                Client.email.ilike(term),
                Client.phone.ilike(term),
            )
        )

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    )

    result = await db.execute(
        base.order_by(Client.created_at.desc(), Client.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return ClientListData(
        total=total or 0,
        items=[map_client(client, count) for client, count in result.all()],
    )


# =========================
# UPDATE
# =========================
async def update_client(
    db: AsyncSession,
    client_id: int,
    payload: ClientUpdate,
    user,
) -> ClientOut:
    client = await get_owned_client(db, client_id, user)

    changes: list[str] = []
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in ("name", "phone") and value is None:
            continue
        if getattr(client, field) != value:
            setattr(client, field, value)
            changes.append(field)

    if changes:
        await emit_activity(
            db=db,
            user_id=user.id,
            username=user.email,
            code=ActivityCode.UPDATE_CLIENT,
            actor_email=user.email,
            target_name=client.name,
            changes=", ".join(changes),
        )
        await db.commit()
        await db.refresh(client)

    return map_client(client, await _quote_count(db, client.id))


# =========================
# DELETE (SOFT)
# =========================
async def delete_client(db: AsyncSession, client_id: int, user) -> None:
    client = await get_owned_client(db, client_id, user)
    client.is_deleted = True

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.DELETE_CLIENT,
        actor_email=user.email,
        target_name=client.name,
    )

    await db.commit()
    logger.info("Client deleted", extra={"client_id": client_id, "user_id": user.id})
