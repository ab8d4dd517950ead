"""
Booking request workflow shared by rooms and board games.

Creation and approval both claim a slot, so both run the conflict check while
holding the slot lock and inside the transaction that writes the row. Rejection
and cancellation only ever free a slot and skip the check.
"""

import logging
from dataclasses import dataclass
from datetime import date as date_type, datetime, time, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .conflicts import check_conflict_on_approve, check_conflict_on_create
from .errors import (
    BookingConflict,
    InvalidInterval,
    InvalidStatus,
    InvalidTransition,
    NotRequestOwner,
    RequestNotFound,
    ResourceNotFound,
    ResourceUnavailable,
)
from .locks import slot_locks
from .models import (
    APPROVED,
    CANCELLED,
    PENDING,
    REJECTED,
    BoardGame,
    GameRequest,
    Room,
    RoomRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    name: str
    label: str
    resource_model: type
    request_model: type
    event_prefix: str


ROOMS = ResourceKind("room", "Room", Room, RoomRequest, "room_request")
GAMES = ResourceKind("game", "Board game", BoardGame, GameRequest, "game_request")

# target status -> statuses it may be reached from
TRANSITIONS = {
    APPROVED: (PENDING, APPROVED),
    REJECTED: (PENDING,),
    CANCELLED: (PENDING, APPROVED),
}

ADMIN_STATUSES = (APPROVED, REJECTED, CANCELLED)


def _now():
    return datetime.now(timezone.utc)


def slot_key(kind: ResourceKind, resource_id: int, day: date_type) -> tuple:
    return (kind.name, resource_id, day)


def validate_interval(start: time, end: time):
    if end <= start:
        raise InvalidInterval("end_time must be after start_time")


def ensure_transition(current: str, target: str):
    if current not in TRANSITIONS.get(target, ()):
        raise InvalidTransition(f"Cannot change request from {current} to {target}")


async def _lock_resource(db: AsyncSession, kind: ResourceKind, resource_id: int):
    res = await db.execute(
        select(kind.resource_model)
        .where(kind.resource_model.id == resource_id)
        .with_for_update()
    )
    resource = res.scalar_one_or_none()
    if not resource:
        raise ResourceNotFound(f"{kind.label} not found")
    return resource


async def _get_request(db: AsyncSession, kind: ResourceKind, request_id: int, for_update: bool = False):
    stmt = select(kind.request_model).where(kind.request_model.id == request_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    res = await db.execute(stmt)
    req = res.scalar_one_or_none()
    if not req:
        raise RequestNotFound(f"{kind.label} request not found")
    return req


async def create_request(
    db: AsyncSession,
    kind: ResourceKind,
    member_id: int,
    resource_id: int,
    day: date_type,
    start: time,
    end: time,
):
    validate_interval(start, end)

    async with slot_locks.hold(slot_key(kind, resource_id, day)):
        try:
            resource = await _lock_resource(db, kind, resource_id)
            if getattr(resource, "is_available", True) is False:
                raise ResourceUnavailable(f"{kind.label} is not available")

            await check_conflict_on_create(db, kind, resource_id, day, start, end)

            now = _now()
            req = kind.request_model(
                member_id=member_id,
                resource_id=resource_id,
                date=day,
                start_time=start,
                end_time=end,
                status=PENDING,
                staff_id=None,
                created_at=now,
                updated_at=now,
            )
            db.add(req)
            await db.commit()
        except BookingConflict:
            await db.rollback()
            logger.warning(
                "%s %s already booked on %s %s-%s; request by %s refused",
                kind.label, resource_id, day, start, end, member_id,
            )
            raise
        except Exception:
            await db.rollback()
            raise

    logger.info("%s request %s created by %s", kind.label, req.id, member_id)
    return req


async def approve_request(db: AsyncSession, kind: ResourceKind, request_id: int, staff_id: int):
    req = await _get_request(db, kind, request_id)
    resource_id, day = req.resource_id, req.date
    # release the snapshot read; everything below happens in one transaction
    await db.rollback()

    async with slot_locks.hold(slot_key(kind, resource_id, day)):
        try:
            resource = await _lock_resource(db, kind, resource_id)
            req = await _get_request(db, kind, request_id, for_update=True)
            ensure_transition(req.status, APPROVED)
            if getattr(resource, "is_available", True) is False:
                raise ResourceUnavailable(f"{kind.label} is not available")

            await check_conflict_on_approve(db, kind, req)

            req.status = APPROVED
            req.staff_id = staff_id
            req.updated_at = _now()
            await db.commit()
        except BookingConflict:
            await db.rollback()
            logger.warning("%s request %s not approved: slot conflict", kind.label, request_id)
            raise
        except Exception:
            await db.rollback()
            raise

    logger.info("%s request %s approved by %s", kind.label, req.id, staff_id)
    return req


async def _vacate(db: AsyncSession, kind: ResourceKind, request_id: int, target: str, actor_id: int, is_admin: bool = True):
    try:
        req = await _get_request(db, kind, request_id, for_update=True)
        if not is_admin and req.member_id != actor_id:
            raise NotRequestOwner("Not authorized to change this request")
        ensure_transition(req.status, target)

        req.status = target
        if is_admin:
            req.staff_id = actor_id
        req.updated_at = _now()
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("%s request %s %s by %s", kind.label, req.id, target, actor_id)
    return req


async def reject_request(db: AsyncSession, kind: ResourceKind, request_id: int, staff_id: int):
    return await _vacate(db, kind, request_id, REJECTED, staff_id)


async def cancel_request(db: AsyncSession, kind: ResourceKind, request_id: int, actor_id: int, is_admin: bool = False):
    return await _vacate(db, kind, request_id, CANCELLED, actor_id, is_admin=is_admin)


async def update_request_status(db: AsyncSession, kind: ResourceKind, request_id: int, status: str, staff_id: int):
    if status == APPROVED:
        return await approve_request(db, kind, request_id, staff_id)
    if status == REJECTED:
        return await reject_request(db, kind, request_id, staff_id)
    if status == CANCELLED:
        return await cancel_request(db, kind, request_id, staff_id, is_admin=True)
    raise InvalidStatus("Invalid status")


async def list_member_requests(db: AsyncSession, kind: ResourceKind, member_id: int):
    """A member's requests joined with their resource, newest day first."""
    model = kind.request_model
    res = await db.execute(
        select(model, kind.resource_model)
        .join(kind.resource_model, kind.resource_model.id == model.resource_id)
        .where(model.member_id == member_id)
        .order_by(model.date.desc(), model.start_time.asc(), model.id.asc())
    )
    return res.all()


async def list_requests(db: AsyncSession, kind: ResourceKind, status: str | None = None):
    model = kind.request_model
    stmt = select(model, kind.resource_model).join(
        kind.resource_model, kind.resource_model.id == model.resource_id
    )
    if status and status != "all":
        stmt = stmt.where(model.status == status)
    stmt = stmt.order_by(model.date.desc(), model.start_time.asc(), model.id.asc())
    res = await db.execute(stmt)
    return res.all()
