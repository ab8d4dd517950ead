from datetime import date as date_type, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import BookingConflict
from .models import APPROVED


def overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """
    Half-open interval test: [a_start, a_end) and [b_start, b_end) intersect.
    Bookings that only touch at a boundary do not overlap.
    """
    return a_start < b_end and b_start < a_end


async def approved_on(db: AsyncSession, request_model, resource_id: int, day: date_type, exclude_request_id: int | None = None):
    stmt = select(request_model).where(
        request_model.resource_id == resource_id,
        request_model.date == day,
        request_model.status == APPROVED,
    )
    if exclude_request_id is not None:
        stmt = stmt.where(request_model.id != exclude_request_id)
    res = await db.execute(stmt)
    return res.scalars().all()


async def has_conflict(
    db: AsyncSession,
    request_model,
    resource_id: int,
    day: date_type,
    start: time,
    end: time,
    exclude_request_id: int | None = None,
) -> bool:
    """
    True if an approved request for the same resource and date overlaps [start, end).
    Caller guarantees the resource exists and start < end.
    """
    existing = await approved_on(db, request_model, resource_id, day, exclude_request_id)
    for other in existing:
        if overlaps(start, end, other.start_time, other.end_time):
            return True
    return False


async def check_conflict_on_create(db: AsyncSession, kind, resource_id: int, day: date_type, start: time, end: time):
    if await has_conflict(db, kind.request_model, resource_id, day, start, end):
        raise BookingConflict(f"{kind.label} is already booked for this time slot")


async def check_conflict_on_approve(db: AsyncSession, kind, request):
    if await has_conflict(
        db,
        kind.request_model,
        request.resource_id,
        request.date,
        request.start_time,
        request.end_time,
        exclude_request_id=request.id,
    ):
        raise BookingConflict(f"Conflict detected: {kind.label} is already booked for this time")
