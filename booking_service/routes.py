from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .bookings import (
    GAMES,
    ROOMS,
    cancel_request,
    create_request,
    list_member_requests,
    list_requests,
    update_request_status,
)
from .db import get_db
from .errors import (
    BookingConflict,
    BookingError,
    InvalidInterval,
    InvalidStatus,
    InvalidTransition,
    NotRequestOwner,
    RequestNotFound,
    ResourceNotFound,
    ResourceUnavailable,
)
from .events import request_event, to_json
from .models import BoardGame, Room
from .rabbitmq import publisher
from .rbac import get_admin_user, is_admin
from .schemas import (
    CreateGame,
    CreateGameRequest,
    CreateRoom,
    CreateRoomRequest,
    GameRequestResponse,
    GameResponse,
    MessageResponse,
    RoomRequestResponse,
    RoomResponse,
    UpdateGame,
    UpdateRequestStatus,
)
from .security import get_current_user

router = APIRouter()

ERROR_STATUS = {
    ResourceNotFound: status.HTTP_404_NOT_FOUND,
    RequestNotFound: status.HTTP_404_NOT_FOUND,
    InvalidInterval: status.HTTP_400_BAD_REQUEST,
    InvalidStatus: status.HTTP_400_BAD_REQUEST,
    ResourceUnavailable: status.HTTP_400_BAD_REQUEST,
    BookingConflict: status.HTTP_409_CONFLICT,
    InvalidTransition: status.HTTP_409_CONFLICT,
    NotRequestOwner: status.HTTP_403_FORBIDDEN,
}


def http_error(e: BookingError) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS.get(type(e), status.HTTP_400_BAD_REQUEST),
        detail=str(e),
    )


async def publish_request_event(kind, action: str, req):
    event = request_event(kind, action, req)
    await publisher.publish(event["event_type"], to_json(event))


def room_response(room: Room) -> RoomResponse:
    return RoomResponse(
        id=room.id,
        room_name=room.room_name,
        capacity=room.capacity,
        location=room.location,
    )


def game_response(game: BoardGame) -> GameResponse:
    return GameResponse(id=game.id, game_type=game.game_type, is_available=game.is_available)


def room_request_response(req, room: Room | None = None) -> RoomRequestResponse:
    return RoomRequestResponse(
        id=req.id,
        room_id=req.room_id,
        member_id=req.member_id,
        staff_id=req.staff_id,
        date=req.date,
        start_time=req.start_time,
        end_time=req.end_time,
        status=req.status,
        created_at=req.created_at,
        updated_at=req.updated_at,
        room_name=room.room_name if room else None,
        location=room.location if room else None,
    )


def game_request_response(req, game: BoardGame | None = None) -> GameRequestResponse:
    return GameRequestResponse(
        id=req.id,
        game_id=req.game_id,
        member_id=req.member_id,
        staff_id=req.staff_id,
        date=req.date,
        start_time=req.start_time,
        end_time=req.end_time,
        status=req.status,
        created_at=req.created_at,
        updated_at=req.updated_at,
        game_type=game.game_type if game else None,
    )


# ================= ROOMS =================

@router.get("/rooms", response_model=list[RoomResponse], tags=["Rooms"])
async def list_rooms(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    res = await db.execute(select(Room).order_by(Room.room_name))
    return [room_response(r) for r in res.scalars().all()]


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED, tags=["Rooms"])
async def add_room(data: CreateRoom, db: AsyncSession = Depends(get_db), admin=Depends(get_admin_user)):
    room = Room(room_name=data.room_name, capacity=data.capacity, location=data.location)
    db.add(room)
    await db.commit()
    return room_response(room)


@router.post("/rooms/request", response_model=RoomRequestResponse, status_code=status.HTTP_201_CREATED, tags=["Rooms"])
async def request_room(data: CreateRoomRequest, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    try:
        req = await create_request(
            db, ROOMS, user["id"], data.room_id, data.date, data.start_time, data.end_time
        )
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(ROOMS, "created", req)
    return room_request_response(req)


@router.get("/rooms/my-requests", response_model=list[RoomRequestResponse], tags=["Rooms"])
async def my_room_requests(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    rows = await list_member_requests(db, ROOMS, user["id"])
    return [room_request_response(req, room) for req, room in rows]


@router.get("/rooms/requests", response_model=list[RoomRequestResponse], tags=["Rooms"])
async def all_room_requests(
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    admin=Depends(get_admin_user),
):
    rows = await list_requests(db, ROOMS, status_filter)
    return [room_request_response(req, room) for req, room in rows]


@router.put("/rooms/requests/{request_id}", response_model=RoomRequestResponse, tags=["Rooms"])
async def process_room_request(
    request_id: int,
    data: UpdateRequestStatus,
    db: AsyncSession = Depends(get_db),
    admin=Depends(get_admin_user),
):
    try:
        req = await update_request_status(db, ROOMS, request_id, data.status, admin["id"])
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(ROOMS, req.status, req)
    return room_request_response(req)


@router.post("/rooms/requests/{request_id}/cancel", response_model=RoomRequestResponse, tags=["Rooms"])
async def cancel_room_request(request_id: int, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    try:
        req = await cancel_request(db, ROOMS, request_id, user["id"], is_admin=is_admin(user))
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(ROOMS, req.status, req)
    return room_request_response(req)


# ================= BOARD GAMES =================

@router.get("/games", response_model=list[GameResponse], tags=["Board games"])
async def list_games(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    res = await db.execute(select(BoardGame).order_by(BoardGame.id))
    return [game_response(g) for g in res.scalars().all()]


@router.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED, tags=["Board games"])
async def add_game(data: CreateGame, db: AsyncSession = Depends(get_db), admin=Depends(get_admin_user)):
    game = BoardGame(game_type=data.game_type, is_available=data.is_available)
    db.add(game)
    await db.commit()
    return game_response(game)


async def _get_game(db: AsyncSession, game_id: int) -> BoardGame:
    res = await db.execute(select(BoardGame).where(BoardGame.id == game_id))
    game = res.scalar_one_or_none()
    if not game:
        raise HTTPException(status_code=404, detail="Board game not found")
    return game


@router.patch("/games/{game_id}", response_model=GameResponse, tags=["Board games"])
async def set_game_availability(
    game_id: int,
    data: UpdateGame,
    db: AsyncSession = Depends(get_db),
    admin=Depends(get_admin_user),
):
    game = await _get_game(db, game_id)
    game.is_available = data.is_available
    await db.commit()
    return game_response(game)


@router.delete("/games/{game_id}", response_model=MessageResponse, tags=["Board games"])
async def delete_game(game_id: int, db: AsyncSession = Depends(get_db), admin=Depends(get_admin_user)):
    game = await _get_game(db, game_id)
    await db.delete(game)
    await db.commit()
    return MessageResponse(message="Board game deleted successfully")


@router.post("/games/request", response_model=GameRequestResponse, status_code=status.HTTP_201_CREATED, tags=["Board games"])
async def request_game(data: CreateGameRequest, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    try:
        req = await create_request(
            db, GAMES, user["id"], data.game_id, data.date, data.start_time, data.end_time
        )
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(GAMES, "created", req)
    return game_request_response(req)


@router.get("/games/my-requests", response_model=list[GameRequestResponse], tags=["Board games"])
async def my_game_requests(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    rows = await list_member_requests(db, GAMES, user["id"])
    return [game_request_response(req, game) for req, game in rows]


@router.get("/games/requests", response_model=list[GameRequestResponse], tags=["Board games"])
async def all_game_requests(
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    admin=Depends(get_admin_user),
):
    rows = await list_requests(db, GAMES, status_filter)
    return [game_request_response(req, game) for req, game in rows]


@router.put("/games/requests/{request_id}", response_model=GameRequestResponse, tags=["Board games"])
async def process_game_request(
    request_id: int,
    data: UpdateRequestStatus,
    db: AsyncSession = Depends(get_db),
    admin=Depends(get_admin_user),
):
    try:
        req = await update_request_status(db, GAMES, request_id, data.status, admin["id"])
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(GAMES, req.status, req)
    return game_request_response(req)


@router.post("/games/requests/{request_id}/cancel", response_model=GameRequestResponse, tags=["Board games"])
async def cancel_game_request(request_id: int, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    try:
        req = await cancel_request(db, GAMES, request_id, user["id"], is_admin=is_admin(user))
    except BookingError as e:
        raise http_error(e)

    await publish_request_event(GAMES, req.status, req)
    return game_request_response(req)
