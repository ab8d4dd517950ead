import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Stripped(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# ---- Rooms ----

class CreateRoom(_Stripped):
    room_name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1)
    location: str = Field(min_length=1, max_length=100)


class RoomResponse(BaseModel):
    id: int
    room_name: str
    capacity: int
    location: str


# ---- Board games ----

class CreateGame(_Stripped):
    game_type: str = Field(min_length=1, max_length=50)
    is_available: bool = True


class UpdateGame(BaseModel):
    is_available: bool


class GameResponse(BaseModel):
    id: int
    game_type: str
    is_available: bool


# ---- Booking requests ----

class _Slot(BaseModel):
    date: dt.date
    start_time: dt.time
    end_time: dt.time

    @field_validator("start_time", "end_time")
    @classmethod
    def wall_clock_time(cls, v: dt.time) -> dt.time:
        # slots are local HH:MM; an offset cannot be compared with stored times
        if v.tzinfo is not None:
            raise ValueError("time must not carry a timezone offset")
        return v


class CreateRoomRequest(_Slot):
    room_id: int


class CreateGameRequest(_Slot):
    game_id: int


class UpdateRequestStatus(_Stripped):
    status: str


class BookingRequestResponse(BaseModel):
    id: int
    member_id: int
    staff_id: Optional[int] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class RoomRequestResponse(BookingRequestResponse):
    room_id: int
    room_name: Optional[str] = None
    location: Optional[str] = None


class GameRequestResponse(BookingRequestResponse):
    game_id: int
    game_type: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
    events_enabled: bool
    rate_limit_enabled: bool = False
