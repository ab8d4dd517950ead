from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
    func,
)
from sqlalchemy.orm import synonym

from .db import Base

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
CANCELLED = "cancelled"

REQUEST_STATUSES = (PENDING, APPROVED, REJECTED, CANCELLED)


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("capacity >= 1", name="ck_rooms_capacity"),)

    id = Column(Integer, primary_key=True)
    room_name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    location = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BoardGame(Base):
    __tablename__ = "board_games"

    id = Column(Integer, primary_key=True)
    game_type = Column(String(50), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RequestColumns:
    """Columns shared by every booking request table."""

    id = Column(Integer, primary_key=True)
    member_id = Column(Integer, nullable=False, index=True)
    staff_id = Column(Integer, nullable=True)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(String(20), nullable=False, default=PENDING, index=True)  # pending/approved/rejected/cancelled

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RoomRequest(RequestColumns, Base):
    __tablename__ = "room_requests"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_room_requests_interval"),
    )

    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    resource_id = synonym("room_id")


class GameRequest(RequestColumns, Base):
    __tablename__ = "game_requests"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_game_requests_interval"),
    )

    game_id = Column(Integer, ForeignKey("board_games.id", ondelete="CASCADE"), nullable=False, index=True)
    resource_id = synonym("game_id")
