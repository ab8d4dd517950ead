import json
from datetime import date, time

from booking_service.bookings import GAMES, ROOMS
from booking_service.events import request_event, to_json
from booking_service.models import APPROVED, PENDING, GameRequest, RoomRequest
from booking_service.rabbitmq import RabbitPublisher

from conftest import run


def test_room_request_event_payload():
    req = RoomRequest(
        id=7,
        member_id=2,
        staff_id=1,
        room_id=3,
        date=date(2024, 6, 1),
        start_time=time(10, 0),
        end_time=time(11, 0),
        status=APPROVED,
    )
    event = json.loads(to_json(request_event(ROOMS, "approved", req)))

    assert event["event_type"] == "room_request.approved"
    assert event["event_id"]
    assert event["occurred_at"]
    assert event["data"] == {
        "request_id": 7,
        "resource_id": 3,
        "member_id": 2,
        "staff_id": 1,
        "date": "2024-06-01",
        "start_time": "10:00",
        "end_time": "11:00",
        "status": "approved",
    }


def test_game_request_event_uses_game_prefix():
    req = GameRequest(
        id=1,
        member_id=2,
        game_id=4,
        date=date(2024, 6, 1),
        start_time=time(15, 30),
        end_time=time(16, 0),
        status=PENDING,
    )
    event = request_event(GAMES, "created", req)
    assert event["event_type"] == "game_request.created"
    assert event["data"]["resource_id"] == 4
    assert event["data"]["staff_id"] is None


def test_publisher_without_url_is_a_no_op():
    publisher = RabbitPublisher(url=None)
    assert publisher.enabled is False
    run(publisher.connect())
    run(publisher.publish("room_request.created", "{}"))
    run(publisher.close())
