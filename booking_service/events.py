import json
import uuid
from datetime import datetime, timezone


def build_event(event_type: str, data: dict) -> dict:
    return {
        "event_id": str(uuid.uuid4()),
        "event_type": event_type,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def request_event(kind, action: str, req) -> dict:
    """e.g. room_request.approved with the request's slot and actors."""
    return build_event(
        f"{kind.event_prefix}.{action}",
        {
            "request_id": req.id,
            "resource_id": req.resource_id,
            "member_id": req.member_id,
            "staff_id": req.staff_id,
            "date": req.date.isoformat(),
            "start_time": req.start_time.strftime("%H:%M"),
            "end_time": req.end_time.strftime("%H:%M"),
            "status": req.status,
        },
    )


def to_json(event: dict) -> str:
    return json.dumps(event, separators=(",", ":"), ensure_ascii=False)
