"""Calendar timeline"""

from backend import get_backend

backend = get_backend()

timeline_test = (
    backend.get("Timeline test", "/fortnite/api/calendar/v1/timeline", bearer_auth=True)
    .expects.to_have_status(200)
    .expects.to_have_property("channels")
    .expects.to_have_property("channels.client-events")
    .expects.to_have_property("channels.client-matchmaking")
    .expects.to_have_property("eventsTimeOffsetHrs")
    .expects.to_have_property("cacheIntervalMins")
    .expects.to_have_property("currentTime")
)


def _has_active_events(data):
    active_events = data["channels"]["client-events"]["states"][0]["activeEvents"]
    return isinstance(active_events, list) and len(active_events) > 0


active_events_test = (
    backend.get("Timeline active events test", "/fortnite/api/calendar/v1/timeline", bearer_auth=True)
    .expects.to_have_status(200)
    .expects.to_have_data(_has_active_events)
)
