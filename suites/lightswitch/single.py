"""Lightswitch status for a single service"""

from backend import get_backend

backend = get_backend()

status_test = (
    backend.get("Lightswitch single test", "/lightswitch/api/service/Fortnite/status", bearer_auth=True)
    .expects.to_have_status(200)
    .expects.to_have_property("serviceInstanceId", "fortnite")
    .expects.to_have_property("status", "UP")
    .expects.to_have_property("message")
    .expects.to_have_property("allowedActions")
    .expects.to_have_property("banned", False)
)

# No bearer token and no Authorization header at all
missing_auth_test = (
    backend.get(
        "Lightswitch test with missing auth",
        "/lightswitch/api/service/Fortnite/status",
        bearer_auth=False,
        headers={},
    )
    .expects.to_have_status(401)
)
