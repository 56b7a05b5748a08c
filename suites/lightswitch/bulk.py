from backend import get_backend

backend = get_backend()

bulk_status_test = (
    backend.get("Lightswitch bulk status test", "/lightswitch/api/service/bulk/status", bearer_auth=True)
    .expects.to_have_status(200)
    .expects.to_have_data(lambda data: isinstance(data, list) and len(data) > 0)
    .expects.to_have_property("0.serviceInstanceId", "fortnite")
    .expects.to_have_property("0.status", "UP")
    .expects.to_have_property("0.banned", False)
)
