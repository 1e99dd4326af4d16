EVENTS_URL = "/api/v1/events"
EVENT_URL = "/api/v1/events/{event_id}"
EVENT_HOTEL_URL = "/api/v1/events/{event_id}/hotel"
DELETE_EVENT_URL = "/api/v1/events/{event_id}/delete"

HOTEL_EVENTS_URL = "/api/v1/hotel/events"
HOTEL_EVENT_URL = "/api/v1/hotel/events/{event_id}"

PUBLIC_EVENT_URL = "/api/v1/r/{slug}"
