GUESTS_URL = "/api/v1/events/{event_id}/guests"
GUEST_URL = "/api/v1/events/{event_id}/guests/{guest_id}"
GUEST_ATTENDEES_URL = "/api/v1/events/{event_id}/guests/{guest_id}/attendees"
IMPORT_GUESTS_URL = "/api/v1/events/{event_id}/guests/import"
EXPORT_GUESTS_URL = "/api/v1/events/{event_id}/guests/export"
GUEST_REPORT_URL = "/api/v1/events/{event_id}/guests/{guest_id}/report"

HOTEL_GUESTS_URL = "/api/v1/hotel/events/{event_id}/guests"
HOTEL_GUEST_URL = "/api/v1/hotel/events/{event_id}/guests/{guest_id}"
HOTEL_EXPORT_GUESTS_URL = "/api/v1/hotel/events/{event_id}/guests/export"
HOTEL_GUEST_REPORT_URL = "/api/v1/hotel/events/{event_id}/guests/{guest_id}/report"

RSVP_SEARCH_URL = "/api/v1/r/{slug}/guests"
RSVP_DOCUMENTS_URL = "/api/v1/r/{slug}/guests/{guest_id}/documents"
RSVP_SUBMIT_URL = "/api/v1/r/{slug}/guests/{guest_id}/rsvp"
RSVP_DEPARTURE_URL = "/api/v1/r/{slug}/guests/{guest_id}/departure"
