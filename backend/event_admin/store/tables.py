"""Store table names."""

EVENTS = "events"
MEETING_CATEGORIES = "commissions"
EVENT_CATEGORIES = "event_categories"
ORGANIZING_MEETING_CATEGORIES = "event_organizing_commissions"
ORGANIZING_CATEGORIES = "event_organizing_categories"
INVITEES = "event_invitees"
ATTENDEES = "event_attendees"
PARTICIPANT_MEETING_CATEGORIES = "participant_commissions"
MEETINGS = "meetings"
PARTICIPANTS = "participants"
COMPANIES = "directorio_empresas"
