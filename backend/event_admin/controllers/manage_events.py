"""Event management screen: listing, the four-step creation wizard, view/edit and deletion.

The controller holds the screen state and delegates every write to the event
orchestrators. Failures of user actions become error
notifications. The derived-view readers let ``StoreError`` propagate.
"""
import enum
import logging
from datetime import date
from typing import Callable, Optional, Sequence

from fastapi import HTTPException

from event_admin.cache import QueryCache
from event_admin.controllers.notifications import Notifier
from event_admin.functions import FunctionsClient
from event_admin.models.event import OrganizerType
from event_admin.period import FiscalPeriod, today
from event_admin.permissions import Capabilities
from event_admin.schemas.directory import Company
from event_admin.schemas.event import Event, EventDraft
from event_admin.schemas.schedule import ScheduleEntry, ScheduleInput
from event_admin.schemas.views import Affordances, EventCard, EventsView, SidebarCount
from event_admin.services import event_service, event_views
from event_admin.services.event_views import SelectionMode, SelectorParticipant
from event_admin.services.links import unique
from event_admin.services.queries import Queries
from event_admin.services.scheduling import ScheduleValidationError, expand_schedule, merge_schedules
from event_admin.storage import ObjectStorage, upload_flyer
from event_admin.store.base import Store, StoreError

logger = logging.getLogger(__name__)

FIRST_STEP = 1
LAST_STEP = 4
EVENT_SUBJECT = "Event"


class ModalMode(str, enum.Enum):
    closed = "closed"
    create = "create"
    edit = "edit"
    view = "view"


def error_message(exc: Exception) -> str:
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    return str(exc)


class ManageEventsController:
    def __init__(
        self,
        store: Store,
        cache: QueryCache,
        capabilities: Optional[Capabilities] = None,
        storage: Optional[ObjectStorage] = None,
        functions: Optional[FunctionsClient] = None,
        notifier: Optional[Notifier] = None,
        actor_id: Optional[str] = None,
        clock: Callable[[], date] = today,
    ):
        self.store = store
        self.cache = cache
        self.queries = Queries(store, cache)
        self.capabilities = capabilities or Capabilities()
        self.storage = storage
        self.functions = functions
        self.notifier = notifier or Notifier()
        self.actor_id = actor_id
        self._clock = clock

        # Listing
        self.period = FiscalPeriod.current(clock())
        self.search = ""
        self.selected_organizer_type: Optional[OrganizerType] = None
        self.selected_organizer_id: Optional[str] = None

        # Modal
        self.mode = ModalMode.closed
        self.step = FIRST_STEP
        self.selected_event: Optional[Event] = None
        self.pending_delete: Optional[Event] = None
        self._reset_form()

    def _reset_form(self) -> None:
        self.draft = EventDraft(date=self._clock(), organizer_type=OrganizerType.meeting_category)
        self.schedules: list[ScheduleEntry] = []
        self.organizer_ids: list[str] = []
        self.invitee_ids: list[str] = []
        self.attendee_in_person_ids: list[str] = []
        self.attendee_online_ids: list[str] = []
        self.flyer: Optional[tuple[str, bytes]] = None
        self.flyer_removed = False
        self.form_errors: dict[str, str] = {}
        self.is_company_event = False
        self.company_search = ""
        self.selected_company_id: Optional[str] = None

    # ── Listing filters ───────────────────────────────────────────

    def set_period(self, start_year: int) -> None:
        self.period = FiscalPeriod(start_year)

    def set_search(self, term: str) -> None:
        self.search = term

    def select_organizer_filter(self, organizer_type: Optional[OrganizerType], organizer_id: Optional[str]) -> None:
        self.selected_organizer_type = organizer_type
        self.selected_organizer_id = organizer_id

    # ── Modal lifecycle ───────────────────────────────────────────

    def open_create(self) -> None:
        self._reset_form()
        self.selected_event = None
        self.step = FIRST_STEP
        self.mode = ModalMode.create

    def open_view(self, event: Event) -> None:
        """Open an event read-only with its current organizer, invitee and attendee selections."""
        self._reset_form()
        try:
            links = self.queries.event_links(event)
        except StoreError as e:
            self.notifier.error(error_message(e))
            return
        self.selected_event = event
        self.draft = EventDraft.model_validate(event.model_dump())
        self.organizer_ids = list(links.organizer_ids)
        self.invitee_ids = list(links.invitee_ids)
        self.attendee_in_person_ids = list(links.attendee_in_person_ids)
        self.attendee_online_ids = list(links.attendee_online_ids)
        self.mode = ModalMode.view

    def switch_to_edit(self) -> None:
        if self.mode == ModalMode.view and self.selected_event is not None:
            self.mode = ModalMode.edit

    def close(self) -> None:
        self.mode = ModalMode.closed
        self.selected_event = None
        self.step = FIRST_STEP
        self._reset_form()

    def update_draft(self, **fields) -> None:
        self.draft = self.draft.model_copy(update=fields)

    # ── Wizard ────────────────────────────────────────────────────

    def validate_step(self, step: int) -> bool:
        errors: dict[str, str] = {}
        if step == 1:
            if not self.draft.subject.strip():
                errors["subject"] = "Subject is required"
            if not self.organizer_ids:
                errors["organizers"] = "Select at least one organizer"
        elif step == 2:
            if not self.schedules:
                errors["schedules"] = "Add at least one date"
        self.form_errors = errors
        return not errors

    def next_step(self) -> bool:
        if not self.validate_step(self.step):
            return False
        self.step = min(self.step + 1, LAST_STEP)
        return True

    def prev_step(self) -> None:
        self.form_errors = {}
        self.step = max(self.step - 1, FIRST_STEP)

    def next_step_or_create(self) -> bool:
        """Advance the wizard; on the last step, create the events."""
        if self.step < LAST_STEP:
            return self.next_step()
        return self.create()

    def add_schedule(self, schedule_input: ScheduleInput) -> bool:
        try:
            entries = expand_schedule(schedule_input)
        except ScheduleValidationError as e:
            self.notifier.error(str(e))
            return False
        self.schedules = merge_schedules(self.schedules, entries)
        self.form_errors.pop("schedules", None)
        return True

    def remove_schedule(self, index: int) -> None:
        if 0 <= index < len(self.schedules):
            del self.schedules[index]

    # ── Flyer ─────────────────────────────────────────────────────

    def set_flyer(self, filename: str, data: bytes) -> None:
        self.flyer = (filename, data)
        self.flyer_removed = False

    def remove_flyer(self) -> None:
        self.flyer = None
        self.flyer_removed = True

    def _upload_flyer(self) -> Optional[str]:
        if self.flyer is None or self.storage is None:
            return None
        filename, data = self.flyer
        return upload_flyer(self.storage, filename, data)

    # ── Company event ─────────────────────────────────────────────

    def set_company_event(self, enabled: bool) -> None:
        self.is_company_event = enabled
        if not enabled:
            self.company_search = ""
            self.selected_company_id = None

    def search_companies(self, term: str) -> list[Company]:
        """Record the typed company name and return up to five directory matches."""
        self.company_search = term
        self.selected_company_id = None
        try:
            return event_views.company_suggestions(self.queries.companies(), term)
        except StoreError as e:
            self.notifier.error(error_message(e))
            return []

    def select_company(self, company_id: str) -> bool:
        try:
            company = next((c for c in self.queries.companies() if c.id == company_id), None)
        except StoreError as e:
            self.notifier.error(error_message(e))
            return False
        if company is None:
            self.notifier.error("Company not found")
            return False
        self.selected_company_id = company.id
        self.company_search = company.name
        self._compose_company_subject()
        return True

    def commit_company_search(self) -> None:
        """Build the subject from the typed name when no directory entry was picked."""
        if self.selected_company_id is None:
            self._compose_company_subject()

    def _compose_company_subject(self) -> None:
        if self.mode != ModalMode.create or not self.is_company_event:
            return
        try:
            subject = event_views.company_event_subject(
                self.draft.organizer_type,
                self.organizer_ids,
                self.queries.meeting_categories(),
                self.queries.event_categories(),
                self.company_search,
            )
        except StoreError as e:
            self.notifier.error(error_message(e))
            return
        if subject:
            self.draft = self.draft.model_copy(update={"subject": subject})
            self.form_errors.pop("subject", None)

    # ── Selections ────────────────────────────────────────────────

    def select_organizers(self, organizer_type: OrganizerType, ids: Sequence[str]) -> None:
        self.draft = self.draft.model_copy(update={"organizer_type": organizer_type})
        self.organizer_ids = unique(ids)
        if self.organizer_ids:
            self.form_errors.pop("organizers", None)
        if self.selected_company_id is not None:
            self._compose_company_subject()

    def select_participants(self, mode: SelectionMode, ids: Sequence[str]) -> None:
        ids = unique(ids)
        if mode == SelectionMode.invitees:
            self.invitee_ids = ids
        elif mode == SelectionMode.attendees_in_person:
            self.attendee_in_person_ids = ids
        else:
            self.attendee_online_ids = ids

    def selector_participants(self, mode: SelectionMode) -> list[SelectorParticipant]:
        return event_views.selector_participants(
            self.queries.participants(),
            self.queries.participant_meeting_categories(),
            self.queries.meeting_categories(),
            mode,
            self.attendee_in_person_ids,
            self.attendee_online_ids,
        )

    def suggest_invitees(self) -> int:
        """Add past attendees of the selected organizers to the invitees. Returns how many were added."""
        if not self.organizer_ids:
            self.notifier.warning("Select at least one organizer first")
            return 0
        try:
            suggested = self.queries.suggest_invitee_ids(self.draft.organizer_type, self.organizer_ids)
        except StoreError as e:
            self.notifier.error(error_message(e))
            return 0
        merged = unique([*self.invitee_ids, *suggested])
        added = len(merged) - len(self.invitee_ids)
        self.invitee_ids = merged
        self.notifier.info(f"{added} suggested invitee(s) added")
        return added

    # ── Writes ────────────────────────────────────────────────────

    def create(self) -> bool:
        if not (self.validate_step(1) and self.validate_step(2)):
            return False

        draft = self.draft
        flyer_url = self._upload_flyer()
        if flyer_url:
            draft = draft.model_copy(update={"flyer_url": flyer_url})
        try:
            created = event_service.create_complex_event(
                self.store,
                self.cache,
                draft,
                self.schedules,
                self.organizer_ids,
                self.invitee_ids,
                self.attendee_in_person_ids,
                self.attendee_online_ids,
                actor_id=self.actor_id,
            )
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            return False

        self.notifier.success(f"{len(created)} event(s) created")
        self.close()
        return True

    def submit_update(self) -> bool:
        if self.selected_event is None:
            return False
        errors = {}
        if not self.draft.subject.strip():
            errors["subject"] = "Subject is required"
        if self.draft.date is None or self.draft.start_time is None:
            errors["date"] = "Date and start time are required"
        elif self.draft.end_time is not None and self.draft.end_time <= self.draft.start_time:
            errors["end_time"] = "End time must be after start time"
        self.form_errors = errors
        if errors:
            return False

        flyer_url = self.draft.flyer_url
        if self.flyer is not None:
            flyer_url = self._upload_flyer() or flyer_url
        elif self.flyer_removed:
            flyer_url = None
        draft = self.draft.model_copy(update={"flyer_url": flyer_url})

        try:
            updated = event_service.update_complex_event(
                self.store,
                self.cache,
                self.selected_event.id,
                draft,
                self.organizer_ids,
                self.invitee_ids,
                self.attendee_in_person_ids,
                self.attendee_online_ids,
                actor_id=self.actor_id,
            )
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            return False

        self.notifier.success(f"Event '{updated.subject}' updated")
        self.close()
        return True

    def request_delete(self, event: Event) -> None:
        self.pending_delete = event

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        event, self.pending_delete = self.pending_delete, None
        if event is None:
            return False
        try:
            event_service.delete_complex_event(self.store, self.cache, event.id)
        except StoreError as e:
            self.notifier.error(error_message(e))
            return False
        self.notifier.success(f"Event '{event.subject}' deleted")
        if self.selected_event is not None and self.selected_event.id == event.id:
            self.close()
        return True

    def send_invitations(self, event: Event) -> bool:
        if self.functions is None:
            self.notifier.error("Invitations are not configured")
            return False
        try:
            sent = event_service.send_invitations(self.store, self.functions, event.id)
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            return False
        self.notifier.success(f"Invitations sent to {sent} invitee(s)")
        return True

    # ── Derived views ─────────────────────────────────────────────

    def affordances(self) -> Affordances:
        return Affordances(
            create=self.capabilities.can("create", EVENT_SUBJECT),
            update=self.capabilities.can("update", EVENT_SUBJECT),
            delete=self.capabilities.can("delete", EVENT_SUBJECT),
        )

    def _pairs(self, organizer_type: OrganizerType) -> list[tuple[str, str]]:
        return event_views.organizer_pairs(
            organizer_type,
            self.queries.organizing_meeting_categories(),
            self.queries.organizing_categories(),
        )

    def period_events(self) -> list[Event]:
        return event_views.filter_events(self.queries.events(), self.period, self.search)

    def organizer_display_name(self, event: Event) -> str:
        return event_views.organizer_display_name(
            event,
            self.queries.organizing_meeting_categories(),
            self.queries.organizing_categories(),
            self.queries.meeting_categories(),
            self.queries.event_categories(),
        )

    def sidebar_counts(self, organizer_type: OrganizerType) -> list[SidebarCount]:
        categories = (
            self.queries.meeting_categories()
            if organizer_type == OrganizerType.meeting_category
            else self.queries.event_categories()
        )
        return event_views.sidebar_counts(self.period_events(), organizer_type, self._pairs(organizer_type), categories)

    def filtered_events(self) -> list[Event]:
        if self.selected_organizer_type is None:
            return []
        return event_views.events_for_organizer(
            self.period_events(),
            self.selected_organizer_type,
            self.selected_organizer_id,
            self._pairs(self.selected_organizer_type),
        )

    def view(self) -> EventsView:
        return EventsView(
            period_label=self.period.label,
            search=self.search,
            sidebar_meeting_categories=self.sidebar_counts(OrganizerType.meeting_category),
            sidebar_event_categories=self.sidebar_counts(OrganizerType.category),
            selected_organizer_type=self.selected_organizer_type.value if self.selected_organizer_type else None,
            selected_organizer_id=self.selected_organizer_id,
            events=[
                EventCard(event=event, organizer_name=self.organizer_display_name(event))
                for event in self.filtered_events()
            ],
            affordances=self.affordances(),
        )
