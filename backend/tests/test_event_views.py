"""Tests for the derived computations behind the management screens."""
from datetime import date, time

from event_admin.models.event import OrganizerType
from event_admin.period import FiscalPeriod
from event_admin.schemas.category import Category
from event_admin.schemas.directory import Company, Meeting, Participant
from event_admin.schemas.event import Event
from event_admin.schemas.links import (
    OrganizingCategoryLink,
    OrganizingMeetingCategoryLink,
    ParticipantMeetingCategoryLink,
)
from event_admin.services import event_views
from event_admin.services.event_views import SelectionMode


def _event(event_id, subject="Event", day=date(2024, 1, 10), organizer_type=OrganizerType.meeting_category):
    return Event(id=event_id, subject=subject, date=day, start_time=time(9), organizer_type=organizer_type)


MEETING_CATEGORIES = [Category(id="c1", name="Finance"), Category(id="c2", name="Legal"),
                      Category(id="c3", name="audit")]
EVENT_CATEGORIES = [Category(id="k1", name="Workshop")]


class TestOrganizerDisplayName:
    def test_names_joined_in_link_order(self):
        links = [OrganizingMeetingCategoryLink(event_id="e1", meeting_category_id="c1"),
                 OrganizingMeetingCategoryLink(event_id="e1", meeting_category_id="c2"),
                 OrganizingMeetingCategoryLink(event_id="e2", meeting_category_id="c3")]
        name = event_views.organizer_display_name(_event("e1"), links, [], MEETING_CATEGORIES, EVENT_CATEGORIES)
        assert name == "Finance, Legal"

    def test_zero_links_render_placeholder(self):
        assert event_views.organizer_display_name(
            _event("e1"), [], [], MEETING_CATEGORIES, EVENT_CATEGORIES
        ) == "Meeting category not specified"
        assert event_views.organizer_display_name(
            _event("e1", organizer_type=OrganizerType.category), [], [], MEETING_CATEGORIES, EVENT_CATEGORIES
        ) == "Event category not specified"

    def test_unknown_ids(self):
        mc = [OrganizingMeetingCategoryLink(event_id="e1", meeting_category_id="gone")]
        assert event_views.organizer_display_name(
            _event("e1"), mc, [], MEETING_CATEGORIES, EVENT_CATEGORIES
        ) == "Unknown meeting category"
        cat = [OrganizingCategoryLink(event_id="e1", category_id="gone"),
               OrganizingCategoryLink(event_id="e1", category_id="k1")]
        assert event_views.organizer_display_name(
            _event("e1", organizer_type=OrganizerType.category), [], cat, MEETING_CATEGORIES, EVENT_CATEGORIES
        ) == "Unknown category, Workshop"

    def test_links_of_the_other_type_are_ignored(self):
        cat = [OrganizingCategoryLink(event_id="e1", category_id="k1")]
        assert event_views.organizer_display_name(
            _event("e1"), [], cat, MEETING_CATEGORIES, EVENT_CATEGORIES
        ) == "Meeting category not specified"


class TestSidebarCounts:
    def test_period_search_tally_sort(self):
        events = [
            _event("e1", "Budget review", date(2023, 12, 1)),
            _event("e2", "budget close", date(2024, 5, 1)),
            _event("e3", "Budget old", date(2023, 1, 1)),   # previous period
            _event("e4", "Picnic", date(2024, 2, 1)),       # no match
        ]
        pairs = [("e1", "c2"), ("e1", "c3"), ("e2", "c2"), ("e3", "c1"), ("e4", "c1")]
        visible = event_views.filter_events(events, FiscalPeriod(2023), "BUDGET")
        assert [e.id for e in visible] == ["e1", "e2"]

        counts = event_views.sidebar_counts(visible, OrganizerType.meeting_category, pairs, MEETING_CATEGORIES)
        assert [(c.name, c.count) for c in counts] == [("audit", 1), ("Legal", 2)]

    def test_events_of_other_type_are_not_counted(self):
        events = [_event("e1", organizer_type=OrganizerType.category)]
        counts = event_views.sidebar_counts(events, OrganizerType.meeting_category, [("e1", "c1")], MEETING_CATEGORIES)
        assert counts == []


class TestEventsForOrganizer:
    def test_nothing_until_selected(self):
        assert event_views.events_for_organizer([_event("e1")], None, None, [("e1", "c1")]) == []

    def test_filters_by_link(self):
        events = [_event("e1"), _event("e2")]
        result = event_views.events_for_organizer(events, OrganizerType.meeting_category, "c1", [("e2", "c1")])
        assert [e.id for e in result] == ["e2"]


class TestSelectorParticipants:
    PARTICIPANTS = [Participant(id="p1", name="Ana"), Participant(id="p2", name="Bruno")]
    MEMBERSHIPS = [ParticipantMeetingCategoryLink(participant_id="p1", meeting_category_id="c1"),
                   ParticipantMeetingCategoryLink(participant_id="p1", meeting_category_id="c2")]

    def test_grouped_by_meeting_category(self):
        rows = event_views.selector_participants(
            self.PARTICIPANTS, self.MEMBERSHIPS, MEETING_CATEGORIES, SelectionMode.invitees
        )
        assert [(r.id, r.group) for r in rows] == [("p1", "Finance"), ("p1", "Legal"), ("p2", "No meeting category")]
        assert not any(r.is_disabled for r in rows)

    def test_other_attendance_mode_is_disabled(self):
        rows = event_views.selector_participants(
            self.PARTICIPANTS, [], MEETING_CATEGORIES, SelectionMode.attendees_in_person,
            in_person_ids=["p1"], online_ids=["p2"],
        )
        assert {r.id: r.is_disabled for r in rows} == {"p1": False, "p2": True}


class TestCategoryHelpers:
    def test_filter_categories_sorted_case_insensitive(self):
        result = event_views.filter_categories(MEETING_CATEGORIES, "")
        assert [c.name for c in result] == ["audit", "Finance", "Legal"]
        assert [c.name for c in event_views.filter_categories(MEETING_CATEGORIES, "FIN")] == ["Finance"]

    def test_usage_counts(self):
        meetings = [Meeting(id="m1", subject="M", meeting_category_id="c1", date=date(2024, 1, 1))]
        memberships = [ParticipantMeetingCategoryLink(participant_id="p1", meeting_category_id="c1"),
                       ParticipantMeetingCategoryLink(participant_id="p2", meeting_category_id="c2")]
        organizer_links = [OrganizingMeetingCategoryLink(event_id="e1", meeting_category_id="c2")]
        usage = event_views.meeting_category_usage(meetings, memberships, organizer_links)
        assert usage == {"c1": (1, 1, 0), "c2": (0, 1, 1)}


COMPANIES = [Company(id=f"co{i}", name=f"Alimentos Andinos {i}") for i in range(7)] + [
    Company(id="cafe", name="Café Ávila, C.A."),
]


class TestCompanySearch:
    def test_normalize_strips_accents_and_punctuation(self):
        assert event_views.normalize_search("Café Ávila, C.A.") == "cafe avila ca"
        assert event_views.normalize_search(None) == ""

    def test_no_suggestions_below_three_characters(self):
        assert event_views.company_suggestions(COMPANIES, "ca") == []

    def test_match_ignores_accents_and_case(self):
        assert [c.id for c in event_views.company_suggestions(COMPANIES, "CAFE avi")] == ["cafe"]

    def test_at_most_five_suggestions(self):
        suggestions = event_views.company_suggestions(COMPANIES, "alimentos")
        assert [c.id for c in suggestions] == ["co0", "co1", "co2", "co3", "co4"]


class TestCompanyEventSubject:
    def test_first_organizer_and_company(self):
        subject = event_views.company_event_subject(
            OrganizerType.meeting_category, ["c2", "c1"], MEETING_CATEGORIES, EVENT_CATEGORIES, " Café Ávila ",
        )
        assert subject == "Legal - Café Ávila"

    def test_uses_event_categories_for_category_organizers(self):
        subject = event_views.company_event_subject(
            OrganizerType.category, ["k1"], MEETING_CATEGORIES, EVENT_CATEGORIES, "Acme",
        )
        assert subject == "Workshop - Acme"

    def test_unknown_organizer_or_blank_company_gives_none(self):
        args = (MEETING_CATEGORIES, EVENT_CATEGORIES)
        assert event_views.company_event_subject(OrganizerType.meeting_category, ["zz"], *args, "Acme") is None
        assert event_views.company_event_subject(OrganizerType.meeting_category, [], *args, "Acme") is None
        assert event_views.company_event_subject(OrganizerType.meeting_category, ["c1"], *args, "  ") is None
