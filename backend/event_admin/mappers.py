"""Row <-> entity mapping for the store tables.

Events, the commission-keyed tables and the company directory rename columns;
the other tables map one-to-one onto their schemas.
"""
from typing import Any, Optional

from event_admin.models.event import OrganizerType
from event_admin.schemas.category import Category
from event_admin.schemas.directory import Company, Meeting, MeetingCreate, Participant
from event_admin.schemas.event import Event, EventDraft
from event_admin.schemas.links import (
    AttendeeLink,
    InviteeLink,
    OrganizingCategoryLink,
    OrganizingMeetingCategoryLink,
    ParticipantMeetingCategoryLink,
)


def event_from_row(row: dict[str, Any], organizer_type: Optional[OrganizerType] = None) -> Event:
    """Build an Event from a store row.

    ``organizer_type`` overrides the row's ``organizer_kind`` tag; it is how
    callers supply the type derived from link membership for untagged rows.
    """
    kind = organizer_type or row.get("organizer_kind") or OrganizerType.meeting_category
    return Event(
        id=row["id"],
        subject=row["subject"],
        organizer_type=OrganizerType(kind),
        date=row["date"],
        start_time=row["start_time"],
        end_time=row.get("end_time"),
        location=row.get("location"),
        description=row.get("description"),
        external_participants_count=row.get("external_participants_count") or 0,
        cost=row.get("cost"),
        investment=row.get("investment"),
        revenue=row.get("revenue"),
        is_cancelled=bool(row.get("is_cancelled")),
        flyer_url=row.get("flyer_url"),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
        updated_by=row.get("updated_by"),
        updated_at=row.get("updated_at"),
    )


def event_to_row_for_update(event: EventDraft) -> dict[str, Any]:
    # Empty strings from forms are stored as NULL
    return {
        "subject": event.subject.strip(),
        "organizer_kind": event.organizer_type.value,
        "date": event.date,
        "start_time": event.start_time,
        "end_time": event.end_time or None,
        "location": event.location or None,
        "description": event.description or None,
        "external_participants_count": event.external_participants_count,
        "cost": event.cost,
        "investment": event.investment,
        "revenue": event.revenue,
        "is_cancelled": event.is_cancelled,
        "flyer_url": event.flyer_url or None,
    }


def event_to_row(event: EventDraft, event_id: Optional[str] = None) -> dict[str, Any]:
    row = event_to_row_for_update(event)
    if event_id:
        row["id"] = event_id
    return row


def category_from_row(row: dict[str, Any]) -> Category:
    return Category.model_validate(row)


def organizing_meeting_category_from_row(row: dict[str, Any]) -> OrganizingMeetingCategoryLink:
    return OrganizingMeetingCategoryLink(event_id=row["event_id"], meeting_category_id=row["commission_id"])


def organizing_category_from_row(row: dict[str, Any]) -> OrganizingCategoryLink:
    return OrganizingCategoryLink(event_id=row["event_id"], category_id=row["category_id"])


def invitee_from_row(row: dict[str, Any]) -> InviteeLink:
    return InviteeLink(event_id=row["event_id"], participant_id=row["participant_id"])


def attendee_from_row(row: dict[str, Any]) -> AttendeeLink:
    return AttendeeLink(
        event_id=row["event_id"],
        participant_id=row["participant_id"],
        attendance_type=row["attendance_type"],
    )


def participant_meeting_category_from_row(row: dict[str, Any]) -> ParticipantMeetingCategoryLink:
    return ParticipantMeetingCategoryLink(participant_id=row["participant_id"], meeting_category_id=row["commission_id"])


def participant_from_row(row: dict[str, Any]) -> Participant:
    return Participant.model_validate(row)


def meeting_from_row(row: dict[str, Any]) -> Meeting:
    data = {k: v for k, v in row.items() if k != "commission_id"}
    return Meeting(meeting_category_id=row["commission_id"], **data)


def meeting_to_row(meeting: MeetingCreate) -> dict[str, Any]:
    row = meeting.model_dump(exclude={"meeting_category_id"})
    row["commission_id"] = meeting.meeting_category_id
    return row


def company_from_row(row: dict[str, Any]) -> Company:
    return Company(
        id=row["id_establecimiento"],
        name=row["nombre_establecimiento"],
        tax_id=row.get("rif_compania"),
        email=row.get("email_principal"),
        phone=row.get("telefono_principal_1"),
        municipality=row.get("nombre_municipio"),
        is_affiliated=bool(row.get("es_afiliado_ciec")),
    )
