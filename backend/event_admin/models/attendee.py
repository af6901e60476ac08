"""EventInvitee and EventAttendee ORM models."""
import enum
from sqlalchemy import Column, String, ForeignKey, Enum as SAEnum
from event_admin.database import Base


class AttendanceType(str, enum.Enum):
    in_person = "in_person"
    online = "online"


class EventInvitee(Base):
    __tablename__ = "event_invitees"

    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True)
    participant_id = Column(String(36), ForeignKey("participants.id"), primary_key=True)


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True)
    participant_id = Column(String(36), ForeignKey("participants.id"), primary_key=True)
    # Part of the key: the same participant may be recorded once per attendance type
    attendance_type = Column(SAEnum(AttendanceType), primary_key=True)
