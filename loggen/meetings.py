"""
Meeting agendas: meetings, their points, completion and archival.

Archiving a meeting only moves it between the upcoming and archived lists;
points keep their completed/notes state either way. Meetings are never
archived automatically.
"""

from dataclasses import dataclass, fields

from flask import current_app

from .errors import Forbidden, NotFound, ValidationError
from .helpers import UNSET, _parse_timestamp
from .models import Meeting, MeetingPoint, db
from .policy import has_occurred, utcnow_naive


@dataclass
class PointPatch:
    """Partial update for a meeting point.

    Each field is either UNSET (leave alone) or the new value. Title and
    author travel together; None for description/notes clears them.
    """

    title: object = UNSET
    author: object = UNSET
    description: object = UNSET
    completed: object = UNSET
    notes: object = UNSET

    @classmethod
    def from_payload(cls, data: dict) -> "PointPatch":
        patch = cls()
        if "title" in data or "author" in data:
            title = data.get("title")
            author = data.get("author")
            if not isinstance(title, str) or not title.strip():
                raise ValidationError("Title and author are required")
            if not isinstance(author, str) or not author.strip():
                raise ValidationError("Title and author are required")
            patch.title = title.strip()
            patch.author = author.strip()
        if "description" in data:
            patch.description = _nullable_text(data["description"], "description")
        if "completed" in data:
            if not isinstance(data["completed"], bool):
                raise ValidationError("completed must be a boolean")
            patch.completed = data["completed"]
        if "notes" in data:
            patch.notes = _nullable_text(data["notes"], "notes")
        return patch

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is UNSET for f in fields(self))


def _nullable_text(val, name: str):
    if val is None:
        return None
    if not isinstance(val, str):
        raise ValidationError(f"{name} must be a string")
    return val.strip() or None


def get_meeting(meeting_id: int) -> Meeting:
    mt = db.session.get(Meeting, meeting_id)
    if mt is None:
        raise NotFound("Meeting not found")
    return mt


def list_upcoming() -> list[Meeting]:
    """Every meeting not yet archived, soonest first.

    Meetings whose time has passed stay here until someone archives them.
    """
    return (
        Meeting.query.filter(Meeting.archived.is_(False))
        .order_by(Meeting.scheduled_at.asc())
        .all()
    )


def list_archived() -> list[Meeting]:
    return (
        Meeting.query.filter(Meeting.archived.is_(True))
        .order_by(Meeting.archived_at.desc())
        .all()
    )


def list_all() -> list[Meeting]:
    return Meeting.query.order_by(Meeting.scheduled_at.desc()).all()


def _scheduled(value):
    if value is None:
        raise ValidationError("scheduledAt is required")
    return _parse_timestamp(value)


def create_meeting(title, scheduled_at) -> Meeting:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    now = utcnow_naive()
    mt = Meeting(
        title=title.strip(),
        scheduled_at=_scheduled(scheduled_at),
        archived=False,
        created_at=now,
        updated_at=now,
    )
    db.session.add(mt)
    db.session.commit()
    current_app.logger.info("[meeting] created id=%s", mt.id)
    return mt


def update_meeting(meeting_id: int, title=UNSET, scheduled_at=UNSET, archived=UNSET) -> Meeting:
    mt = get_meeting(meeting_id)
    if title is not UNSET:
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Title is required")
        mt.title = title.strip()
    if scheduled_at is not UNSET:
        mt.scheduled_at = _scheduled(scheduled_at)
    if archived is not UNSET:
        if not isinstance(archived, bool):
            raise ValidationError("archived must be a boolean")
        _set_archived(mt, archived)
    mt.updated_at = utcnow_naive()
    db.session.commit()
    return mt


def delete_meeting(meeting_id: int) -> None:
    mt = get_meeting(meeting_id)
    db.session.delete(mt)
    db.session.commit()
    current_app.logger.info("[meeting] deleted id=%s", meeting_id)


def _set_archived(mt: Meeting, archived: bool) -> None:
    if archived:
        mt.archived = True
        mt.archived_at = utcnow_naive()
    else:
        mt.archived = False
        mt.archived_at = None


def archive_meeting(meeting_id: int, is_admin: bool = False) -> Meeting:
    """Archive a meeting. Non-admins may only do so once it has taken place."""
    mt = get_meeting(meeting_id)
    if not is_admin and not has_occurred(mt.scheduled_at):
        raise Forbidden("Meetings can only be archived after they have taken place")
    _set_archived(mt, True)
    mt.updated_at = utcnow_naive()
    db.session.commit()
    current_app.logger.info("[meeting] archived id=%s admin=%s", mt.id, is_admin)
    return mt


def unarchive_meeting(meeting_id: int) -> Meeting:
    mt = get_meeting(meeting_id)
    _set_archived(mt, False)
    mt.updated_at = utcnow_naive()
    db.session.commit()
    current_app.logger.info("[meeting] unarchived id=%s", mt.id)
    return mt


def _open_meeting(meeting_id: int) -> Meeting:
    mt = get_meeting(meeting_id)
    if mt.archived:
        raise ValidationError("Meeting is archived")
    return mt


def _get_point(meeting_id: int, point_id: int) -> MeetingPoint:
    point = db.session.get(MeetingPoint, point_id)
    if point is None or point.meeting_id != meeting_id:
        raise NotFound("Point not found")
    return point


def add_point(meeting_id: int, title, author, description=None) -> MeetingPoint:
    mt = _open_meeting(meeting_id)
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title and author are required")
    if not isinstance(author, str) or not author.strip():
        raise ValidationError("Title and author are required")
    point = MeetingPoint(
        title=title.strip(),
        author=author.strip(),
        description=_nullable_text(description, "description"),
        meeting_id=mt.id,
        completed=False,
        created_at=utcnow_naive(),
    )
    db.session.add(point)
    db.session.commit()
    return point


def edit_point(meeting_id: int, point_id: int, patch: PointPatch) -> MeetingPoint:
    _open_meeting(meeting_id)
    point = _get_point(meeting_id, point_id)
    if patch.is_empty():
        raise ValidationError("No changes supplied")
    if patch.title is not UNSET:
        point.title = patch.title
        point.author = patch.author
    if patch.description is not UNSET:
        point.description = patch.description
    if patch.completed is not UNSET and patch.completed != point.completed:
        point.completed = patch.completed
        point.completed_at = utcnow_naive() if patch.completed else None
    if patch.notes is not UNSET:
        point.notes = patch.notes
    db.session.commit()
    return point


def delete_point(meeting_id: int, point_id: int) -> None:
    _open_meeting(meeting_id)
    point = _get_point(meeting_id, point_id)
    db.session.delete(point)
    db.session.commit()
