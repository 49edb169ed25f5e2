"""
Post lifecycle: pin/unpin, archive/unarchive and the request-triggered
auto-archive sweep, plus post creation, editing and permanent deletion.

State per post:
  active/unpinned --pin--> active/pinned --unpin--> active/unpinned
  active/unpinned --archive or sweep--> archived --unarchive--> active/unpinned

Archiving always clears `pinned`. Unpinning and unarchiving both restart the
retention countdown by stamping `unpinned_at`.
"""

from flask import current_app

from .errors import NotFound, ValidationError
from .helpers import UNSET, plain_text
from .models import LogAttachment, LogMessage, db
from .policy import ARCHIVE_AFTER_DAYS, archive_cutoff, is_old_post, utcnow_naive


def _archive_days() -> int:
    return int(current_app.config.get("ARCHIVE_AFTER_DAYS", ARCHIVE_AFTER_DAYS))


def get_log(log_id: int) -> LogMessage:
    m = db.session.get(LogMessage, log_id)
    if m is None:
        raise NotFound("Log not found")
    return m


def auto_archive_sweep(now=None) -> int:
    """Archive every unpinned, active post whose countdown has run out.

    One guarded bulk UPDATE; it only ever flips archived false -> true, so
    running it again (or concurrently) changes nothing further.
    Returns the number of posts archived.
    """
    if now is None:
        now = utcnow_naive()
    cutoff = archive_cutoff(now, _archive_days())
    reference = db.func.coalesce(LogMessage.unpinned_at, LogMessage.created_at)
    count = (
        LogMessage.query.filter(
            LogMessage.archived.is_(False),
            LogMessage.pinned.is_(False),
            reference <= cutoff,
        )
        .update(
            {LogMessage.archived: True, LogMessage.archived_at: now},
            synchronize_session=False,
        )
    )
    db.session.commit()
    if count:
        current_app.logger.info("[sweep] auto-archived %d post(s)", count)
    return count


def list_active(pinned_first: bool = False) -> list[LogMessage]:
    auto_archive_sweep()
    q = LogMessage.query.filter(LogMessage.archived.is_(False))
    if pinned_first:
        q = q.order_by(LogMessage.pinned.desc(), LogMessage.created_at.desc())
    else:
        q = q.order_by(LogMessage.created_at.desc())
    return q.all()


def list_archived() -> list[LogMessage]:
    return (
        LogMessage.query.filter(LogMessage.archived.is_(True))
        .order_by(LogMessage.archived_at.desc())
        .all()
    )


def _validated_message(message) -> str:
    if not isinstance(message, str) or not plain_text(message):
        raise ValidationError("Message is required")
    return message.strip()


def _build_attachments(items) -> list[LogAttachment]:
    if not isinstance(items, list):
        raise ValidationError("attachments must be a list")
    out = []
    now = utcnow_naive()
    for raw in items:
        if not isinstance(raw, dict):
            raise ValidationError("Invalid attachment")
        filename = raw.get("filename")
        url = raw.get("url")
        if not filename or not url:
            raise ValidationError("Attachment filename and url are required")
        try:
            size = int(raw.get("size") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Invalid attachment size")
        out.append(
            LogAttachment(
                filename=str(filename),
                original_name=str(raw.get("originalName") or filename),
                mime_type=str(raw.get("mimeType") or "application/octet-stream"),
                size=size,
                url=str(url),
                created_at=now,
            )
        )
    return out


def create_log(author, message, title=None, image_url=None, attachments=None) -> LogMessage:
    if not isinstance(author, str) or not author.strip():
        raise ValidationError("Author is required")
    m = LogMessage(
        title=(title or "").strip(),
        message=_validated_message(message),
        author=author.strip(),
        version=str(current_app.config.get("APP_VERSION", "0.0.0")),
        created_at=utcnow_naive(),
        pinned=False,
        archived=False,
        image_url=image_url or None,
    )
    if attachments:
        m.attachments = _build_attachments(attachments)
    db.session.add(m)
    db.session.commit()
    current_app.logger.info("[log] created id=%s by author=%s", m.id, m.author)
    return m


def edit_log(log_id: int, message, title=None, image_url=UNSET, attachments=UNSET) -> LogMessage:
    """Replace content fields. Lifecycle flags and timestamps are left alone.

    `image_url` and `attachments` are only touched when supplied; passing
    None clears them.
    """
    m = get_log(log_id)
    m.message = _validated_message(message)
    m.title = (title or "").strip()
    if image_url is not UNSET:
        m.image_url = image_url or None
    if attachments is not UNSET:
        m.attachments = _build_attachments(attachments or [])
    db.session.commit()
    return m


def delete_log(log_id: int) -> None:
    """Permanently delete a post and everything it owns. No confirmation step."""
    m = get_log(log_id)
    db.session.delete(m)
    db.session.commit()
    current_app.logger.info("[log] deleted id=%s", log_id)


def toggle_pin(log_id: int):
    """Flip the pin. Returns (post, unpinning_old_post).

    `unpinning_old_post` is True only when this call unpinned a post created
    at least ARCHIVE_AFTER_DAYS ago; the caller decides whether to follow up
    with archive_log() or keep the fresh countdown.
    """
    m = get_log(log_id)
    if m.archived:
        raise ValidationError("Archived posts must be unarchived before pinning")
    now = utcnow_naive()
    unpinning_old = False
    if m.pinned:
        m.pinned = False
        m.unpinned_at = now
        unpinning_old = is_old_post(m.created_at, now, _archive_days())
    else:
        m.pinned = True
        m.unpinned_at = None
    db.session.commit()
    current_app.logger.info(
        "[log] pin id=%s pinned=%s old=%s", m.id, m.pinned, unpinning_old
    )
    return m, unpinning_old


def archive_log(log_id: int) -> LogMessage:
    m = get_log(log_id)
    m.archived = True
    m.archived_at = utcnow_naive()
    m.pinned = False
    db.session.commit()
    current_app.logger.info("[log] archived id=%s", m.id)
    return m


def unarchive_log(log_id: int) -> LogMessage:
    m = get_log(log_id)
    now = utcnow_naive()
    m.archived = False
    m.archived_at = None
    m.unpinned_at = now
    db.session.commit()
    current_app.logger.info("[log] unarchived id=%s", m.id)
    return m
