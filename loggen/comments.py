"""
Two-level comment threads and read signatures for posts.

A comment with parent_id NULL is top-level; a reply's parent is always a
top-level comment on the same post. Deleting a top-level comment removes its
replies with it.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError

from .errors import Conflict, NotFound, ValidationError
from .models import Comment, LogMessage, ReadSignature, db
from .policy import utcnow_naive


def _require_log(log_id: int) -> LogMessage:
    m = db.session.get(LogMessage, log_id)
    if m is None:
        raise NotFound("Log not found")
    return m


def add_comment(log_id: int, author, message, parent_id=None) -> Comment:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Message is required")
    if not isinstance(author, str) or not author.strip():
        raise ValidationError("Author is required")
    _require_log(log_id)

    parent = None
    if parent_id is not None:
        try:
            parent_id = int(parent_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid parentId")
        parent = db.session.get(Comment, parent_id)
        if parent is None or parent.log_id != log_id:
            raise NotFound("Parent comment not found")
        if parent.parent_id is not None:
            raise ValidationError("Replies can only be added to top-level comments")

    comment = Comment(
        message=message.strip(),
        author=author.strip(),
        log_id=log_id,
        parent_id=parent.id if parent is not None else None,
        created_at=utcnow_naive(),
    )
    db.session.add(comment)
    db.session.commit()
    return comment


def delete_comment(comment_id: int) -> int:
    """Delete a comment (and its replies when top-level).

    Raises NotFound for ids that do not exist, including ones already deleted.
    Returns the number of replies removed along with it.
    """
    comment = db.session.get(Comment, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    reply_count = len(comment.replies)
    db.session.delete(comment)
    db.session.commit()
    current_app.logger.info(
        "[comment] deleted id=%s replies=%d", comment_id, reply_count
    )
    return reply_count


def sign_as_read(log_id: int, name) -> ReadSignature:
    """Record that `name` has read the post.

    Names are trimmed once and otherwise compared exactly, so "Anna" and
    "anna" are different signers. A second signature by the same name is a
    Conflict; the unique constraint decides races between concurrent requests.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required")
    _require_log(log_id)
    sig = ReadSignature(name=name.strip(), log_id=log_id, created_at=utcnow_naive())
    db.session.add(sig)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning(
            "[sign] duplicate signature log=%s name=%s", log_id, name.strip()
        )
        raise Conflict("Already signed", code="already_signed")
    return sig
