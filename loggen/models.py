from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class LogMessage(db.Model):
    __tablename__ = "log_messages"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, default="")
    message = db.Column(db.Text, nullable=False)  # rich text (HTML)
    author = db.Column(db.String(128), nullable=False)
    version = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.DateTime, index=True, nullable=False)
    pinned = db.Column(db.Boolean, nullable=False, default=False)
    unpinned_at = db.Column(db.DateTime, nullable=True)
    archived = db.Column(db.Boolean, index=True, nullable=False, default=False)
    archived_at = db.Column(db.DateTime, nullable=True, index=True)
    image_url = db.Column(db.String(512), nullable=True)

    signatures = db.relationship(
        "ReadSignature",
        backref="log",
        cascade="all, delete",
        order_by="ReadSignature.id",
    )
    comments = db.relationship(
        "Comment",
        backref="log",
        cascade="all, delete",
        order_by="Comment.id",
    )
    reactions = db.relationship(
        "Reaction",
        backref="log",
        cascade="all, delete",
        order_by="Reaction.id",
    )
    attachments = db.relationship(
        "LogAttachment",
        backref="log",
        cascade="all, delete-orphan",
        order_by="LogAttachment.id",
    )


class ReadSignature(db.Model):
    __tablename__ = "read_signatures"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    log_id = db.Column(
        db.Integer,
        db.ForeignKey("log_messages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("log_id", "name", name="uq_read_signature_log_name"),
    )


class Comment(db.Model):
    __tablename__ = "comments"
    id = db.Column(db.Integer, primary_key=True)
    message = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(128), nullable=False)
    log_id = db.Column(
        db.Integer,
        db.ForeignKey("log_messages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    # NULL for top-level comments; replies always point at a top-level comment
    parent_id = db.Column(
        db.Integer,
        db.ForeignKey("comments.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    )
    created_at = db.Column(db.DateTime, nullable=False)

    replies = db.relationship(
        "Comment",
        backref=db.backref("parent", remote_side=[id]),
        cascade="all, delete",
        order_by="Comment.id",
    )


class Reaction(db.Model):
    __tablename__ = "reactions"
    id = db.Column(db.Integer, primary_key=True)
    emoji = db.Column(db.String(32), nullable=False)
    log_id = db.Column(
        db.Integer,
        db.ForeignKey("log_messages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, nullable=False)


class LogAttachment(db.Model):
    __tablename__ = "log_attachments"
    id = db.Column(db.Integer, primary_key=True)
    log_id = db.Column(
        db.Integer,
        db.ForeignKey("log_messages.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(128), nullable=False)
    size = db.Column(db.Integer, nullable=False)
    url = db.Column(db.String(512), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)


class Meeting(db.Model):
    __tablename__ = "meetings"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    scheduled_at = db.Column(db.DateTime, index=True, nullable=False)
    archived = db.Column(db.Boolean, index=True, nullable=False, default=False)
    archived_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    points = db.relationship(
        "MeetingPoint",
        backref="meeting",
        cascade="all, delete",
        order_by="MeetingPoint.id",
    )


class MeetingPoint(db.Model):
    __tablename__ = "meeting_points"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    author = db.Column(db.String(128), nullable=False)
    meeting_id = db.Column(
        db.Integer,
        db.ForeignKey("meetings.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)  # decisions / outcomes
    created_at = db.Column(db.DateTime, nullable=False)


class Admin(db.Model):
    __tablename__ = "admins"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
