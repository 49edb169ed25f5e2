from flask import Blueprint, jsonify

from . import lifecycle, meetings
from .auth import login_admin, require_admin
from .helpers import _json_body, _patch_field, serialize_log, serialize_meeting
from .models import Comment, LogMessage, Reaction, ReadSignature, db
from .storage import get_store

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/login", methods=["POST"])
def admin_login():
    data = _json_body()
    token = login_admin(data.get("username"), data.get("password"))
    return jsonify({"token": token, "username": data["username"].strip()})


@admin_bp.route("/overview")
@require_admin
def admin_overview():
    total = LogMessage.query.count()
    pinned = LogMessage.query.filter(LogMessage.pinned.is_(True)).count()
    archived = LogMessage.query.filter(LogMessage.archived.is_(True)).count()
    return jsonify(
        {
            "logs": {
                "total": total,
                "pinned": pinned,
                "archived": archived,
                "active": total - archived,
            },
            "comments": Comment.query.count(),
            "signatures": ReadSignature.query.count(),
            "reactions": Reaction.query.count(),
            "images": len(get_store().list_images()),
        }
    )


@admin_bp.route("/logs")
@require_admin
def admin_logs():
    rows = LogMessage.query.order_by(LogMessage.created_at.desc()).all()
    return jsonify([serialize_log(m, full=False) for m in rows])


@admin_bp.route("/logs/<int:log_id>", methods=["DELETE"])
@require_admin
def admin_delete_log(log_id: int):
    lifecycle.delete_log(log_id)
    return jsonify({"success": True, "id": log_id})


@admin_bp.route("/images")
@require_admin
def admin_images():
    return jsonify(get_store().list_images())


@admin_bp.route("/images/<path:filename>", methods=["DELETE"])
@require_admin
def admin_delete_image(filename: str):
    get_store().delete(filename)
    return jsonify({"success": True, "filename": filename})


@admin_bp.route("/user-stats")
@require_admin
def admin_user_stats():
    """Per-name activity: posts written, posts signed (and share of all posts), comments."""
    total_logs = LogMessage.query.count()
    posts = dict(
        db.session.query(LogMessage.author, db.func.count(LogMessage.id))
        .group_by(LogMessage.author)
        .all()
    )
    sigs = dict(
        db.session.query(ReadSignature.name, db.func.count(ReadSignature.id))
        .group_by(ReadSignature.name)
        .all()
    )
    comments = dict(
        db.session.query(Comment.author, db.func.count(Comment.id))
        .group_by(Comment.author)
        .all()
    )
    users = []
    for name in set(posts) | set(sigs) | set(comments):
        signed = int(sigs.get(name, 0))
        users.append(
            {
                "name": name,
                "postsCreated": int(posts.get(name, 0)),
                "signaturesCount": signed,
                "signaturesPercentage": round(signed * 100.0 / total_logs, 1)
                if total_logs
                else 0.0,
                "commentsCount": int(comments.get(name, 0)),
            }
        )
    users.sort(key=lambda u: (-u["signaturesCount"], u["name"]))
    return jsonify({"totalLogs": total_logs, "users": users})


# --- Meetings ---


@admin_bp.route("/meetings")
@require_admin
def admin_meetings():
    return jsonify([serialize_meeting(mt) for mt in meetings.list_all()])


@admin_bp.route("/meetings", methods=["POST"])
@require_admin
def admin_create_meeting():
    data = _json_body()
    mt = meetings.create_meeting(data.get("title"), data.get("scheduledAt"))
    return jsonify(serialize_meeting(mt)), 201


@admin_bp.route("/meetings/<int:meeting_id>", methods=["PUT"])
@require_admin
def admin_update_meeting(meeting_id: int):
    data = _json_body()
    mt = meetings.update_meeting(
        meeting_id,
        title=_patch_field(data, "title"),
        scheduled_at=_patch_field(data, "scheduledAt"),
        archived=_patch_field(data, "archived"),
    )
    return jsonify(serialize_meeting(mt))


@admin_bp.route("/meetings/<int:meeting_id>/unarchive", methods=["POST"])
@require_admin
def admin_unarchive_meeting(meeting_id: int):
    return jsonify(serialize_meeting(meetings.unarchive_meeting(meeting_id)))


@admin_bp.route("/meetings/<int:meeting_id>/archive", methods=["POST"])
@require_admin
def admin_archive_meeting(meeting_id: int):
    return jsonify(serialize_meeting(meetings.archive_meeting(meeting_id, is_admin=True)))


@admin_bp.route("/meetings/<int:meeting_id>", methods=["DELETE"])
@require_admin
def admin_delete_meeting(meeting_id: int):
    meetings.delete_meeting(meeting_id)
    return jsonify({"success": True, "id": meeting_id})
