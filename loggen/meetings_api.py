from flask import Blueprint, jsonify

from . import meetings
from .auth import is_admin_request, require_auth
from .helpers import _json_body, serialize_meeting, serialize_point

meetings_bp = Blueprint("meetings", __name__)


@meetings_bp.route("/upcoming")
@require_auth
def api_meetings_upcoming():
    return jsonify([serialize_meeting(mt) for mt in meetings.list_upcoming()])


@meetings_bp.route("/archived")
@require_auth
def api_meetings_archived():
    return jsonify([serialize_meeting(mt) for mt in meetings.list_archived()])


@meetings_bp.route("/<int:meeting_id>")
@require_auth
def api_meeting(meeting_id: int):
    return jsonify(serialize_meeting(meetings.get_meeting(meeting_id)))


@meetings_bp.route("/<int:meeting_id>/archive", methods=["POST"])
@require_auth
def api_meeting_archive(meeting_id: int):
    mt = meetings.archive_meeting(meeting_id, is_admin=is_admin_request())
    return jsonify(serialize_meeting(mt))


@meetings_bp.route("/<int:meeting_id>/points", methods=["POST"])
@require_auth
def api_add_point(meeting_id: int):
    data = _json_body()
    point = meetings.add_point(
        meeting_id,
        title=data.get("title"),
        author=data.get("author"),
        description=data.get("description"),
    )
    return jsonify(serialize_point(point)), 201


@meetings_bp.route("/<int:meeting_id>/points/<int:point_id>", methods=["PUT"])
@require_auth
def api_edit_point(meeting_id: int, point_id: int):
    patch = meetings.PointPatch.from_payload(_json_body())
    point = meetings.edit_point(meeting_id, point_id, patch)
    return jsonify(serialize_point(point))


@meetings_bp.route("/<int:meeting_id>/points/<int:point_id>", methods=["DELETE"])
@require_auth
def api_delete_point(meeting_id: int, point_id: int):
    meetings.delete_point(meeting_id, point_id)
    return jsonify({"success": True, "id": point_id})
