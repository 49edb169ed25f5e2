from flask import Blueprint, current_app, jsonify, request, send_from_directory

from . import comments, lifecycle
from .auth import login_with_password, require_auth
from .errors import ValidationError
from .extensions import cache
from .helpers import (
    _json_body,
    _optional_text,
    _patch_field,
    markdown_render,
    serialize_comment,
    serialize_log,
    serialize_reaction,
    serialize_signature,
)
from .policy import is_christmas
from .reactions import add_reaction
from .storage import ATTACHMENT_EXTENSIONS, IMAGE_EXTENSIONS, get_store

api_bp = Blueprint("api", __name__)


@api_bp.route("/version")
@cache.cached(timeout=300)
def api_version():
    return jsonify(
        {
            "version": current_app.config.get("APP_VERSION"),
            "theme": "christmas" if is_christmas() else "default",
        }
    )


@api_bp.route("/changelog")
@cache.cached(timeout=300)
def api_changelog():
    path = current_app.config.get("CHANGELOG_PATH", "CHANGELOG.md")
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except OSError:
        text = "No changelog available."
    return jsonify({"changelog": text, "html": markdown_render(text)})


@api_bp.route("/auth/login", methods=["POST"])
def api_login():
    data = _json_body()
    token = login_with_password(data.get("password"))
    return jsonify({"token": token})


# --- Posts ---


@api_bp.route("/logs")
@require_auth
def api_logs():
    pinned_first = request.args.get("pinned_first") == "1"
    logs = lifecycle.list_active(pinned_first=pinned_first)
    return jsonify([serialize_log(m) for m in logs])


@api_bp.route("/logs/archived")
@require_auth
def api_logs_archived():
    return jsonify([serialize_log(m) for m in lifecycle.list_archived()])


@api_bp.route("/logs", methods=["POST"])
@require_auth
def api_create_log():
    data = _json_body()
    m = lifecycle.create_log(
        author=data.get("author"),
        message=data.get("message"),
        title=_optional_text(data, "title"),
        image_url=_optional_text(data, "imageUrl"),
        attachments=data.get("attachments"),
    )
    return jsonify(serialize_log(m)), 201


@api_bp.route("/logs/<int:log_id>", methods=["PUT"])
@require_auth
def api_edit_log(log_id: int):
    data = _json_body()
    image_url = _patch_field(data, "imageUrl")
    if image_url and not isinstance(image_url, str):
        raise ValidationError("imageUrl must be a string")
    m = lifecycle.edit_log(
        log_id,
        message=data.get("message"),
        title=_optional_text(data, "title"),
        image_url=image_url,
        attachments=_patch_field(data, "attachments"),
    )
    return jsonify(serialize_log(m))


@api_bp.route("/logs/<int:log_id>", methods=["DELETE"])
@require_auth
def api_delete_log(log_id: int):
    lifecycle.delete_log(log_id)
    return jsonify({"success": True, "id": log_id})


@api_bp.route("/logs/<int:log_id>/pin", methods=["POST"])
@require_auth
def api_toggle_pin(log_id: int):
    m, unpinning_old = lifecycle.toggle_pin(log_id)
    item = serialize_log(m)
    item["_unpinningOldPost"] = unpinning_old
    return jsonify(item)


@api_bp.route("/logs/<int:log_id>/archive", methods=["POST"])
@require_auth
def api_archive_log(log_id: int):
    return jsonify(serialize_log(lifecycle.archive_log(log_id)))


@api_bp.route("/logs/<int:log_id>/unarchive", methods=["POST"])
@require_auth
def api_unarchive_log(log_id: int):
    return jsonify(serialize_log(lifecycle.unarchive_log(log_id)))


# --- Signatures, comments, reactions ---


@api_bp.route("/logs/<int:log_id>/sign", methods=["POST"])
@require_auth
def api_sign(log_id: int):
    data = _json_body()
    sig = comments.sign_as_read(log_id, data.get("name"))
    return jsonify(serialize_signature(sig)), 201


@api_bp.route("/logs/<int:log_id>/comments", methods=["POST"])
@require_auth
def api_add_comment(log_id: int):
    data = _json_body()
    comment = comments.add_comment(
        log_id,
        author=data.get("author"),
        message=data.get("message"),
        parent_id=data.get("parentId"),
    )
    return jsonify(serialize_comment(comment)), 201


@api_bp.route("/comments/<int:comment_id>", methods=["DELETE"])
@require_auth
def api_delete_comment(comment_id: int):
    removed_replies = comments.delete_comment(comment_id)
    return jsonify({"success": True, "id": comment_id, "removedReplies": removed_replies})


@api_bp.route("/logs/<int:log_id>/reactions", methods=["POST"])
@require_auth
def api_add_reaction(log_id: int):
    data = _json_body()
    reaction = add_reaction(log_id, data.get("emoji"))
    return jsonify(serialize_reaction(reaction)), 201


# --- Uploads ---


def _uploaded_file():
    f = request.files.get("file") or request.files.get("image")
    if f is None or not f.filename:
        raise ValidationError("No file uploaded")
    return f


@api_bp.route("/upload", methods=["POST"])
@require_auth
def api_upload_image():
    meta = get_store().save(_uploaded_file(), IMAGE_EXTENSIONS)
    return jsonify({"url": meta["url"], "filename": meta["filename"]}), 201


@api_bp.route("/attachments/upload", methods=["POST"])
@require_auth
def api_upload_attachment():
    meta = get_store().save(_uploaded_file(), ATTACHMENT_EXTENSIONS)
    return jsonify(meta), 201


@api_bp.route("/images")
@require_auth
def api_images():
    return jsonify(get_store().list_images())


def serve_upload(filename: str):
    store = get_store()
    store.path_for(filename)
    return send_from_directory(store.root, filename)

