import re
from datetime import datetime

from bleach import clean, linkify
from flask import request
from markdown import markdown

from .errors import ValidationError
from .policy import has_occurred, to_naive_utc, utcnow_naive
from .reactions import aggregate_reactions

# Tags produced by the rich-text editor that survive sanitizing
RICH_TEXT_TAGS = {
    "p",
    "br",
    "em",
    "strong",
    "u",
    "s",
    "h1",
    "h2",
    "h3",
    "ul",
    "ol",
    "li",
    "blockquote",
    "code",
    "pre",
    "a",
    "img",
    "span",
}
RICH_TEXT_ATTRS = {
    "a": ["href", "title", "rel", "target"],
    "img": ["src", "alt", "title", "loading"],
    "span": ["class"],
    "code": ["class"],
    "pre": ["class"],
}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


class _Unset:
    """Marks a patch field the caller did not send (as opposed to null)."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


def _add_rel(html: str) -> str:
    """Enforce rel on all anchors that do not already carry one."""

    def _sub(m):
        tag_open = m.group(0)
        return tag_open[:-1] + ' rel="nofollow noopener noreferrer">'

    return re.sub(r"<a\b(?![^>]*\brel=)[^>]*>", _sub, html)


def sanitize_html(content: str) -> str:
    """Sanitize rich-text HTML from the editor for display."""
    safe = clean(
        content or "",
        tags=RICH_TEXT_TAGS,
        attributes=RICH_TEXT_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
    safe = re.sub(r"<img(?![^>]*\bloading=)([^>]*)>", r'<img loading="lazy"\1>', safe)
    return _add_rel(safe)


def plain_text(content: str) -> str:
    """Strip all markup and return the visible text, whitespace-trimmed."""
    txt = clean(content or "", tags=set(), strip=True)
    txt = txt.replace("&nbsp;", " ").replace("\xa0", " ")
    return txt.strip()


def markdown_render(content: str) -> str:
    """Render plain user content (comments, changelog) as sanitized HTML.
    - Python-Markdown with fenced code and newline-to-<br>.
    - Bleach limits output to basic inline formatting, lists, headings and links.
    - Bare URLs outside code blocks are auto-linked.
    """
    html = markdown(
        content or "",
        extensions=["fenced_code", "nl2br"],
        output_format="html5",
    )
    safe = clean(
        html,
        tags=RICH_TEXT_TAGS | {"h4", "hr"},
        attributes=RICH_TEXT_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
    code_pattern = re.compile(r"(<pre[\s\S]*?>[\s\S]*?<\/pre>)", re.IGNORECASE)
    tokens = code_pattern.split(safe)
    # tokens alternates: [non-code, code, non-code, code, ...]
    for i in range(0, len(tokens), 2):
        tokens[i] = linkify(tokens[i])
    return _add_rel("".join(tokens))


def _parse_timestamp(ts: str) -> datetime:
    """Parse an ISO-8601 timestamp (optionally 'Z'-suffixed) into naive UTC."""
    if not isinstance(ts, str) or not ts.strip():
        raise ValidationError("Invalid timestamp")
    ts = ts.strip()
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(ts)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {ts}")
    return to_naive_utc(parsed)


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _optional_text(data: dict, key: str) -> str | None:
    val = data.get(key)
    if val is None:
        return None
    if not isinstance(val, str):
        raise ValidationError(f"{key} must be a string")
    return val.strip() or None


def _patch_field(data: dict, key: str):
    """Return the value for `key`, or UNSET when the key is absent."""
    if key not in data:
        return UNSET
    return data[key]


# --- Serialization ---


def serialize_signature(s) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "logId": s.log_id,
        "createdAt": _iso(s.created_at),
    }


def serialize_comment(c, with_replies: bool = True) -> dict:
    item = {
        "id": c.id,
        "message": c.message,
        "html": markdown_render(c.message),
        "author": c.author,
        "logId": c.log_id,
        "parentId": c.parent_id,
        "createdAt": _iso(c.created_at),
    }
    if with_replies:
        item["replies"] = [serialize_comment(r, with_replies=False) for r in c.replies]
    return item


def serialize_reaction(r) -> dict:
    return {
        "id": r.id,
        "emoji": r.emoji,
        "logId": r.log_id,
        "createdAt": _iso(r.created_at),
    }


def serialize_attachment(a) -> dict:
    return {
        "id": a.id,
        "logId": a.log_id,
        "filename": a.filename,
        "originalName": a.original_name,
        "mimeType": a.mime_type,
        "size": a.size,
        "url": a.url,
        "createdAt": _iso(a.created_at),
    }


def serialize_log(m, full: bool = True) -> dict:
    item = {
        "id": m.id,
        "title": m.title or "",
        "message": m.message,
        "html": sanitize_html(m.message),
        "author": m.author,
        "version": m.version,
        "createdAt": _iso(m.created_at),
        "pinned": bool(m.pinned),
        "unpinnedAt": _iso(m.unpinned_at),
        "archived": bool(m.archived),
        "archivedAt": _iso(m.archived_at),
        "imageUrl": m.image_url,
    }
    if full:
        item["signatures"] = [serialize_signature(s) for s in m.signatures]
        item["comments"] = [
            serialize_comment(c) for c in m.comments if c.parent_id is None
        ]
        item["reactions"] = [serialize_reaction(r) for r in m.reactions]
        item["reactionSummary"] = aggregate_reactions(m.reactions)
        item["attachments"] = [serialize_attachment(a) for a in m.attachments]
    return item


def serialize_point(p) -> dict:
    return {
        "id": p.id,
        "title": p.title,
        "description": p.description,
        "author": p.author,
        "meetingId": p.meeting_id,
        "completed": bool(p.completed),
        "completedAt": _iso(p.completed_at),
        "notes": p.notes,
        "createdAt": _iso(p.created_at),
    }


def serialize_meeting(mt, with_points: bool = True, now: datetime | None = None) -> dict:
    if now is None:
        now = utcnow_naive()
    item = {
        "id": mt.id,
        "title": mt.title,
        "scheduledAt": _iso(mt.scheduled_at),
        "archived": bool(mt.archived),
        "archivedAt": _iso(mt.archived_at),
        "createdAt": _iso(mt.created_at),
        "updatedAt": _iso(mt.updated_at),
        "hasOccurred": has_occurred(mt.scheduled_at, now),
    }
    if with_points:
        item["points"] = [serialize_point(p) for p in mt.points]
    return item
