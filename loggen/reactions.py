from flask import current_app

from .errors import NotFound, ValidationError
from .models import LogMessage, Reaction, db
from .policy import utcnow_naive


def aggregate_reactions(reactions) -> list[dict]:
    """Group raw reaction rows into [{"emoji", "count"}].

    Order follows the first occurrence of each emoji in `reactions`, so
    callers should pass rows in insertion order.
    """
    counts: dict[str, int] = {}
    for r in reactions:
        emoji = r["emoji"] if isinstance(r, dict) else r.emoji
        counts[emoji] = counts.get(emoji, 0) + 1
    return [{"emoji": k, "count": v} for k, v in counts.items()]


def add_reaction(log_id: int, emoji: str) -> Reaction:
    """Append a reaction row. Repeated emojis accumulate; nothing is deduplicated."""
    emoji = (emoji or "").strip() if isinstance(emoji, str) else ""
    if not emoji:
        raise ValidationError("Emoji is required")
    allowed = current_app.config.get("REACTION_EMOJIS") or []
    if allowed and emoji not in allowed:
        raise ValidationError(f"Unsupported emoji: {emoji}")
    if db.session.get(LogMessage, log_id) is None:
        raise NotFound("Log not found")
    reaction = Reaction(emoji=emoji, log_id=log_id, created_at=utcnow_naive())
    db.session.add(reaction)
    db.session.commit()
    return reaction
