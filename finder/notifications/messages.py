"""Subscription links and the Telegram confirmation message."""

import hashlib
import hmac
from urllib.parse import urlencode

from finder.config.neighborhoods import city_of
from finder.filters.query_string import serialize
from finder.filters.state import CATEGORICAL_FIELDS, FilterState, is_unconstrained

TOKEN_LENGTH = 32

_FIELD_LABELS = {
    "balcony": "מרפסת",
    "parking": "חניה",
    "furnished": "מרוהטת",
    "agent": "תיווך",
}
_OPTION_LABELS = {"yes": "כן", "no": "לא", "not mentioned": "לא צוין"}


def subscription_token(chat_id: str, secret: str) -> str:
    """Stateless edit-link token: truncated HMAC-SHA256 of the chat id."""

    digest = hmac.new(secret.encode(), str(chat_id).encode(), hashlib.sha256)
    return digest.hexdigest()[:TOKEN_LENGTH]


def verify_subscription_token(chat_id: str, token: str | None, secret: str) -> bool:
    if not token:
        return False
    if not secret:
        return True
    return hmac.compare_digest(subscription_token(chat_id, secret), token)


def build_edit_link(app_url: str, chat_id: str, secret: str) -> str:
    token = subscription_token(chat_id, secret) if secret else ""
    query = urlencode({"chat_id": chat_id, "token": token})
    return f"{app_url.rstrip('/')}/dashboard/private-subscription?{query}"


def build_search_link(app_url: str, state: FilterState) -> str:
    return f"{app_url.rstrip('/')}/search?{serialize(state, compact=True)}"


def _range_line(label: str, low: object, high: object, include_zero: bool) -> str:
    line = f"{label}: {low} - {high}"
    if include_zero:
        line += " (כולל לא צוין)"
    return line


def build_confirmation_message(
    state: FilterState, *, search_link: str, edit_link: str
) -> str:
    lines = ["✅ הפילטרים נשמרו!", ""]

    by_city: dict[str, list[str]] = {}
    for name in state.neighborhoods:
        by_city.setdefault(city_of(name) or "", []).append(name)
    for city, names in by_city.items():
        prefix = f"{city}: " if city else ""
        lines.append(f"📍 {prefix}{', '.join(names)}")

    lines.append(_range_line("💰 מחיר", *state.bounds("price"), state.include_zero("price")))
    lines.append(_range_line("📐 גודל", *state.bounds("size"), state.include_zero("size")))
    lines.append(_range_line("🚪 חדרים", *state.bounds("rooms"), state.include_zero("rooms")))

    for field_name in CATEGORICAL_FIELDS:
        selected = state.selected(field_name)
        if is_unconstrained(selected):
            continue
        options = ", ".join(_OPTION_LABELS.get(value, value) for value in selected)
        lines.append(f"{_FIELD_LABELS[field_name]}: {options}")

    lines += ["", f"🔎 לצפייה בתוצאות:\n{search_link}", f"✏️ לשינוי הפילטרים:\n{edit_link}"]
    return "\n".join(lines)
