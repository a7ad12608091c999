from datetime import timezone
from typing import Optional

from dateutil.parser import ParserError, parse
from flask import request

from storefront.domain.invariants.exceptions import InvariantViolation, StaleWrite


def normalize_ts(ts):
    """Treat naive timestamps (SQLite drops tzinfo) as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def client_timestamp() -> Optional[str]:
    """
    The editor's last-seen ``updated_at``: the If-Unmodified-Since header,
    or ``updated_at`` echoed back in the JSON body.
    """
    header = request.headers.get("If-Unmodified-Since")
    if header:
        return header
    body = request.get_json(silent=True)
    if isinstance(body, dict) and isinstance(body.get("updated_at"), str):
        return body["updated_at"]
    return None


def enforce_optimistic_lock(page):
    """Raise StaleWrite if the page changed after the editor loaded it."""
    raw = client_timestamp()
    if not raw or page.updated_at is None:
        return

    try:
        seen = normalize_ts(parse(raw))
    except (ParserError, OverflowError) as exc:
        raise InvariantViolation(f"Invalid timestamp for optimistic lock: {raw!r}") from exc

    # HTTP dates carry whole seconds only
    current = normalize_ts(page.updated_at).replace(microsecond=0)
    if current > seen.replace(microsecond=0):
        raise StaleWrite(
            f"Page {page.id} was modified at {current.isoformat()}; reload before saving"
        )
