from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value, "%H:%M").time()


def require_date(value, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date((value or "").strip())
    except (ValueError, AttributeError):
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def require_hhmm(value, field_name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_hhmm((value or "").strip())
    except (ValueError, AttributeError):
        raise ValidationError(f"{field_name} must be a time (HH:MM)")


def optional_datetime(value, field_name: str) -> Optional[datetime]:
    """Parse an optional ISO datetime (the browser sends 'YYYY-MM-DDTHH:MM').

    Timezone-aware values are converted to naive local time so they compare
    with now_local().
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO datetime")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
