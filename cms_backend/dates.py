"""
Timestamp and date helpers shared by the repositories.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from cms_backend.errors import ValidationError

MONTHS_PT_BR = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(instant: datetime | None = None) -> str:
    """ISO-8601 UTC instant with millisecond precision, e.g. 2025-08-28T21:30:45.123Z."""
    instant = (instant or utc_now()).astimezone(timezone.utc)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO timestamp written by `iso_timestamp`; None if unparsable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_calendar_date(value: str) -> date:
    """Accepts ``YYYY-MM-DD`` or a full ISO instant; raises ValidationError otherwise."""
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"Data inválida: {value!r}")


def format_long_date(value: str) -> str:
    """Render a calendar date as '28 de agosto de 2025'."""
    day = parse_calendar_date(value)
    return f"{day.day} de {MONTHS_PT_BR[day.month - 1]} de {day.year}"

