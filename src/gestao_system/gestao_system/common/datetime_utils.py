from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_iso() -> str:
    return now_local().isoformat(timespec="seconds")


def month_bounds(mes_referencia: str) -> tuple[date, date]:
    """First and last day of a ``YYYY-MM`` reference (extra characters ignored)."""
    key = (mes_referencia or "").strip()[:7]
    try:
        year, month = (int(p) for p in key.split("-"))
        last_day = calendar.monthrange(year, month)[1]
    except ValueError as exc:
        raise ValueError(f"Mês de referência inválido: {mes_referencia!r}") from exc
    return date(year, month, 1), date(year, month, last_day)


def hhmm_to_minutes(value: Optional[str]) -> Optional[int]:
    """'HH:MM' or 'HH:MM:SS' -> minutes since midnight. Seconds are ignored."""
    if not value:
        return None
    parts = str(value).strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None
    return hours * 60 + minutes


def minutes_to_hhmm(minutes: Optional[int]) -> str:
    """Format minutes as HH:MM, keeping a leading '-' for negative balances."""
    if not minutes:
        return "00:00"
    sign = "-" if minutes < 0 else ""
    total = abs(int(minutes))
    return f"{sign}{total // 60:02d}:{total % 60:02d}"


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()
