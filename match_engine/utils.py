# utils.py
import math
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Tuple

from .models import EmploymentRecord


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(100.0, value))


def lower_set(values: Iterable[str]) -> Set[str]:
    return {v.strip().lower() for v in values if v and v.strip()}


# ---------- Experience ----------
def _as_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        return None


def total_experience_years(
    jobs: List[EmploymentRecord],
    today: Optional[date] = None,
) -> float:
    """Years covered by the employment records.

    Current roles run until ``today``; overlapping intervals are merged so
    concurrent roles are not counted twice. Records without a usable start
    date are ignored.
    """
    today = today or date.today()
    intervals: List[Tuple[date, date]] = []

    for job in jobs:
        start = _as_date(job.start_date)
        if start is None:
            continue
        end = today if job.current else _as_date(job.end_date)
        if end is None:
            end = today
        if end < start:
            start, end = end, start
        intervals.append((start, end))

    if not intervals:
        return 0.0

    # Merge overlapping intervals
    intervals.sort(key=lambda x: x[0])
    merged = [intervals[0]]
    for s, e in intervals[1:]:
        last_s, last_e = merged[-1]
        if s <= last_e:
            merged[-1] = (last_s, max(last_e, e))
        else:
            merged.append((s, e))

    days = sum((e - s).days for s, e in merged)
    return round(days / 365.25, 1)
