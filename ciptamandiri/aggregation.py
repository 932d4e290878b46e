"""
Page-view rollups for the admin dashboard.

All functions here are pure: they take already-loaded page-view rows and a
reference time and return plain dicts shaped the way the dashboard charts
consume them. Day and hour buckets are computed in the site timezone, while
stored timestamps are UTC.
"""
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Tuple
from zoneinfo import ZoneInfo

PERIODS = ("today", "yesterday", "week", "month")
PERIOD_DAYS = {"today": 1, "yesterday": 1, "week": 7, "month": 30}
TOP_PAGES_LIMIT = 10


@dataclass(frozen=True)
class ViewRow:
    visitor_id: str
    halaman: str
    created_at: datetime


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def period_bounds(period: str, now: datetime, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """
    Return the ``[start, end)`` UTC range covered by ``period``.

    ``today`` runs from local midnight to now, ``yesterday`` is the previous
    local day, ``week`` and ``month`` are the last 7 / 30 local days
    including today.
    """
    if period not in PERIODS:
        raise ValueError(f"unknown period: {period}")

    local_now = as_utc(now).astimezone(tz)
    today = local_now.date()

    if period == "yesterday":
        first_day = today - timedelta(days=1)
        start = datetime.combine(first_day, time.min, tzinfo=tz)
        end = datetime.combine(today, time.min, tzinfo=tz)
    else:
        first_day = today - timedelta(days=PERIOD_DAYS[period] - 1)
        start = datetime.combine(first_day, time.min, tzinfo=tz)
        end = local_now + timedelta(microseconds=1)

    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def period_days(period: str, now: datetime, tz: ZoneInfo) -> List[date]:
    start, end = period_bounds(period, now, tz)
    first = start.astimezone(tz).date()
    last = (end - timedelta(microseconds=1)).astimezone(tz).date()
    days = []
    day = first
    while day <= last:
        days.append(day)
        day += timedelta(days=1)
    return days


def top_pages(rows: Iterable[ViewRow], limit: int = TOP_PAGES_LIMIT) -> List[Dict]:
    counts = Counter(r.halaman for r in rows)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{"halaman": halaman, "visits": visits} for halaman, visits in ranked[:limit]]


def hourly_stats(rows: Iterable[ViewRow], tz: ZoneInfo) -> List[Dict]:
    buckets = [0] * 24
    for r in rows:
        buckets[as_utc(r.created_at).astimezone(tz).hour] += 1
    return [{"hour": hour, "visits": visits} for hour, visits in enumerate(buckets)]


def daily_stats(rows: Iterable[ViewRow], days: List[date], tz: ZoneInfo) -> List[Dict]:
    visits: Dict[date, int] = defaultdict(int)
    visitors: Dict[date, set] = defaultdict(set)
    for r in rows:
        day = as_utc(r.created_at).astimezone(tz).date()
        visits[day] += 1
        visitors[day].add(r.visitor_id)
    return [
        {
            "tanggal": day.isoformat(),
            "pengunjung_unik": len(visitors.get(day, ())),
            "total_kunjungan": visits.get(day, 0),
        }
        for day in days
    ]


def count_unique(rows: Iterable[ViewRow]) -> int:
    return len({r.visitor_id for r in rows})


def count_active(rows: Iterable[ViewRow], since: datetime) -> int:
    """Distinct visitors with a page view at or after ``since``."""
    since = as_utc(since)
    return len({r.visitor_id for r in rows if as_utc(r.created_at) >= since})


def in_range(rows: Iterable[ViewRow], start: datetime, end: datetime) -> List[ViewRow]:
    return [r for r in rows if start <= as_utc(r.created_at) < end]


def summarize(rows: Iterable[ViewRow], period: str, now: datetime, tz: ZoneInfo) -> Dict:
    start, end = period_bounds(period, now, tz)
    selected = in_range(rows, start, end)
    return {
        "period": period,
        "uniqueVisitors": count_unique(selected),
        "totalVisits": len(selected),
        "topPages": top_pages(selected),
        "hourlyStats": hourly_stats(selected, tz),
        "dailyStats": daily_stats(selected, period_days(period, now, tz), tz),
    }


def realtime_snapshot(rows: Iterable[ViewRow], now: datetime, tz: ZoneInfo, active_window: timedelta) -> Dict:
    rows = list(rows)
    start, end = period_bounds("today", now, tz)
    today_rows = in_range(rows, start, end)
    return {
        "activeVisitors": count_active(rows, as_utc(now) - active_window),
        "todayVisits": len(today_rows),
        "uniqueVisitors": count_unique(today_rows),
        "timestamp": as_utc(now).isoformat(),
    }
