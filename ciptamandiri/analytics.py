# ciptamandiri/analytics.py
import asyncio
import csv
import io
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, List, Literal, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import StreamingResponse
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import config
from .aggregation import ViewRow, count_active, period_bounds, realtime_snapshot, summarize
from .auth import get_current_admin
from .database import async_session_maker, get_session
from .models import Admin, PageView
from .schemas import AnalyticsSummary, Period, RealTimeSnapshot, TrackPayload
from .tracking import (
    anonymize_ip, client_ip, is_tracked_path, normalize_path,
    parse_user_agent, sanitize_referrer, visitor_id_from,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analitik", tags=["analitik"])

VISITOR_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

EXPORT_HEADERS = {
    "visitors": ["Tanggal", "Pengunjung Unik", "Total Kunjungan"],
    "pages": ["Halaman", "Kunjungan"],
    "hourly": ["Jam", "Kunjungan"],
}


def site_tz() -> ZoneInfo:
    return ZoneInfo(config.SITE_TIMEZONE)


def active_window() -> timedelta:
    return timedelta(minutes=config.ACTIVE_WINDOW_MINUTES)


async def load_views(session: AsyncSession, since: datetime) -> List[ViewRow]:
    res = await session.execute(
        select(PageView.visitor_id, PageView.halaman, PageView.created_at)
        .where(PageView.created_at >= since)
        .order_by(PageView.created_at)
    )
    return [ViewRow(visitor_id=v, halaman=h, created_at=c) for v, h, c in res.all()]


async def build_summary(session: AsyncSession, period: str, now: datetime) -> dict:
    tz = site_tz()
    start, _ = period_bounds(period, now, tz)
    active_since = now - active_window()
    rows = await load_views(session, min(start, active_since))
    summary = summarize(rows, period, now, tz)
    summary["activeVisitors"] = count_active(rows, active_since)
    return summary


async def build_snapshot(session: AsyncSession, now: datetime) -> dict:
    tz = site_tz()
    start, _ = period_bounds("today", now, tz)
    rows = await load_views(session, min(start, now - active_window()))
    return realtime_snapshot(rows, now, tz, active_window())


async def live_feed(request: Request, interval: float, max_events: Optional[int] = None) -> AsyncIterator[str]:
    """Server-Sent Events: one realtime snapshot per ``interval`` seconds."""
    sent = 0
    while max_events is None or sent < max_events:
        if await request.is_disconnected():
            break
        try:
            async with async_session_maker() as session:
                snapshot = await build_snapshot(session, datetime.now(timezone.utc))
        except SQLAlchemyError:
            logger.exception("Realtime snapshot failed")
            yield "event: error\ndata: {}\n\n"
        else:
            yield f"data: {json.dumps(snapshot)}\n\n"
        sent += 1
        if max_events is None or sent < max_events:
            await asyncio.sleep(interval)


async def purge_old_page_views(retention_days: Optional[int] = None) -> int:
    days = config.ANALYTICS_RETENTION_DAYS if retention_days is None else retention_days
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    async with async_session_maker() as session:
        res = await session.execute(delete(PageView).where(PageView.created_at < cutoff))
        await session.commit()
    if res.rowcount:
        logger.info("Purged %s page views older than %s days", res.rowcount, days)
    return res.rowcount or 0


# 📍 Beacon публичных страниц
@router.post("/track")
async def track_page_view(
    payload: TrackPayload,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    visitor_id, is_new = visitor_id_from(request)
    if is_new:
        response.set_cookie(
            config.VISITOR_COOKIE,
            visitor_id,
            max_age=VISITOR_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )

    halaman = normalize_path(payload.halaman)
    if halaman is None or not is_tracked_path(halaman):
        return {"success": True, "tracked": False}

    ua_browser, ua_os = parse_user_agent(request.headers.get("User-Agent"))
    view = PageView(
        visitor_id=visitor_id,
        halaman=halaman,
        referrer=sanitize_referrer(payload.referrer or request.headers.get("Referer")),
        ua_browser=ua_browser,
        ua_os=ua_os,
        ip_bucket=anonymize_ip(client_ip(request)),
        created_at=datetime.now(timezone.utc),
    )
    try:
        session.add(view)
        await session.commit()
    except SQLAlchemyError:
        # reported in the body, never raised to the beacon
        logger.exception("Failed to record page view for %s", halaman)
        await session.rollback()
        return {"success": False, "tracked": False}
    return {"success": True, "tracked": True}


@router.get("", response_model=AnalyticsSummary)
async def analytics_summary(
    period: Period = Query("week"),
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    return await build_summary(session, period, datetime.now(timezone.utc))


@router.get("/realtime", response_model=RealTimeSnapshot)
async def analytics_realtime(
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    return await build_snapshot(session, datetime.now(timezone.utc))


@router.get("/stream")
async def analytics_stream(
    request: Request,
    current_admin: Admin = Depends(get_current_admin),
):
    return StreamingResponse(
        live_feed(request, config.STREAM_INTERVAL_SECONDS),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


def summary_to_csv(summary: dict, kind: str) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS[kind])
    if kind == "visitors":
        for day in summary["dailyStats"]:
            writer.writerow([day["tanggal"], day["pengunjung_unik"], day["total_kunjungan"]])
    elif kind == "pages":
        for page in summary["topPages"]:
            writer.writerow([page["halaman"], page["visits"]])
    else:
        for hour in summary["hourlyStats"]:
            writer.writerow([f"{hour['hour']}:00", hour["visits"]])
    return buf.getvalue()


@router.get("/export/{kind}")
async def analytics_export(
    kind: Literal["visitors", "pages", "hourly"],
    period: Period = Query("week"),
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    now = datetime.now(timezone.utc)
    summary = await build_summary(session, period, now)
    filename = f"{kind}_{now.astimezone(site_tz()).date().isoformat()}.csv"
    return Response(
        content=summary_to_csv(summary, kind),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
