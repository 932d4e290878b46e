import asyncio
import json
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ciptamandiri import analytics, config
from ciptamandiri.analytics import live_feed, purge_old_page_views, summary_to_csv
from ciptamandiri.database import async_session_maker
from ciptamandiri.models import PageView


class FakeRequest:
    async def is_disconnected(self):
        return False


def track(client, halaman):
    return client.post("/api/analitik/track", json={"halaman": halaman})


def test_track_sets_visitor_cookie_once(client):
    r = track(client, "/")
    assert r.json() == {"success": True, "tracked": True}
    visitor = r.cookies.get(config.VISITOR_COOKIE)
    assert visitor

    r = track(client, "/blog")
    assert r.json()["tracked"] is True
    assert config.VISITOR_COOKIE not in r.cookies


def test_admin_and_api_paths_are_not_tracked(client, admin_headers):
    assert track(client, "/admin/dashboard").json() == {"success": True, "tracked": False}
    assert track(client, "/api/blog").json()["tracked"] is False

    summary = client.get("/api/analitik", params={"period": "today"}, headers=admin_headers).json()
    assert summary["totalVisits"] == 0


def test_summary_counts_visits_and_visitors(client, admin_headers):
    track(client, "/")
    track(client, "/blog")
    client.cookies.clear()
    track(client, "/blog")

    r = client.get("/api/analitik", params={"period": "today"}, headers=admin_headers)
    assert r.status_code == 200
    summary = r.json()
    assert summary["totalVisits"] == 3
    assert summary["uniqueVisitors"] == 2
    assert summary["activeVisitors"] == 2
    assert summary["topPages"][0] == {"halaman": "/blog", "visits": 2}
    assert len(summary["hourlyStats"]) == 24
    assert len(summary["dailyStats"]) == 1


def test_summary_defaults_to_week_and_validates_period(client, admin_headers):
    r = client.get("/api/analitik", headers=admin_headers)
    assert r.json()["period"] == "week"
    assert len(r.json()["dailyStats"]) == 7

    assert client.get("/api/analitik", params={"period": "year"}, headers=admin_headers).status_code == 422


def test_read_endpoints_require_admin(client):
    assert client.get("/api/analitik").status_code == 401
    assert client.get("/api/analitik/realtime").status_code == 401
    assert client.get("/api/analitik/stream").status_code == 401
    assert client.get("/api/analitik/export/pages").status_code == 401


def test_realtime_snapshot(client, admin_headers):
    track(client, "/")
    r = client.get("/api/analitik/realtime", headers=admin_headers)
    assert r.status_code == 200
    snap = r.json()
    assert snap["activeVisitors"] == 1
    assert snap["todayVisits"] == 1
    assert snap["uniqueVisitors"] == 1
    assert snap["timestamp"]


def test_csv_export(client, admin_headers):
    track(client, "/galeri")
    r = client.get("/api/analitik/export/pages", params={"period": "today"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="pages_' in r.headers["content-disposition"]
    assert r.text.splitlines() == ["Halaman,Kunjungan", "/galeri,1"]

    r = client.get("/api/analitik/export/hourly", headers=admin_headers)
    lines = r.text.splitlines()
    assert lines[0] == "Jam,Kunjungan"
    assert lines[1].startswith("0:00,")
    assert len(lines) == 25

    assert client.get("/api/analitik/export/unknown", headers=admin_headers).status_code == 422


def test_summary_to_csv_visitors():
    summary = {"dailyStats": [{"tanggal": "2024-06-10", "pengunjung_unik": 2, "total_kunjungan": 5}]}
    assert summary_to_csv(summary, "visitors") == "Tanggal,Pengunjung Unik,Total Kunjungan\n2024-06-10,2,5\n"


def test_live_feed_emits_snapshots(client):
    track(client, "/")

    async def collect():
        return [event async for event in live_feed(FakeRequest(), 0, max_events=2)]

    events = asyncio.run(collect())
    assert len(events) == 2
    assert events[0].startswith("data: ")
    payload = json.loads(events[0][len("data: "):].strip())
    assert payload["todayVisits"] == 1


def test_purge_old_page_views(client):
    async def scenario():
        async with async_session_maker() as session:
            session.add(PageView(
                visitor_id="lama", halaman="/",
                created_at=datetime.now(timezone.utc) - timedelta(days=400),
            ))
            session.add(PageView(visitor_id="baru", halaman="/", created_at=datetime.now(timezone.utc)))
            await session.commit()
        return await purge_old_page_views(365)

    assert asyncio.run(scenario()) == 1


def test_track_ignores_unparseable_path(client):
    r = track(client, "//[beranda")
    assert r.status_code == 200
    assert r.json() == {"success": True, "tracked": False}


def test_track_reports_database_failure(client, admin_headers, monkeypatch):
    async def failing_commit(self):
        raise OperationalError("INSERT INTO analitik", {}, Exception("disk penuh"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    r = track(client, "/")
    assert r.status_code == 200
    assert r.json() == {"success": False, "tracked": False}

    monkeypatch.undo()
    summary = client.get("/api/analitik", params={"period": "today"}, headers=admin_headers).json()
    assert summary["totalVisits"] == 0


def test_stream_over_http_with_query_token(client, token, monkeypatch):
    one_event = live_feed
    monkeypatch.setattr(
        analytics, "live_feed", lambda request, interval: one_event(request, interval, max_events=1)
    )
    track(client, "/")

    r = client.get("/api/analitik/stream", params={"token": token})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/event-stream")
    assert r.text.startswith("data: ")
    assert json.loads(r.text[len("data: "):].strip())["todayVisits"] == 1
