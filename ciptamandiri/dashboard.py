from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_admin
from .database import get_session
from .models import Admin, Blog, Galeri, Testimonial, TESTIMONIAL_STATUSES
from .schemas import DashboardStats, RecentActivity

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

PER_TYPE = 3
MAX_ACTIVITIES = 10


def _sort_key(activity: dict) -> datetime:
    date = activity.get("date")
    if date is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date


def merge_activities(*groups: List[dict], limit: int = MAX_ACTIVITIES) -> List[dict]:
    merged = [a for group in groups for a in group]
    merged.sort(key=_sort_key, reverse=True)
    return merged[:limit]


@router.get("/activity", response_model=List[RecentActivity])
async def recent_activity(
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    blogs = await session.execute(
        select(Blog).order_by(Blog.tanggal_publikasi.desc(), Blog.id.desc()).limit(PER_TYPE)
    )
    testimonials = await session.execute(
        select(Testimonial).order_by(Testimonial.created_at.desc(), Testimonial.id.desc()).limit(PER_TYPE)
    )
    gallery = await session.execute(
        select(Galeri).order_by(Galeri.created_at.desc(), Galeri.id.desc()).limit(PER_TYPE)
    )

    return merge_activities(
        [
            {"id": b.id, "type": "blog", "title": b.judul, "date": b.tanggal_publikasi, "image": b.gambar_url}
            for b in blogs.scalars().all()
        ],
        [
            {"id": t.id, "type": "testimonial", "title": t.nama, "status": t.status,
             "date": t.created_at, "image": t.gambar_url}
            for t in testimonials.scalars().all()
        ],
        [
            {"id": g.id, "type": "gallery", "title": g.judul, "date": g.created_at, "image": g.gambar_url}
            for g in gallery.scalars().all()
        ],
    )


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    blog_count = (await session.execute(select(func.count()).select_from(Blog))).scalar_one()
    galeri_count = (await session.execute(select(func.count()).select_from(Galeri))).scalar_one()

    res = await session.execute(
        select(Testimonial.status, func.count()).group_by(Testimonial.status)
    )
    by_status = {s: 0 for s in TESTIMONIAL_STATUSES}
    by_status.update({s: c for s, c in res.all()})

    return {
        "blog": blog_count,
        "galeri": galeri_count,
        "testimonial": sum(by_status.values()),
        "testimonial_menunggu": by_status["menunggu"],
        "testimonial_disetujui": by_status["disetujui"],
        "testimonial_ditolak": by_status["ditolak"],
    }
