from datetime import datetime
from typing import Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from . import config
from .aggregation import as_utc
from .blog import find_post, list_categories, list_posts
from .database import get_session
from .gallery import list_gallery
from .testimonials import list_testimonials

templates = Jinja2Templates(directory=str(config.TEMPLATES_DIR))
router = APIRouter(include_in_schema=False)

BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

HOME_GALLERY_LIMIT = 6
HOME_BLOG_LIMIT = 3
RECENT_POSTS_LIMIT = 5


def format_tanggal(value: Optional[datetime]) -> str:
    """``dd MMMM yyyy`` with Indonesian month names."""
    if value is None:
        return ""
    value = as_utc(value).astimezone(ZoneInfo(config.SITE_TIMEZONE))
    return f"{value.day:02d} {BULAN[value.month - 1]} {value.year}"


def share_url(platform: str, url: str, title: str = "") -> str:
    u = quote(url, safe="")
    if platform == "facebook":
        return f"https://www.facebook.com/sharer/sharer.php?u={u}"
    if platform == "twitter":
        return f"https://twitter.com/intent/tweet?url={u}&text={quote(title, safe='')}"
    if platform == "linkedin":
        return f"https://www.linkedin.com/sharing/share-offsite/?url={u}"
    return ""


def stars(rating: int) -> str:
    rating = max(0, min(5, int(rating or 0)))
    return "★" * rating + "☆" * (5 - rating)


templates.env.filters["tanggal"] = format_tanggal
templates.env.filters["stars"] = stars
templates.env.globals["share_url"] = share_url


def not_found(request: Request, message: str):
    return templates.TemplateResponse(request, "404.html", {"message": message}, status_code=404)


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request, session: AsyncSession = Depends(get_session)):
    ctx = {
        "gallery": await list_gallery(session, HOME_GALLERY_LIMIT),
        "posts": await list_posts(session, limit=HOME_BLOG_LIMIT),
        "testimonials": await list_testimonials(session, "disetujui"),
        "contact_info": config.CONTACT_INFO,
    }
    return templates.TemplateResponse(request, "index.html", ctx)


@router.get("/blog", response_class=HTMLResponse)
async def blog_list_page(
    request: Request,
    kategori: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    ctx = {
        "posts": await list_posts(session, kategori=kategori),
        "categories": await list_categories(session),
        "kategori": kategori,
    }
    return templates.TemplateResponse(request, "blog_list.html", ctx)


@router.get("/blog/{slug}", response_class=HTMLResponse)
async def blog_detail_page(request: Request, slug: str, session: AsyncSession = Depends(get_session)):
    post = await find_post(session, slug)
    if post is None:
        return not_found(request, "Maaf, artikel yang Anda cari tidak ditemukan atau telah dihapus.")

    ctx = {
        "post": post,
        "recent_posts": await list_posts(session, limit=RECENT_POSTS_LIMIT, exclude_id=post.id),
        "categories": await list_categories(session),
        "page_url": str(request.url),
    }
    return templates.TemplateResponse(request, "blog_detail.html", ctx)


@router.get("/galeri", response_class=HTMLResponse)
async def gallery_page(request: Request, session: AsyncSession = Depends(get_session)):
    return templates.TemplateResponse(request, "galeri.html", {"gallery": await list_gallery(session)})


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


# Админка: страницы-оболочки, данные подгружает admin.js через REST API
@router.get("/admin", response_class=HTMLResponse)
@router.get("/admin/dashboard", response_class=HTMLResponse)
async def admin_dashboard_page(request: Request):
    return templates.TemplateResponse(request, "admin/dashboard.html", {"section": "dashboard"})


@router.get("/admin/blog", response_class=HTMLResponse)
async def admin_blog_page(request: Request):
    return templates.TemplateResponse(request, "admin/blog.html", {"section": "blog"})


@router.get("/admin/galeri", response_class=HTMLResponse)
async def admin_gallery_page(request: Request):
    return templates.TemplateResponse(request, "admin/galeri.html", {"section": "galeri"})


@router.get("/admin/testimoni", response_class=HTMLResponse)
async def admin_testimonial_page(request: Request):
    return templates.TemplateResponse(request, "admin/testimoni.html", {"section": "testimoni"})
