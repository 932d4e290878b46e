"""Blog slug generation and collision resolution.

A slug is derived from the post title. When another post already owns the
same slug, the last six digits of the current epoch-milliseconds are appended
(``judul-artikel-482913``).
"""
import re
import time
import unicodedata
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Blog

MAX_SLUG_LENGTH = 200
FALLBACK_SLUG = "artikel"


def generate_slug(judul: str) -> str:
    text = unicodedata.normalize("NFKD", judul or "")
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    text = text.strip("-")[:MAX_SLUG_LENGTH].rstrip("-")
    if text.isdigit():
        # numeric path segments are read as ids by the blog routes
        return f"{FALLBACK_SLUG}-{text}"
    return text or FALLBACK_SLUG


def timestamp_suffix(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return str(now_ms)[-6:]


async def slug_taken(session: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Blog.id).where(Blog.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Blog.id != exclude_id)
    res = await session.execute(stmt.limit(1))
    return res.first() is not None


async def resolve_unique_slug(
    session: AsyncSession,
    judul: str,
    exclude_id: Optional[int] = None,
    now_ms: Optional[int] = None,
) -> str:
    slug = generate_slug(judul)
    if await slug_taken(session, slug, exclude_id):
        return f"{slug}-{timestamp_suffix(now_ms)}"
    return slug


async def slug_for_update(session: AsyncSession, post: Blog, new_judul: str) -> str:
    # an unchanged title keeps whatever slug the post already has (suffix included)
    if generate_slug(new_judul) == generate_slug(post.judul):
        return post.slug
    return await resolve_unique_slug(session, new_judul, exclude_id=post.id)
