# ciptamandiri/blog.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_admin
from .database import get_session
from .models import Admin, Blog
from .schemas import BlogCreate, BlogData, BlogList, MessageOut
from .slugs import resolve_unique_slug, slug_for_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["blog"])

NOT_FOUND = "Data blog tidak ditemukan"
REQUIRED_FIELDS = "Judul, ringkasan, konten, dan penulis harus diisi"


def _validate(payload: BlogCreate) -> None:
    if not all(v and v.strip() for v in (payload.judul, payload.ringkasan, payload.konten, payload.penulis)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=REQUIRED_FIELDS)


async def find_post(session: AsyncSession, ident: str) -> Optional[Blog]:
    """Numeric identifiers are tried as ids first, then as a slug."""
    if ident.isdigit():
        res = await session.execute(select(Blog).where(Blog.id == int(ident)))
        post = res.scalar_one_or_none()
        if post is not None:
            return post
    res = await session.execute(select(Blog).where(Blog.slug == ident))
    return res.scalar_one_or_none()


async def list_posts(
    session: AsyncSession,
    kategori: Optional[str] = None,
    limit: Optional[int] = None,
    exclude_id: Optional[int] = None,
):
    stmt = select(Blog).order_by(Blog.tanggal_publikasi.desc(), Blog.id.desc())
    if kategori:
        stmt = stmt.where(Blog.kategori == kategori)
    if exclude_id is not None:
        stmt = stmt.where(Blog.id != exclude_id)
    if limit:
        stmt = stmt.limit(limit)
    res = await session.execute(stmt)
    return res.scalars().all()


async def list_categories(session: AsyncSession):
    res = await session.execute(
        select(Blog.kategori).where(Blog.kategori.is_not(None)).distinct().order_by(Blog.kategori)
    )
    return [k for k in res.scalars().all() if k]


@router.get("", response_model=BlogList)
async def get_posts(
    kategori: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    return {"data": await list_posts(session, kategori=kategori, limit=limit)}


@router.get("/categories")
async def get_categories(session: AsyncSession = Depends(get_session)):
    return {"data": await list_categories(session)}


@router.get("/{ident}", response_model=BlogData)
async def get_post(ident: str, session: AsyncSession = Depends(get_session)):
    post = await find_post(session, ident)
    if not post:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": post}


@router.post("", response_model=BlogData, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: BlogCreate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    _validate(payload)
    post = Blog(
        judul=payload.judul.strip(),
        ringkasan=payload.ringkasan,
        konten=payload.konten,
        gambar_url=payload.gambar_url,
        kategori=payload.kategori or None,
        penulis=payload.penulis,
        slug=await resolve_unique_slug(session, payload.judul),
    )
    session.add(post)
    await session.commit()
    await session.refresh(post)
    logger.info("Blog post %s created by %s (slug=%s)", post.id, current_admin.email, post.slug)
    return {"data": post}


@router.put("/{ident}", response_model=BlogData)
async def update_post(
    ident: str,
    payload: BlogCreate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    _validate(payload)
    post = await find_post(session, ident)
    if not post:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    post.slug = await slug_for_update(session, post, payload.judul)
    post.judul = payload.judul.strip()
    post.ringkasan = payload.ringkasan
    post.konten = payload.konten
    post.gambar_url = payload.gambar_url
    post.kategori = payload.kategori or None
    post.penulis = payload.penulis

    await session.commit()
    await session.refresh(post)
    logger.info("Blog post %s updated by %s (slug=%s)", post.id, current_admin.email, post.slug)
    return {"data": post}


@router.delete("/{ident}", response_model=MessageOut)
async def delete_post(
    ident: str,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    post = await find_post(session, ident)
    if not post:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    await session.delete(post)
    await session.commit()
    logger.info("Blog post %s deleted by %s", ident, current_admin.email)
    return {"message": "Data blog berhasil dihapus"}
