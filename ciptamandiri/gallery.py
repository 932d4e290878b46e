# ciptamandiri/gallery.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_admin
from .database import get_session
from .models import Admin, Galeri
from .schemas import GaleriCreate, GaleriData, GaleriList, MessageOut

router = APIRouter(prefix="/api/galeri", tags=["galeri"])

NOT_FOUND = "Data galeri tidak ditemukan"


async def list_gallery(session: AsyncSession, limit: Optional[int] = None):
    stmt = select(Galeri).order_by(Galeri.created_at.desc(), Galeri.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    res = await session.execute(stmt)
    return res.scalars().all()


async def _get_or_404(session: AsyncSession, item_id: int) -> Galeri:
    res = await session.execute(select(Galeri).where(Galeri.id == item_id))
    item = res.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return item


@router.get("", response_model=GaleriList)
async def get_gallery(
    limit: Optional[int] = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    return {"data": await list_gallery(session, limit)}


@router.get("/{item_id}", response_model=GaleriData)
async def get_gallery_item(item_id: int, session: AsyncSession = Depends(get_session)):
    return {"data": await _get_or_404(session, item_id)}


@router.post("", response_model=GaleriData, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    payload: GaleriCreate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    item = Galeri(**payload.model_dump())
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return {"data": item}


@router.put("/{item_id}", response_model=GaleriData)
async def update_gallery_item(
    item_id: int,
    payload: GaleriCreate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    item = await _get_or_404(session, item_id)
    item.judul = payload.judul
    item.lokasi = payload.lokasi
    item.deskripsi = payload.deskripsi
    item.gambar_url = payload.gambar_url

    await session.commit()
    await session.refresh(item)
    return {"data": item}


@router.delete("/{item_id}", response_model=MessageOut)
async def delete_gallery_item(
    item_id: int,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    item = await _get_or_404(session, item_id)
    await session.delete(item)
    await session.commit()
    return {"message": "Data galeri berhasil dihapus"}
