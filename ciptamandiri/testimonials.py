# ciptamandiri/testimonials.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_admin, get_optional_admin
from .database import get_session
from .models import Admin, Testimonial
from .schemas import (
    MessageOut, TestimonialCreate, TestimonialData, TestimonialList,
    TestimonialStatus, TestimonialStatusUpdate, TestimonialUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/testimonial", tags=["testimonial"])

NOT_FOUND = "Data testimoni tidak ditemukan"
REQUIRED_FIELDS = "Nama dan pesan harus diisi"
PUBLIC_STATUS = "disetujui"


def _validate(payload: TestimonialCreate) -> None:
    if not (payload.nama.strip() and payload.pesan.strip()):
        raise HTTPException(status_code=400, detail=REQUIRED_FIELDS)


async def list_testimonials(session: AsyncSession, status_filter: Optional[str] = None):
    stmt = select(Testimonial).order_by(Testimonial.created_at.desc(), Testimonial.id.desc())
    if status_filter:
        stmt = stmt.where(Testimonial.status == status_filter)
    res = await session.execute(stmt)
    return res.scalars().all()


async def _get_or_404(session: AsyncSession, testimonial_id: int) -> Testimonial:
    res = await session.execute(select(Testimonial).where(Testimonial.id == testimonial_id))
    item = res.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return item


@router.get("", response_model=TestimonialList)
async def get_testimonials(
    status: Optional[TestimonialStatus] = None,
    session: AsyncSession = Depends(get_session),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    # anonymous visitors only ever see approved testimonials
    if status != PUBLIC_STATUS and admin is None:
        raise HTTPException(status_code=401, detail="Token tidak valid")
    return {"data": await list_testimonials(session, status)}


# Публичная форма: отзыв всегда попадает на модерацию
@router.post("", response_model=TestimonialData, status_code=201)
async def submit_testimonial(payload: TestimonialCreate, session: AsyncSession = Depends(get_session)):
    _validate(payload)
    item = Testimonial(
        nama=payload.nama.strip(),
        peran=payload.peran or None,
        pesan=payload.pesan,
        rating=payload.rating,
        gambar_url=payload.gambar_url or None,
        status="menunggu",
    )
    session.add(item)
    await session.commit()
    await session.refresh(item)
    logger.info("Testimonial %s submitted, awaiting moderation", item.id)
    return {"data": item}


@router.get("/{testimonial_id}", response_model=TestimonialData)
async def get_testimonial(
    testimonial_id: int,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    return {"data": await _get_or_404(session, testimonial_id)}


@router.put("/{testimonial_id}", response_model=TestimonialData)
async def update_testimonial(
    testimonial_id: int,
    payload: TestimonialUpdate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    _validate(payload)
    item = await _get_or_404(session, testimonial_id)
    item.nama = payload.nama.strip()
    item.peran = payload.peran or None
    item.pesan = payload.pesan
    item.rating = payload.rating
    item.gambar_url = payload.gambar_url or None
    item.status = payload.status

    await session.commit()
    await session.refresh(item)
    return {"data": item}


@router.patch("/{testimonial_id}/status", response_model=TestimonialData)
async def moderate_testimonial(
    testimonial_id: int,
    payload: TestimonialStatusUpdate,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    item = await _get_or_404(session, testimonial_id)
    item.status = payload.status
    await session.commit()
    await session.refresh(item)
    logger.info("Testimonial %s set to %s by %s", item.id, item.status, current_admin.email)
    return {"data": item}


@router.delete("/{testimonial_id}", response_model=MessageOut)
async def delete_testimonial(
    testimonial_id: int,
    session: AsyncSession = Depends(get_session),
    current_admin: Admin = Depends(get_current_admin),
):
    item = await _get_or_404(session, testimonial_id)
    await session.delete(item)
    await session.commit()
    return {"message": "Data testimoni berhasil dihapus"}
