"""Seed the database with demo blog posts, gallery items and testimonials.

The script is idempotent: rows are matched by their natural key (blog title,
gallery title, testimonial author + message) and only missing ones are added.
Tables are created if they do not exist yet, and the bootstrap admin from
ADMIN_EMAIL / ADMIN_PASSWORD is created as well.

Usage:
    python scripts/db_seed.py

The script reads DATABASE_URL from the environment (or .env).
"""
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when run as a plain script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select

from ciptamandiri.auth import bootstrap_admin
from ciptamandiri.config import DATABASE_URL
from ciptamandiri.database import Base, async_session_maker, engine
from ciptamandiri.models import Blog, Galeri, Testimonial
from ciptamandiri.slugs import resolve_unique_slug

logger = logging.getLogger("db_seed")

BLOG_POSTS = [
    {
        "judul": "Tips Memilih Rumah Pertama untuk Keluarga Muda",
        "ringkasan": "Panduan singkat sebelum membeli rumah pertama.",
        "konten": "<p>Perhatikan lokasi, akses transportasi, dan kemampuan cicilan.</p>",
        "kategori": "Tips",
        "penulis": "Tim Cipta Mandiri",
        "gambar_url": "/static/img/placeholder.svg",
    },
    {
        "judul": "Investasi Properti di Jakarta Selatan",
        "ringkasan": "Mengapa Jakarta Selatan tetap menarik bagi investor.",
        "konten": "<p>Permintaan sewa yang stabil dan infrastruktur yang terus berkembang.</p>",
        "kategori": "Investasi",
        "penulis": "Tim Cipta Mandiri",
        "gambar_url": "/static/img/placeholder.svg",
    },
    {
        "judul": "Memahami Biaya KPR",
        "ringkasan": "Komponen biaya KPR yang sering terlewat.",
        "konten": "<p>Biaya provisi, appraisal, notaris, dan asuransi perlu diperhitungkan.</p>",
        "kategori": "Tips",
        "penulis": "Tim Cipta Mandiri",
        "gambar_url": None,
    },
]

GALLERY = [
    {"judul": "Villa Modern Tropis", "lokasi": "Bali", "deskripsi": "4 kamar tidur, kolam renang pribadi.",
     "gambar_url": "/static/img/placeholder.svg"},
    {"judul": "Apartemen Premium", "lokasi": "Jakarta Pusat", "deskripsi": "Pemandangan kota, dekat MRT.",
     "gambar_url": "/static/img/placeholder.svg"},
    {"judul": "Rumah Keluarga", "lokasi": "Tangerang Selatan", "deskripsi": "Cluster dengan keamanan 24 jam.",
     "gambar_url": "/static/img/placeholder.svg"},
]

TESTIMONIALS = [
    {"nama": "Budi Santoso", "peran": "Pembeli Rumah", "pesan": "Prosesnya cepat dan transparan.",
     "rating": 5, "status": "disetujui"},
    {"nama": "Sari Wulandari", "peran": "Investor", "pesan": "Tim yang sangat membantu memilih unit.",
     "rating": 4, "status": "disetujui"},
    {"nama": "Andi", "peran": None, "pesan": "Menunggu serah terima unit.", "rating": 4, "status": "menunggu"},
]


async def seed_blog(session) -> int:
    added = 0
    for data in BLOG_POSTS:
        res = await session.execute(select(Blog.id).where(Blog.judul == data["judul"]))
        if res.first() is not None:
            continue
        session.add(Blog(slug=await resolve_unique_slug(session, data["judul"]), **data))
        await session.flush()
        added += 1
    return added


async def seed_gallery(session) -> int:
    added = 0
    for data in GALLERY:
        res = await session.execute(select(Galeri.id).where(Galeri.judul == data["judul"]))
        if res.first() is None:
            session.add(Galeri(**data))
            added += 1
    return added


async def seed_testimonials(session) -> int:
    added = 0
    for data in TESTIMONIALS:
        res = await session.execute(
            select(Testimonial.id).where(Testimonial.nama == data["nama"], Testimonial.pesan == data["pesan"])
        )
        if res.first() is None:
            session.add(Testimonial(**data))
            added += 1
    return added


async def main():
    logger.info("DB seed starting, DATABASE_URL=%s", DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await bootstrap_admin()

    async with async_session_maker() as session:
        blog = await seed_blog(session)
        gallery = await seed_gallery(session)
        testimonials = await seed_testimonials(session)
        await session.commit()

    logger.info("Seeded %s blog posts, %s gallery items, %s testimonials", blog, gallery, testimonials)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
