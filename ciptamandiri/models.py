from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, func,
    CheckConstraint, Index,
)

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


TESTIMONIAL_STATUSES = ("menunggu", "disetujui", "ditolak")


# 👤 Администратор сайта
class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    nama = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


# 📰 Статья блога
class Blog(Base):
    __tablename__ = "blog"

    id = Column(Integer, primary_key=True, index=True)
    judul = Column(String(255), nullable=False)
    ringkasan = Column(Text, nullable=False)
    konten = Column(Text, nullable=False)
    gambar_url = Column(String(500), nullable=True)
    kategori = Column(String(100), nullable=True)
    penulis = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    tanggal_publikasi = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_blog_kategori", "kategori"),
        Index("ix_blog_tanggal_publikasi", "tanggal_publikasi"),
    )


# 💬 Отзыв клиента
class Testimonial(Base):
    __tablename__ = "testimonial"

    id = Column(Integer, primary_key=True, index=True)
    nama = Column(String(255), nullable=False)
    peran = Column(String(255), nullable=True)
    pesan = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    gambar_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="menunggu")  # menunggu/disetujui/ditolak
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_testimonial_rating_range"),
        CheckConstraint(
            "status IN ('menunggu', 'disetujui', 'ditolak')",
            name="ck_testimonial_status",
        ),
        Index("ix_testimonial_status_created", "status", "created_at"),
    )


# 🏠 Объект галереи
class Galeri(Base):
    __tablename__ = "galeri"

    id = Column(Integer, primary_key=True, index=True)
    judul = Column(String(255), nullable=False)
    lokasi = Column(String(255), nullable=False, default="")
    deskripsi = Column(Text, nullable=True)
    gambar_url = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


# 📊 Просмотр страницы
class PageView(Base):
    __tablename__ = "analitik"

    id = Column(Integer, primary_key=True, index=True)
    visitor_id = Column(String(64), nullable=False)
    halaman = Column(String(500), nullable=False)
    referrer = Column(String(255), nullable=True)   # only the host
    ua_browser = Column(String(50), nullable=True)
    ua_os = Column(String(50), nullable=True)
    ip_bucket = Column(String(80), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_analitik_created", "created_at"),
        Index("ix_analitik_halaman_created", "halaman", "created_at"),
    )
