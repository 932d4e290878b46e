# ciptamandiri/schemas.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

TestimonialStatus = Literal["menunggu", "disetujui", "ditolak"]
Period = Literal["today", "yesterday", "week", "month"]


# 👤 Администратор
class AdminOut(BaseModel):
    id: int
    email: EmailStr
    nama: str
    class Config:
        from_attributes = True


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class TokenVerify(BaseModel):
    token: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminOut


class VerifyOut(BaseModel):
    success: bool
    admin: Optional[AdminOut] = None


# 📰 Блог
class BlogBase(BaseModel):
    judul: str
    ringkasan: str
    konten: str
    gambar_url: Optional[str] = None
    kategori: Optional[str] = None
    penulis: str

class BlogCreate(BlogBase):
    pass

class BlogOut(BlogBase):
    id: int
    slug: str
    tanggal_publikasi: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class BlogData(BaseModel):
    data: BlogOut

class BlogList(BaseModel):
    data: List[BlogOut]


# 💬 Отзывы
class TestimonialCreate(BaseModel):
    nama: str = Field(min_length=1, max_length=255)
    peran: Optional[str] = None
    pesan: str = Field(min_length=1)
    rating: int = Field(default=5, ge=1, le=5)
    gambar_url: Optional[str] = None

class TestimonialUpdate(TestimonialCreate):
    status: TestimonialStatus = "menunggu"

class TestimonialStatusUpdate(BaseModel):
    status: TestimonialStatus

class TestimonialOut(BaseModel):
    id: int
    nama: str
    peran: Optional[str] = None
    pesan: str
    rating: int
    gambar_url: Optional[str] = None
    status: TestimonialStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class TestimonialData(BaseModel):
    data: TestimonialOut

class TestimonialList(BaseModel):
    data: List[TestimonialOut]


# 🏠 Галерея
class GaleriBase(BaseModel):
    judul: str = Field(min_length=1, max_length=255)
    lokasi: str = ""
    deskripsi: Optional[str] = None
    gambar_url: str = Field(min_length=1)

class GaleriCreate(GaleriBase):
    pass

class GaleriOut(GaleriBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class GaleriData(BaseModel):
    data: GaleriOut

class GaleriList(BaseModel):
    data: List[GaleriOut]


class MessageOut(BaseModel):
    message: str


# 📊 Аналитика (ключи совпадают с тем, что ожидает дашборд)
class TrackPayload(BaseModel):
    halaman: str = Field(min_length=1, max_length=500)
    referrer: Optional[str] = None


class TopPage(BaseModel):
    halaman: str
    visits: int

class HourlyStat(BaseModel):
    hour: int
    visits: int

class DailyStat(BaseModel):
    tanggal: str
    pengunjung_unik: int
    total_kunjungan: int

class AnalyticsSummary(BaseModel):
    period: Period
    uniqueVisitors: int
    totalVisits: int
    topPages: List[TopPage]
    activeVisitors: int
    hourlyStats: List[HourlyStat]
    dailyStats: List[DailyStat]

class RealTimeSnapshot(BaseModel):
    activeVisitors: int
    todayVisits: int
    uniqueVisitors: int
    timestamp: str


# 🗂️ Дашборд
class RecentActivity(BaseModel):
    id: int
    type: Literal["blog", "testimonial", "gallery"]
    title: str
    status: Optional[str] = None
    date: Optional[datetime] = None
    image: Optional[str] = None

class DashboardStats(BaseModel):
    blog: int
    galeri: int
    testimonial: int
    testimonial_menunggu: int
    testimonial_disetujui: int
    testimonial_ditolak: int


class UploadOut(BaseModel):
    url: str
