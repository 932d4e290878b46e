# ciptamandiri/main.py
import asyncio
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from . import config
from . import analytics, auth, blog, dashboard, gallery, pages, testimonials, uploads
from .database import Base, engine, ensure_database_exists

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cipta Mandiri Perkasa",
    description="Situs properti, blog, galeri, testimoni, dan panel admin dengan analitik pengunjung",
    version="1.0.0",
)

config.MEDIA_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=str(config.STATIC_DIR)), name="static")
app.mount(config.MEDIA_URL, uploads.MediaFiles(directory=str(config.MEDIA_DIR)), name="media")

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=config.CORS_ALLOW_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ Роутеры
app.include_router(auth.router)
app.include_router(blog.router)
app.include_router(testimonials.router)
app.include_router(gallery.router)
app.include_router(analytics.router)
app.include_router(dashboard.router)
app.include_router(uploads.router)
app.include_router(pages.router)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Layanan database sedang tidak tersedia, coba lagi nanti"},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.on_event("startup")
async def on_startup():
    # Create the database if missing; run in a thread since psycopg2 blocks.
    try:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, ensure_database_exists)
    except Exception:
        logger.warning("Could not ensure database exists", exc_info=True)

    # В production схему ведёт alembic; create_all только добавляет недостающие таблицы.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await auth.bootstrap_admin()
    await analytics.purge_old_page_views()


# ✅ OpenAPI с Bearer JWT (кнопка Authorize в /docs)
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schema["components"]["securitySchemes"]["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    app.openapi_schema = schema
    return app.openapi_schema

app.openapi = custom_openapi


if __name__ == "__main__":
    uvicorn.run("ciptamandiri.main:app", host="0.0.0.0", port=8000, reload=True)
