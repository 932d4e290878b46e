import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from . import config
from .database import async_session_maker, get_session
from .models import Admin
from .schemas import AdminLogin, AdminOut, TokenOut, TokenVerify, VerifyOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# New hashes use Argon2; bcrypt stays in the context so older hashes still verify.
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

INVALID_TOKEN = "Token tidak valid"


# 🔐 Утилиты
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except UnknownHashError:
        # unknown scheme in the DB is a failed login, not a 500
        return False
    except ValueError:
        return False


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the admin email carried by ``token`` or None when it is invalid."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    email = payload.get("sub")
    return email or None


def token_from_request(request: Request, bearer: Optional[str]) -> Optional[str]:
    # EventSource cannot send headers, so the stream passes ?token=
    if bearer:
        return bearer
    token = request.query_params.get("token")
    if token:
        return token
    return request.cookies.get(config.TOKEN_COOKIE)


async def admin_from_token(session: AsyncSession, token: Optional[str]) -> Optional[Admin]:
    if not token:
        return None
    email = decode_access_token(token)
    if email is None:
        return None
    result = await session.execute(select(Admin).where(Admin.email == email))
    return result.scalar_one_or_none()


async def get_optional_admin(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> Optional[Admin]:
    return await admin_from_token(session, token_from_request(request, bearer))


async def get_current_admin(
    admin: Optional[Admin] = Depends(get_optional_admin),
) -> Admin:
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin


# ✅ Логин
@router.post("/login", response_model=TokenOut)
async def login_admin(
    payload: AdminLogin,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    result = await session.execute(select(Admin).where(Admin.email == payload.email))
    admin = result.scalar_one_or_none()

    if not admin or not verify_password(payload.password, admin.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email atau password salah",
        )

    access_token = create_access_token({"sub": admin.email})
    response.set_cookie(
        config.TOKEN_COOKIE,
        access_token,
        max_age=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        samesite="lax",
    )
    logger.info("Admin %s logged in", admin.email)
    return {"access_token": access_token, "token_type": "bearer", "admin": admin}


# ✅ Проверка токена из localStorage админки
@router.post("/verify", response_model=VerifyOut)
async def verify_token(payload: TokenVerify, session: AsyncSession = Depends(get_session)):
    admin = await admin_from_token(session, payload.token)
    return {"success": admin is not None, "admin": admin}


@router.post("/logout", status_code=204)
async def logout(response: Response):
    response.delete_cookie(config.TOKEN_COOKIE, path="/")
    return


@router.get("/me", response_model=AdminOut)
async def get_me(current_admin: Admin = Depends(get_current_admin)):
    return current_admin


async def bootstrap_admin() -> Optional[Admin]:
    """Create the admin configured via ADMIN_EMAIL / ADMIN_PASSWORD if it does not exist yet."""
    if not config.ADMIN_EMAIL or not config.ADMIN_PASSWORD:
        return None

    async with async_session_maker() as session:
        result = await session.execute(select(Admin).where(Admin.email == config.ADMIN_EMAIL))
        admin = result.scalar_one_or_none()
        if admin is not None:
            return admin

        admin = Admin(
            email=config.ADMIN_EMAIL,
            nama=config.ADMIN_NAME,
            password_hash=get_password_hash(config.ADMIN_PASSWORD),
        )
        session.add(admin)
        await session.commit()
        await session.refresh(admin)
        logger.info("Created bootstrap admin %s", admin.email)
        return admin
