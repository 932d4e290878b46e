"""Privacy helpers for the page-view beacon."""
import hashlib
import hmac
import ipaddress
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse

from fastapi import Request

from . import config

UNTRACKED_PREFIXES = ("/admin", "/api", "/login", "/static", "/media")


def anonymize_ip(raw_ip: Optional[str]) -> str:
    """
    Truncate the address (IPv4 /16, IPv6 /32) and HMAC it with the secret salt.
    Returns something like "v4:abcd1234abcd1234".
    """
    if not raw_ip:
        return "unknown"
    try:
        ip_obj = ipaddress.ip_address(raw_ip.strip())
    except ValueError:
        return "invalid"

    if isinstance(ip_obj, ipaddress.IPv4Address):
        network = ipaddress.ip_network(f"{ip_obj}/16", strict=False)
        version = "v4"
    else:
        network = ipaddress.ip_network(f"{ip_obj}/32", strict=False)
        version = "v6"
    truncated = str(network.network_address)

    digest = hmac.new(
        config.ANALYTICS_IP_SALT.encode("utf-8"), truncated.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"{version}:{digest[:16]}"


def parse_user_agent(ua: Optional[str]) -> Tuple[str, str]:
    """Coarse browser + OS classification."""
    ua_lower = (ua or "").lower()

    if "firefox" in ua_lower and "seamonkey" not in ua_lower:
        browser = "Firefox"
    elif "edg" in ua_lower:
        browser = "Edge"
    elif "chrome" in ua_lower and "chromium" not in ua_lower:
        browser = "Chrome"
    elif "safari" in ua_lower and "chrome" not in ua_lower:
        browser = "Safari"
    elif "chromium" in ua_lower:
        browser = "Chromium"
    else:
        browser = "Other"

    if "windows" in ua_lower:
        os_name = "Windows"
    elif "android" in ua_lower:
        os_name = "Android"
    elif "iphone" in ua_lower or "ipad" in ua_lower:
        os_name = "iOS"
    elif "mac os x" in ua_lower or "macintosh" in ua_lower:
        os_name = "macOS"
    elif "linux" in ua_lower:
        os_name = "Linux"
    else:
        os_name = "Other"

    return browser, os_name


def sanitize_referrer(raw_ref: Optional[str]) -> Optional[str]:
    """Keep only the hostname of the referrer."""
    if not raw_ref:
        return None
    try:
        host = urlparse(raw_ref).hostname
    except ValueError:
        return None
    return host[:255] if host else None


def normalize_path(halaman: str) -> Optional[str]:
    """Path component of ``halaman``, or None when it cannot be parsed."""
    try:
        path = urlparse(halaman.strip()).path or "/"
    except ValueError:
        return None
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path[:500]


def is_tracked_path(path: str) -> bool:
    return not any(path == p or path.startswith(p + "/") for p in UNTRACKED_PREFIXES)


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def visitor_id_from(request: Request) -> Tuple[str, bool]:
    """Return ``(visitor_id, is_new)``; new ids must be written back as a cookie."""
    existing = request.cookies.get(config.VISITOR_COOKIE)
    if existing and len(existing) <= 64:
        return existing, False
    return uuid.uuid4().hex, True
