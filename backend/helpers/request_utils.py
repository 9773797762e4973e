"""
Request utilities for identifying the calling client.
"""

from typing import Optional

from fastapi import Request


def get_peer_ip(request: Request) -> Optional[str]:
    """Address of the directly connected peer, ignoring proxy headers."""
    if request.client:
        return request.client.host
    return None


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract the client's real IP address from proxy headers.

    Only meaningful behind a trusted reverse proxy; otherwise callers can
    forge these headers. Handles common proxy headers in order of precedence:
    1. CF-Connecting-IP (Cloudflare)
    2. X-Real-IP (nginx)
    3. X-Forwarded-For (standard proxy header, first IP)
    4. Direct client.host

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or None if not available
    """
    # Cloudflare
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()

    # nginx proxy
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    # Comma-separated, first is client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_ip = forwarded_for.split(",")[0].strip()
        if first_ip:
            return first_ip

    return get_peer_ip(request)
