"""Address discovery for the startup banner."""
from __future__ import annotations

import logging
import socket
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def get_lan_ip() -> Optional[str]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packet is sent; connecting only selects the outbound interface.
        sock.connect(("8.8.8.8", 80))
        address = sock.getsockname()[0]
    except OSError:
        return None
    finally:
        sock.close()
    if address.startswith("127."):
        return None
    return address


async def get_public_ip(
    url: str = "https://icanhazip.com",
    *,
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    """Ask an echo service for our public address; None when unreachable."""

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url)
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Could not determine public IP address: %s", exc)
        return None
    return resp.text.strip() or None
