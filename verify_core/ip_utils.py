"""
Client IP Utilities
===================
Best-effort extraction of the requesting network address.
"""

from typing import Mapping, Optional

LOOPBACK_PLACEHOLDER = "127.0.0.1"


def extract_client_ip(
    headers: Optional[Mapping[str, str]] = None,
    peer: Optional[str] = None,
) -> str:
    """
    Resolve the client address used for per-IP throttling.

    Takes the first ``X-Forwarded-For`` hop, then the socket peer. An
    unknown address never rejects a request; it falls back to loopback.

    Args:
        headers: Request headers (case-insensitive mapping or plain dict)
        peer: Socket peer host, if known

    Returns:
        Client IP string
    """
    if headers:
        forwarded = headers.get("x-forwarded-for") or headers.get("X-Forwarded-For")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first

    if peer:
        return peer

    return LOOPBACK_PLACEHOLDER
