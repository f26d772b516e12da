"""
Per-client throttle for game submissions, built on slowapi.

The limiter is attached to `app.state.limiter` in main.py and applied to
POST /api/game only; read endpoints are not throttled. Tests switch it
off through `limiter.enabled` (see conftest.py).
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


limiter = Limiter(key_func=client_address, enabled=True)
