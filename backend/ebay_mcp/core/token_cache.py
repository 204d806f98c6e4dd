"""
Process-wide eBay OAuth token cache.

Reads of a still-valid token never wait on the lock. Refreshes are serialized
behind an asyncio.Lock, and the new Credential replaces the old one in a single
assignment, so a reader sees either the previous credential or the new one.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from ebay_mcp.core.config import Settings, settings as default_settings
from ebay_mcp.core.errors import AuthConfigError, UpstreamAuthError

logger = logging.getLogger(__name__)

# Never hand out a token closer than this to its expiry
MIN_SAFETY_MARGIN_SECONDS = 60.0


@dataclass(frozen=True)
class Credential:
    token: str
    expires_at: float  # on the owning cache's clock


Fetcher = Callable[[], Awaitable[Credential]]


async def fetch_access_token(
    cfg: Settings,
    *,
    clock: Callable[[], float] = time.monotonic,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Credential:
    """
    Calls the eBay OAuth endpoint and returns a fresh Credential.

    Grant is `refresh_token` when a refresh token is configured (or forced via
    EBAY_GRANT_TYPE), otherwise `client_credentials`.
    """
    client_id = cfg.EBAY_CLIENT_ID.strip()
    client_secret = cfg.EBAY_CLIENT_SECRET.strip()
    refresh_token = cfg.EBAY_REFRESH_TOKEN.strip()
    grant_type = cfg.grant_type

    if not client_id or not client_secret:
        raise AuthConfigError("Missing eBay credentials. Set EBAY_CLIENT_ID and EBAY_CLIENT_SECRET.")
    if grant_type == "refresh_token" and not refresh_token:
        raise AuthConfigError("EBAY_GRANT_TYPE=refresh_token requires EBAY_REFRESH_TOKEN.")

    form = {"grant_type": grant_type, "scope": cfg.EBAY_OAUTH_SCOPE}
    if grant_type == "refresh_token":
        form["refresh_token"] = refresh_token

    url = f"{cfg.api_base_url}/identity/v1/oauth2/token"
    try:
        async with httpx.AsyncClient(timeout=cfg.HTTP_TIMEOUT_SECONDS, transport=transport) as client:
            r = await client.post(
                url,
                data=form,
                auth=(client_id, client_secret),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
    except httpx.HTTPError as e:
        raise UpstreamAuthError(f"eBay token request failed: {e}") from e

    if r.status_code >= 400:
        raise UpstreamAuthError("eBay token refresh failed", status_code=r.status_code, body=r.text)

    try:
        data = r.json()
    except ValueError:
        raise UpstreamAuthError("eBay token refresh returned non-JSON body", status_code=r.status_code, body=r.text)

    token = data.get("access_token") if isinstance(data, dict) else None
    try:
        expires_in = float(data.get("expires_in") or 0) if isinstance(data, dict) else 0.0
    except (TypeError, ValueError):
        expires_in = 0.0

    if not isinstance(token, str) or not token or not math.isfinite(expires_in) or expires_in <= 0:
        raise UpstreamAuthError(
            "eBay token refresh returned unexpected payload", status_code=r.status_code, body=r.text
        )

    logger.info("Obtained eBay access token via %s grant (expires in %ss)", grant_type, int(expires_in))
    return Credential(token=token, expires_at=clock() + expires_in)


class TokenCache:
    """
    Single-owner holder for one bearer credential.

    fetcher: coroutine returning a new Credential on the same clock as `clock`.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        safety_margin: float = MIN_SAFETY_MARGIN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetcher = fetcher
        self._margin = max(float(safety_margin), MIN_SAFETY_MARGIN_SECONDS)
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def _usable(self, cred: Optional[Credential]) -> bool:
        return cred is not None and cred.expires_at - self._clock() > self._margin

    async def get_token(self) -> str:
        cred = self._credential
        if self._usable(cred):
            return cred.token  # type: ignore[union-attr]

        async with self._lock:
            # Another caller may have refreshed while we waited
            cred = self._credential
            if self._usable(cred):
                return cred.token  # type: ignore[union-attr]
            return await self._refresh_locked()

    async def refresh(self) -> str:
        """Forces a new token regardless of the cached one."""
        async with self._lock:
            return await self._refresh_locked()

    def invalidate(self) -> None:
        self._credential = None

    async def _refresh_locked(self) -> str:
        cred = await self._fetcher()
        if not self._usable(cred):
            raise UpstreamAuthError("eBay token expires within the safety margin; refusing to cache it")
        self._credential = cred
        return cred.token


_token_cache: Optional[TokenCache] = None


def get_token_cache() -> TokenCache:
    """
    Lazily builds the process-wide cache bound to the module settings.
    """
    global _token_cache
    if _token_cache is None:
        cfg = default_settings
        clock = time.monotonic
        _token_cache = TokenCache(
            lambda: fetch_access_token(cfg, clock=clock),
            safety_margin=cfg.TOKEN_SAFETY_MARGIN_SECONDS,
            clock=clock,
        )
    return _token_cache
