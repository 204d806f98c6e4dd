"""Shared fixtures: explicit settings and a token cache stub."""

import pytest

from ebay_mcp.core.config import Settings


class FakeTokenCache:
    """Stands in for TokenCache without any OAuth traffic."""

    def __init__(self, token: str = "test-token"):
        self.token = token
        self.calls = 0
        self.invalidated = False

    async def get_token(self) -> str:
        self.calls += 1
        return self.token

    def invalidate(self) -> None:
        self.invalidated = True


@pytest.fixture
def cfg():
    return Settings(
        _env_file=None,
        EBAY_CLIENT_ID="client-id",
        EBAY_CLIENT_SECRET="client-secret",
        EBAY_REFRESH_TOKEN="refresh-token",
        EBAY_ENV="production",
        EBAY_MARKETPLACE_ID="EBAY_US",
        DETAIL_CONCURRENCY=5,
        ENRICH_DETAILS=True,
        HTTP_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def token_cache():
    return FakeTokenCache()
