import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ebay_mcp.core.config import Settings
from ebay_mcp.core.errors import UpstreamDetailError, UpstreamSearchError

logger = logging.getLogger(__name__)

BROWSE_PATH = "/buy/browse/v1"


def _headers(cfg: Settings, token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        "Content-Type": "application/json",
        "X-EBAY-C-MARKETPLACE-ID": cfg.EBAY_MARKETPLACE_ID,
    }


async def search_item_summaries(
    client: httpx.AsyncClient,
    cfg: Settings,
    token: str,
    params: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Calls Browse API item_summary/search and returns the raw JSON response.
    """
    url = f"{cfg.api_base_url}{BROWSE_PATH}/item_summary/search"
    try:
        r = await client.get(url, params=params, headers=_headers(cfg, token))
    except httpx.HTTPError as e:
        raise UpstreamSearchError(f"eBay search request failed: {e}") from e

    if r.status_code >= 400:
        raise UpstreamSearchError("eBay search error", status_code=r.status_code, body=r.text)

    try:
        data = r.json()
    except ValueError:
        raise UpstreamSearchError("eBay search returned non-JSON body", status_code=r.status_code, body=r.text)

    if not isinstance(data, dict):
        raise UpstreamSearchError("eBay search returned unexpected payload", status_code=r.status_code, body=r.text)

    summaries = data.get("itemSummaries")
    logger.info(
        "eBay search q=%r status=%s count=%d",
        params.get("q"),
        r.status_code,
        len(summaries) if isinstance(summaries, list) else 0,
    )
    return data


async def get_item_detail(
    client: httpx.AsyncClient,
    cfg: Settings,
    token: str,
    item_id: str,
) -> Dict[str, Any]:
    """
    Calls Browse API item/{item_id}. item_id is the RESTful id ("v1|123|0").
    """
    url = f"{cfg.api_base_url}{BROWSE_PATH}/item/{quote(item_id, safe='')}"
    try:
        r = await client.get(url, headers=_headers(cfg, token))
    except httpx.HTTPError as e:
        raise UpstreamDetailError(f"eBay item detail request failed for {item_id}: {e}") from e

    if r.status_code >= 400:
        raise UpstreamDetailError(f"eBay item detail error for {item_id}", status_code=r.status_code, body=r.text)

    try:
        data = r.json()
    except ValueError:
        raise UpstreamDetailError(
            f"eBay item detail for {item_id} returned non-JSON body", status_code=r.status_code, body=r.text
        )

    if not isinstance(data, dict):
        raise UpstreamDetailError(
            f"eBay item detail for {item_id} returned unexpected payload", status_code=r.status_code, body=r.text
        )
    return data


def legacy_id_from_item_id(item_id: Optional[str]) -> Optional[str]:
    """
    "v1|110553221234|0" => "110553221234"
    """
    if not item_id:
        return None
    parts = str(item_id).split("|")
    if len(parts) >= 2 and parts[1].strip():
        return parts[1].strip()
    return None
