import logging
from typing import Any, Dict, List, Optional

import httpx

from ebay_mcp.core.concurrency import map_bounded
from ebay_mcp.core.config import Settings, settings as default_settings
from ebay_mcp.core.ebay import get_item_detail, search_item_summaries
from ebay_mcp.core.errors import UpstreamSearchError
from ebay_mcp.core.normalize import normalize_item
from ebay_mcp.core.query import sanitize_query
from ebay_mcp.core.token_cache import TokenCache, get_token_cache
from ebay_mcp.schemas.search import NormalizedItem, SearchQuery, SortOrder

logger = logging.getLogger(__name__)


def build_search_params(q: str, query: SearchQuery) -> Dict[str, Any]:
    """
    Browse API sort mapping:
      - best match: omit sort params
      - ending soon: sort=endingSoonest
      - price: sort=price with sortOrder ASC/DESC
    """
    params: Dict[str, Any] = {
        "q": q,
        "limit": str(query.limit),
        "offset": str(query.offset),
    }
    if query.sort == SortOrder.ENDING_SOON:
        params["sort"] = "endingSoonest"
    elif query.sort == SortOrder.PRICE_ASC:
        params["sort"] = "price"
        params["sortOrder"] = "ASC"
    elif query.sort == SortOrder.PRICE_DESC:
        params["sort"] = "price"
        params["sortOrder"] = "DESC"
    return params


def _candidate_ids(summaries: List[Dict[str, Any]]) -> List[str]:
    seen = set()
    ids: List[str] = []
    for s in summaries:
        item_id = s.get("itemId")
        if isinstance(item_id, str) and item_id.strip() and item_id not in seen:
            seen.add(item_id)
            ids.append(item_id)
    return ids


async def search_ebay(
    query: SearchQuery,
    *,
    cfg: Optional[Settings] = None,
    token_cache: Optional[TokenCache] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[NormalizedItem]:
    """
    Search + enrich:
      1) sanitize query (empty => [] with no network calls)
      2) item_summary/search with a cached bearer token
      3) item/{id} detail per result, at most DETAIL_CONCURRENCY in flight
      4) merge summary + detail per item (detail failures fall back to summary)
    """
    cfg = cfg or default_settings

    q = sanitize_query(query.query)
    if not q:
        return []

    cache = token_cache or get_token_cache()
    token = await cache.get_token()

    async with httpx.AsyncClient(timeout=cfg.HTTP_TIMEOUT_SECONDS, transport=transport) as client:
        try:
            data = await search_item_summaries(client, cfg, token, build_search_params(q, query))
        except UpstreamSearchError as e:
            if e.status_code == 401:
                # Token was revoked upstream; next call fetches a new one
                cache.invalidate()
            raise

        raw = data.get("itemSummaries")
        summaries = [s for s in raw if isinstance(s, dict)] if isinstance(raw, list) else []
        if not summaries:
            return []

        details: Dict[str, Dict[str, Any]] = {}
        if cfg.ENRICH_DETAILS:
            ids = _candidate_ids(summaries)

            async def fetch_detail(item_id: str) -> Dict[str, Any]:
                return await get_item_detail(client, cfg, token, item_id)

            outcomes = await map_bounded(ids, cfg.DETAIL_CONCURRENCY, fetch_detail)
            for item_id, outcome in zip(ids, outcomes):
                if outcome.ok:
                    details[item_id] = outcome.value
                else:
                    logger.warning("Detail fetch failed for %s; using summary fields: %s", item_id, outcome.error)

    return [normalize_item(s, details.get(str(s.get("itemId"))), cfg.web_base_url) for s in summaries]
