"""
Merges a Browse API item summary with its (optional) item detail record.

Each output field is resolved from an ordered chain of candidates:
detail record first, then summary record, then a fixed default.
"""

import math
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

from ebay_mcp.core.ebay import legacy_id_from_item_id
from ebay_mcp.schemas.search import ItemImage, NormalizedItem

DEFAULT_SELLER = "eBay Seller"
DEFAULT_FEEDBACK_PERCENT = 99.0


def _present(v: Any) -> bool:
    if v is None:
        return False
    if isinstance(v, str):
        return bool(v.strip())
    if isinstance(v, (list, tuple, dict)):
        return len(v) > 0
    if isinstance(v, float):
        return math.isfinite(v)
    return True


def first_defined(*candidates: Any, default: Any = None) -> Any:
    """
    First candidate that is not None / blank / empty / non-finite; else default.
    """
    for c in candidates:
        if _present(c):
            return c.strip() if isinstance(c, str) else c
    return default


def _as_number(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        if isinstance(v, (int, float)):
            f = float(v)
        else:
            f = float(str(v).replace(",", "").strip())
    except (ValueError, OverflowError):
        return None
    return f if math.isfinite(f) else None


def first_number(*candidates: Any, default: float = 0.0) -> float:
    """
    Like first_defined, but candidates must parse as finite numbers ("19.99" ok).
    """
    for c in candidates:
        n = _as_number(c)
        if n is not None:
            return n
    return default


def dig(obj: Any, *path: Any) -> Any:
    """
    Safe nested lookup: dig(d, "price", "value") / dig(d, "shippingOptions", 0, "shippingCost").
    """
    cur = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, list) or len(cur) <= key:
                return None
            cur = cur[key]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(key)
        if cur is None:
            return None
    return cur


def _price_candidates(rec: Dict[str, Any]) -> List[Any]:
    return [dig(rec, "price", "value"), dig(rec, "price", "convertedFromValue")]


def _shipping_candidates(rec: Dict[str, Any]) -> List[Any]:
    return [
        dig(rec, "shippingOptions", 0, "shippingCost", "value"),
        dig(rec, "shippingOptions", 0, "shippingCost", "convertedFromValue"),
    ]


def first_str(*candidates: Any, default: Optional[str] = None) -> Optional[str]:
    """
    first_defined restricted to non-blank strings; dicts, lists and numbers are skipped.
    """
    return first_defined(*(c for c in candidates if isinstance(c, str)), default=default)


def _id_str(v: Any) -> Optional[str]:
    # ids may arrive as JSON numbers
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return str(v)
    return v if isinstance(v, str) else None


def _string_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x) for x in v if _present(x)]


def build_item_web_url(
    detail: Dict[str, Any],
    summary: Dict[str, Any],
    web_base_url: str,
) -> Optional[str]:
    """
    Preference:
      1) detail itemWebUrl
      2) summary itemWebUrl
      3) {web}/itm/{legacyItemId}
      4) {web}/sch/i.html?_nkw={title}
    """
    direct = first_str(detail.get("itemWebUrl"), summary.get("itemWebUrl"))
    if direct:
        return direct

    legacy = first_str(
        _id_str(detail.get("legacyItemId")),
        _id_str(summary.get("legacyItemId")),
        legacy_id_from_item_id(first_str(_id_str(detail.get("itemId")), _id_str(summary.get("itemId")))),
    )
    if legacy:
        return f"{web_base_url}/itm/{quote_plus(legacy)}"

    title = first_str(detail.get("title"), summary.get("title"))
    if title:
        return f"{web_base_url}/sch/i.html?_nkw={quote_plus(title)}"

    return None


def normalize_item(
    summary: Dict[str, Any],
    detail: Optional[Dict[str, Any]],
    web_base_url: str = "https://www.ebay.com",
) -> NormalizedItem:
    d = detail if isinstance(detail, dict) else {}
    s = summary if isinstance(summary, dict) else {}

    item_id = first_str(_id_str(d.get("itemId")), _id_str(s.get("itemId")))

    title = first_str(d.get("title"), s.get("title"), default="")

    buying_options = first_defined(
        _string_list(d.get("buyingOptions")),
        _string_list(s.get("buyingOptions")),
        default=[],
    )

    return NormalizedItem(
        id=item_id,
        itemId=item_id,
        title=title,
        price=first_number(*_price_candidates(d), *_price_candidates(s)),
        shipping=first_number(*_shipping_candidates(d), *_shipping_candidates(s)),
        seller=first_str(dig(d, "seller", "username"), dig(s, "seller", "username"), default=DEFAULT_SELLER),
        sellerFeedbackPercent=first_number(
            dig(d, "seller", "feedbackPercentage"),
            dig(s, "seller", "feedbackPercentage"),
            default=DEFAULT_FEEDBACK_PERCENT,
        ),
        itemWebUrl=build_item_web_url(d, s, web_base_url),
        image=ItemImage(
            imageUrl=first_str(
                dig(d, "image", "imageUrl"),
                dig(s, "image", "imageUrl"),
                dig(s, "thumbnailImages", 0, "imageUrl"),
            )
        ),
        itemEndDate=first_str(d.get("itemEndDate"), s.get("itemEndDate")),
        buyingOptions=list(buying_options),
    )
