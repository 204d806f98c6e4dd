import math
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from ebay_mcp.core.errors import ValidationError

MIN_LIMIT = 1
MAX_LIMIT = 50
DEFAULT_LIMIT = 50


class SortOrder(str, Enum):
    BEST_MATCH = "BEST_MATCH"
    PRICE_ASC = "PRICE_ASC"
    PRICE_DESC = "PRICE_DESC"
    ENDING_SOON = "ENDING_SOON"


def _to_int(v: Any, name: str) -> int:
    if isinstance(v, bool):
        raise ValueError(f"{name} must be a number")
    if isinstance(v, str):
        v = v.strip()
    try:
        f = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number")
    if not math.isfinite(f):
        raise ValueError(f"{name} must be a finite number")
    return int(f)


class SearchQuery(BaseModel):
    """
    Arguments of the `search_ebay` tool, already clamped to what the Browse API accepts.
    """
    query: str = ""
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort: SortOrder = SortOrder.BEST_MATCH

    @field_validator("query", mode="before")
    @classmethod
    def _query_is_string(cls, v: Any) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("query must be a string")
        return v.strip()

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, v: Any) -> int:
        if v is None:
            return DEFAULT_LIMIT
        return max(MIN_LIMIT, min(_to_int(v, "limit"), MAX_LIMIT))

    @field_validator("offset", mode="before")
    @classmethod
    def _clamp_offset(cls, v: Any) -> int:
        if v is None:
            return 0
        return max(0, _to_int(v, "offset"))

    @field_validator("sort", mode="before")
    @classmethod
    def _normalize_sort(cls, v: Any) -> SortOrder:
        # Unknown sort values keep upstream default ranking
        key = str(v or "").strip().upper()
        try:
            return SortOrder(key)
        except ValueError:
            return SortOrder.BEST_MATCH

    @classmethod
    def from_arguments(cls, arguments: Any) -> "SearchQuery":
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValidationError("Tool arguments must be an object")
        try:
            return cls.model_validate(arguments)
        except PydanticValidationError as e:
            problems = "; ".join(err.get("msg", "") for err in e.errors())
            raise ValidationError(f"Invalid search_ebay arguments: {problems}")


class ItemImage(BaseModel):
    imageUrl: Optional[str] = None


class NormalizedItem(BaseModel):
    id: Optional[str] = None
    itemId: Optional[str] = None
    title: str = ""
    price: float = 0.0
    shipping: float = 0.0
    seller: str = "eBay Seller"
    sellerFeedbackPercent: float = 99.0
    itemWebUrl: Optional[str] = None
    image: ItemImage = Field(default_factory=ItemImage)
    itemEndDate: Optional[str] = None
    buyingOptions: List[str] = Field(default_factory=list)
