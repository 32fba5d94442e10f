"""
Pydantic models for the business-search proxy.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


ALL_PRICE_LEVELS = [1, 2, 3, 4]
SEARCH_PAGE_SIZE = 5


class SearchRequest(BaseModel):
    """Body of ``POST /yelp-data/{location}``."""

    model_config = ConfigDict(populate_by_name=True)

    offset: int = Field(0, alias="searchOffset", ge=0)
    open_now: Optional[bool] = Field(None, alias="searchIsOpenNow")
    sort_by: Optional[str] = Field(None, alias="searchSortBy", examples=["rating"])
    # Highest price level to include.  Left untyped so that any value the
    # client sends is accepted and unknown ones fall back to all levels.
    price: Any = Field(None, alias="searchPrice", examples=[2])

    def to_filters(self) -> "SearchFilters":
        return SearchFilters(
            offset=self.offset,
            open_now=self.open_now,
            sort_by=self.sort_by or None,
            price_levels=price_levels_up_to(self.price),
        )


@dataclass
class SearchFilters:
    offset: int = 0
    open_now: Optional[bool] = None
    sort_by: Optional[str] = None
    price_levels: Optional[List[int]] = None

    def __post_init__(self) -> None:
        if not self.price_levels:
            self.price_levels = list(ALL_PRICE_LEVELS)


def price_levels_up_to(max_price: Any) -> List[int]:
    """Return the cumulative price levels ``1..max_price``.

    Only 1, 2 and 3 narrow the search (JSON clients may send 2.0 for 2);
    anything else (missing, 4, strings, fractions, out of range)
    selects every level.
    """
    if isinstance(max_price, float) and max_price.is_integer():
        max_price = int(max_price)
    if isinstance(max_price, bool) or not isinstance(max_price, int):
        return list(ALL_PRICE_LEVELS)
    if 1 <= max_price <= 3:
        return list(range(1, max_price + 1))
    return list(ALL_PRICE_LEVELS)
