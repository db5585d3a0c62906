import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
# Keeps OFFSET within a 64-bit integer for any limit up to MAX_LIMIT.
MAX_PAGE = 1_000_000_000

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


class SortOrder(str, Enum):
    LATEST = "latest"
    DEADLINE = "deadline"
    MINISTRY = "ministry"


@dataclass(frozen=True)
class JobFilters:
    """Optional listing filters; absent fields add no restriction."""

    search: Optional[str] = None
    ministry: Optional[str] = None

    def is_empty(self) -> bool:
        return self.search is None and self.ministry is None


@dataclass(frozen=True)
class ListingParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    filters: JobFilters = field(default_factory=JobFilters)
    sort_by: SortOrder = SortOrder.LATEST

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _leading_int(value: Any) -> Optional[int]:
    """Read an integer prefix from a query value ("12abc" -> 12), or None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return None
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else None


def _positive_or(value: Any, default: int) -> int:
    n = _leading_int(value)
    if n is None or n < 1:
        return default
    return n


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value != "":
        return value
    return None


def parse_sort_order(value: Any) -> SortOrder:
    try:
        return SortOrder(value)
    except ValueError:
        return SortOrder.LATEST


def parse_listing_params(query: Mapping[str, Any]) -> ListingParams:
    """
    Normalize raw query parameters for the listing endpoint.

    Never fails: malformed or missing numbers fall back to defaults,
    limit is clamped to MAX_LIMIT and page to MAX_PAGE, unknown sort
    orders mean "latest".
    """
    return ListingParams(
        page=min(_positive_or(query.get("page"), DEFAULT_PAGE), MAX_PAGE),
        limit=min(_positive_or(query.get("limit"), DEFAULT_LIMIT), MAX_LIMIT),
        filters=JobFilters(
            search=_non_empty_str(query.get("search")),
            ministry=_non_empty_str(query.get("ministry")),
        ),
        sort_by=parse_sort_order(query.get("sortBy")),
    )
