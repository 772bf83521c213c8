"""
Typed async client for the Plausible Stats API v2.

Usage:
    from plausible_stats import PlausibleClient, QueryParams

    client = PlausibleClient(api_key="your-api-key")

    response = await client.query(QueryParams(
        site_id="example.com",
        date_range="7d",
        metrics=["visitors", "pageviews"],
        filters=[["is", "visit:country", ["US"]]],
    ))
"""

from .client import PlausibleClient
from .config import (
    DEFAULT_BASE_URL,
    QUERY_PATH,
    RATE_LIMIT_PER_HOUR,
    PlausibleConfig,
)
from .errors import ConfigError, PlausibleApiError, PlausibleClientError
from .models import (
    CustomProperty,
    DateRange,
    Dimension,
    DimensionName,
    Filter,
    FilterOperator,
    LogicalFilter,
    LogicalOperator,
    Metric,
    OrderBy,
    OrderDirection,
    PlausibleErrorPayload,
    QueryParams,
    QueryResponse,
    QueryResponseMeta,
    QueryResult,
    SimpleFilter,
    and_,
    contains,
    contains_not,
    is_,
    is_not,
    matches,
    matches_not,
    not_,
    or_,
    parse_filter,
)

__version__ = "0.1.0"
__all__ = [
    "PlausibleClient", "PlausibleConfig",
    "PlausibleClientError", "PlausibleApiError", "ConfigError",
    "DEFAULT_BASE_URL", "QUERY_PATH", "RATE_LIMIT_PER_HOUR",
    "Metric", "Dimension", "DimensionName", "CustomProperty",
    "DateRange", "OrderBy", "OrderDirection",
    "Filter", "FilterOperator", "LogicalOperator", "SimpleFilter", "LogicalFilter",
    "parse_filter", "is_", "is_not", "contains", "contains_not",
    "matches", "matches_not", "and_", "or_", "not_",
    "QueryParams", "QueryResponse", "QueryResponseMeta", "QueryResult",
    "PlausibleErrorPayload",
]
