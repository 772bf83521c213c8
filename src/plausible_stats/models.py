"""
Pydantic models for Stats API v2 queries and responses.

Filters are a sum type: ``SimpleFilter`` and ``LogicalFilter``. On the wire
both are JSON arrays told apart by their first element, so ``parse_filter``
accepts that array form as well.
"""
from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Metrics & Dimensions
# =============================================================================

class Metric(str, Enum):
    """Metrics the Stats API can compute."""

    # Core metrics
    VISITORS = "visitors"
    VISITS = "visits"
    PAGEVIEWS = "pageviews"
    VIEWS_PER_VISIT = "views_per_visit"
    BOUNCE_RATE = "bounce_rate"
    VISIT_DURATION = "visit_duration"
    EVENTS = "events"

    # Specialized metrics
    SCROLL_DEPTH = "scroll_depth"
    PERCENTAGE = "percentage"
    CONVERSION_RATE = "conversion_rate"
    GROUP_CONVERSION_RATE = "group_conversion_rate"
    TIME_ON_PAGE = "time_on_page"

    # Revenue metrics
    AVERAGE_REVENUE = "average_revenue"
    TOTAL_REVENUE = "total_revenue"


class Dimension(str, Enum):
    """Fixed dimensions for grouping and filtering.

    Custom event properties are not listed here, see ``CustomProperty``.
    """

    # Event dimensions
    GOAL = "event:goal"
    PAGE = "event:page"
    HOSTNAME = "event:hostname"

    # Visit dimensions
    ENTRY_PAGE = "visit:entry_page"
    EXIT_PAGE = "visit:exit_page"
    SOURCE = "visit:source"
    REFERRER = "visit:referrer"
    CHANNEL = "visit:channel"
    UTM_MEDIUM = "visit:utm_medium"
    UTM_SOURCE = "visit:utm_source"
    UTM_CAMPAIGN = "visit:utm_campaign"
    UTM_CONTENT = "visit:utm_content"
    UTM_TERM = "visit:utm_term"

    # Device/Browser dimensions
    DEVICE = "visit:device"
    BROWSER = "visit:browser"
    BROWSER_VERSION = "visit:browser_version"
    OS = "visit:os"
    OS_VERSION = "visit:os_version"

    # Location dimensions
    COUNTRY = "visit:country"
    REGION = "visit:region"
    CITY = "visit:city"


CUSTOM_PROPERTY_PREFIX = "event:props:"


class CustomProperty(BaseModel):
    """A custom event property dimension, sent as ``event:props:<name>``.

    Usage:
        CustomProperty("author")  # event:props:author
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)

    def __init__(self, name: str):
        super().__init__(name=name)

    @property
    def wire_name(self) -> str:
        return f"{CUSTOM_PROPERTY_PREFIX}{self.name}"

    @classmethod
    def parse(cls, value: str) -> "CustomProperty":
        """Recover a CustomProperty from its ``event:props:<name>`` form."""
        if not value.startswith(CUSTOM_PROPERTY_PREFIX):
            raise ValueError(f"Not a custom property dimension: {value!r}")
        return cls(value[len(CUSTOM_PROPERTY_PREFIX):])

    def __str__(self) -> str:
        return self.wire_name


# Any string is accepted too; the API decides what is valid.
DimensionName = Union[Dimension, Metric, CustomProperty, str]


def _wire_name(value: Any) -> Any:
    """Plain JSON value for an enum member, CustomProperty or string."""
    if isinstance(value, CustomProperty):
        return value.wire_name
    if isinstance(value, Enum):
        return value.value
    return value


# =============================================================================
# Filters
# =============================================================================

class FilterOperator(str, Enum):
    """Operators for simple filters. ``matches`` values are regex patterns."""

    IS = "is"
    IS_NOT = "is_not"
    CONTAINS = "contains"
    CONTAINS_NOT = "contains_not"
    MATCHES = "matches"
    MATCHES_NOT = "matches_not"


class LogicalOperator(str, Enum):
    """Operators combining other filters."""

    AND = "and"
    OR = "or"
    NOT = "not"


_FILTER_OPERATORS = {op.value for op in FilterOperator}
_LOGICAL_OPERATORS = {op.value for op in LogicalOperator}


class SimpleFilter(BaseModel):
    """Single condition: ``[operator, dimension, values]``.

    Usage:
        SimpleFilter("is", "visit:country", ["US"])
        SimpleFilter(FilterOperator.CONTAINS, Dimension.PAGE, ["/blog"])
    """
    model_config = ConfigDict(frozen=True)

    operator: FilterOperator
    dimension: DimensionName
    values: list[str] = Field(min_length=1)

    def __init__(
        self,
        operator: Union[FilterOperator, str],
        dimension: DimensionName,
        values: Sequence[str],
    ):
        super().__init__(operator=operator, dimension=dimension, values=values)

    def to_wire(self) -> list:
        return [self.operator.value, _wire_name(self.dimension), list(self.values)]


class LogicalFilter(BaseModel):
    """Boolean combination of filters: ``[operator, [filter, ...]]``.

    Subfilters may themselves be logical, nesting to any depth.

    Usage:
        LogicalFilter("and", [
            ["is", "visit:country", ["US", "CA"]],
            ["contains", "event:page", ["/products"]],
        ])
    """
    model_config = ConfigDict(frozen=True)

    operator: LogicalOperator
    filters: list["Filter"]

    def __init__(
        self,
        operator: Union[LogicalOperator, str],
        filters: Sequence[Any],
    ):
        super().__init__(operator=operator, filters=filters)

    @field_validator("filters", mode="before")
    @classmethod
    def _parse_filters(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [parse_filter(item) for item in value]
        return value

    def to_wire(self) -> list:
        return [self.operator.value, [f.to_wire() for f in self.filters]]


Filter = Union[SimpleFilter, LogicalFilter]

LogicalFilter.model_rebuild()


def parse_filter(raw: Any) -> Filter:
    """Build a filter from its wire (array) form.

    The first element decides the shape: a filter operator means a simple
    filter, a logical operator means a logical one. Filter instances are
    returned as-is.

    Raises:
        ValueError: If the array is malformed or the operator is unknown
    """
    if isinstance(raw, (SimpleFilter, LogicalFilter)):
        return raw
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence) or not raw:
        raise ValueError(f"Filter must be a non-empty array, got {raw!r}")

    tag = raw[0].value if isinstance(raw[0], Enum) else raw[0]

    if isinstance(tag, str) and tag in _FILTER_OPERATORS:
        if len(raw) != 3:
            raise ValueError(f"Simple filter needs [operator, dimension, values], got {raw!r}")
        operator, dimension, values = raw
        return SimpleFilter(operator, dimension, values)

    if isinstance(tag, str) and tag in _LOGICAL_OPERATORS:
        if len(raw) != 2:
            raise ValueError(f"Logical filter needs [operator, filters], got {raw!r}")
        operator, filters = raw
        return LogicalFilter(operator, filters)

    raise ValueError(f"Unknown filter operator: {raw[0]!r}")


def is_(dimension: DimensionName, *values: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.IS, dimension, list(values))


def is_not(dimension: DimensionName, *values: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.IS_NOT, dimension, list(values))


def contains(dimension: DimensionName, *values: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.CONTAINS, dimension, list(values))


def contains_not(dimension: DimensionName, *values: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.CONTAINS_NOT, dimension, list(values))


def matches(dimension: DimensionName, *patterns: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.MATCHES, dimension, list(patterns))


def matches_not(dimension: DimensionName, *patterns: str) -> SimpleFilter:
    return SimpleFilter(FilterOperator.MATCHES_NOT, dimension, list(patterns))


def and_(*filters: Any) -> LogicalFilter:
    return LogicalFilter(LogicalOperator.AND, list(filters))


def or_(*filters: Any) -> LogicalFilter:
    return LogicalFilter(LogicalOperator.OR, list(filters))


def not_(*filters: Any) -> LogicalFilter:
    return LogicalFilter(LogicalOperator.NOT, list(filters))


# =============================================================================
# Query
# =============================================================================

class OrderDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Relative token ("7d", "30d", "month", ...) or explicit (start, end) ISO dates
DateRange = Union[str, tuple[Union[date, str], Union[date, str]]]

OrderBy = tuple[DimensionName, OrderDirection]


class QueryParams(BaseModel):
    """A complete Stats API query.

    Optional fields left as None are "not requested" and are left out of
    the request body entirely.

    Usage:
        QueryParams(
            site_id="example.com",
            date_range="7d",
            metrics=["visitors", "pageviews"],
            dimensions=["event:page"],
            filters=[["is", "visit:country", ["US"]]],
            order_by=("visitors", "desc"),
            limit=10,
        )
    """
    model_config = ConfigDict(frozen=True)

    site_id: str
    date_range: DateRange
    metrics: list[Metric] = Field(min_length=1)
    dimensions: Optional[list[DimensionName]] = None
    filters: Optional[list[Filter]] = None
    order_by: Optional[OrderBy] = None
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)
    include_imported: Optional[bool] = None  # Google Analytics imports

    @field_validator("filters", mode="before")
    @classmethod
    def _parse_filters(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [parse_filter(item) for item in value]
        return value

    def to_body(self) -> dict[str, Any]:
        """Build the JSON request body, omitting fields that are None.

        Empty lists, 0 and False count as supplied and are sent.
        """
        body: dict[str, Any] = {
            "site_id": self.site_id,
            "date_range": self._wire_date_range(),
            "metrics": [m.value for m in self.metrics],
        }

        if self.dimensions is not None:
            body["dimensions"] = [_wire_name(d) for d in self.dimensions]
        if self.filters is not None:
            body["filters"] = [f.to_wire() for f in self.filters]
        if self.order_by is not None:
            name, direction = self.order_by
            body["order_by"] = [_wire_name(name), direction.value]
        if self.limit is not None:
            body["limit"] = self.limit
        if self.offset is not None:
            body["offset"] = self.offset
        if self.include_imported is not None:
            body["include_imported"] = self.include_imported

        return body

    def _wire_date_range(self) -> Union[str, list[str]]:
        if isinstance(self.date_range, str):
            return self.date_range
        return [
            d.isoformat() if isinstance(d, date) else d
            for d in self.date_range
        ]


# =============================================================================
# Responses
# =============================================================================

# One row keyed by metric/dimension name. Stats API v2 servers may also
# return "metrics"/"dimensions" arrays per row, hence list.
QueryResult = dict[str, Union[str, int, float, bool, None, list[Any]]]


class QueryResponseMeta(BaseModel):
    """Metadata returned with query responses."""
    model_config = ConfigDict(frozen=True, extra="allow")

    warning: Optional[str] = None  # e.g. metric/dimension compatibility issues


class QueryResponse(BaseModel):
    """Successful Stats API response. Unknown keys are kept as extras."""
    model_config = ConfigDict(frozen=True, extra="allow")

    results: list[QueryResult]
    meta: Optional[QueryResponseMeta] = None


class PlausibleErrorPayload(BaseModel):
    """Error body returned with a non-2xx status."""
    model_config = ConfigDict(frozen=True, extra="allow")

    error: str
