"""Tests for query models and filter serialization."""

from datetime import date

import pytest
from pydantic import ValidationError

from plausible_stats.models import (
    CustomProperty,
    Dimension,
    FilterOperator,
    LogicalFilter,
    LogicalOperator,
    Metric,
    OrderDirection,
    QueryParams,
    QueryResponse,
    SimpleFilter,
    and_,
    contains,
    is_,
    is_not,
    matches,
    not_,
    or_,
    parse_filter,
)


def _params(**kwargs):
    base = {"site_id": "example.com", "date_range": "7d", "metrics": ["visitors"]}
    base.update(kwargs)
    return QueryParams(**base)


class TestRequestBody:
    """Test QueryParams.to_body() field inclusion."""

    def test_required_fields_only(self):
        """Only site_id, date_range and metrics are sent by default."""
        body = _params(metrics=["visitors", "pageviews"]).to_body()
        assert body == {
            "site_id": "example.com",
            "date_range": "7d",
            "metrics": ["visitors", "pageviews"],
        }

    def test_pagination(self):
        """limit and offset are sent as given."""
        body = _params(limit=10, offset=20).to_body()
        assert body["limit"] == 10
        assert body["offset"] == 20

    def test_zero_and_false_are_sent(self):
        """Supplied falsy values are not treated as absent."""
        body = _params(limit=0, offset=0, include_imported=False).to_body()
        assert body["limit"] == 0
        assert body["offset"] == 0
        assert body["include_imported"] is False

    def test_empty_lists_are_sent(self):
        """An empty list is supplied, unlike None."""
        body = _params(dimensions=[], filters=[]).to_body()
        assert body["dimensions"] == []
        assert body["filters"] == []

    def test_all_optional_fields(self):
        """Every optional field appears when set."""
        body = _params(
            dimensions=["event:page"],
            filters=[["is", "visit:country", ["US"]]],
            order_by=("visitors", "desc"),
            limit=5,
            offset=10,
            include_imported=True,
        ).to_body()
        assert body["dimensions"] == ["event:page"]
        assert body["filters"] == [["is", "visit:country", ["US"]]]
        assert body["order_by"] == ["visitors", "desc"]
        assert body["limit"] == 5
        assert body["offset"] == 10
        assert body["include_imported"] is True

    def test_enum_members_serialize_to_values(self):
        """Metric/Dimension enum members become plain strings."""
        body = _params(
            metrics=[Metric.VISITORS, Metric.BOUNCE_RATE],
            dimensions=[Dimension.COUNTRY, Dimension.PAGE],
            order_by=(Metric.VISITORS, OrderDirection.ASC),
        ).to_body()
        assert body["metrics"] == ["visitors", "bounce_rate"]
        assert body["dimensions"] == ["visit:country", "event:page"]
        assert body["order_by"] == ["visitors", "asc"]

    def test_custom_property_dimension(self):
        """CustomProperty serializes to event:props:<name>."""
        body = _params(dimensions=[CustomProperty("author"), "event:props:theme"]).to_body()
        assert body["dimensions"] == ["event:props:author", "event:props:theme"]

    def test_explicit_date_range_strings(self):
        """ISO date pair is sent as a two-element list."""
        body = _params(date_range=("2024-01-01", "2024-01-31")).to_body()
        assert body["date_range"] == ["2024-01-01", "2024-01-31"]

    def test_explicit_date_range_dates(self):
        """date objects are converted to ISO strings."""
        body = _params(date_range=(date(2024, 1, 1), date(2024, 1, 31))).to_body()
        assert body["date_range"] == ["2024-01-01", "2024-01-31"]

    def test_date_range_from_list(self):
        """A list pair is accepted like a tuple."""
        body = _params(date_range=["2024-01-01", "2024-01-31"]).to_body()
        assert body["date_range"] == ["2024-01-01", "2024-01-31"]


class TestQueryParamsValidation:
    """Test the few constraints QueryParams enforces."""

    def test_metrics_required(self):
        with pytest.raises(ValidationError):
            QueryParams(site_id="example.com", date_range="7d")

    def test_metrics_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            _params(metrics=[])

    def test_unknown_metric_rejected(self):
        with pytest.raises(ValidationError):
            _params(metrics=["not_a_metric"])

    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            _params(limit=-1)

    def test_unknown_dimension_string_accepted(self):
        """Dimension strings are not checked client-side."""
        body = _params(dimensions=["visit:something_new"]).to_body()
        assert body["dimensions"] == ["visit:something_new"]

    def test_params_are_immutable(self):
        params = _params()
        with pytest.raises(ValidationError):
            params.site_id = "other.com"


class TestSimpleFilter:
    """Test simple filter construction and wire form."""

    def test_wire_form(self):
        f = SimpleFilter("is", "event:page", ["/home"])
        assert f.operator == FilterOperator.IS
        assert f.to_wire() == ["is", "event:page", ["/home"]]

    def test_keyword_construction(self):
        f = SimpleFilter(operator="contains", dimension=Dimension.PAGE, values=["/blog"])
        assert f.to_wire() == ["contains", "event:page", ["/blog"]]

    def test_values_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            SimpleFilter("is", "visit:country", [])

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValidationError):
            SimpleFilter("equals", "visit:country", ["US"])

    def test_custom_property_filter(self):
        f = is_(CustomProperty("author"), "alice", "bob")
        assert f.to_wire() == ["is", "event:props:author", ["alice", "bob"]]

    def test_helpers(self):
        assert is_not("visit:device", "Mobile").to_wire() == ["is_not", "visit:device", ["Mobile"]]
        assert contains("event:page", "/blog").to_wire() == ["contains", "event:page", ["/blog"]]
        assert matches("event:page", "^/blog/.*").to_wire() == ["matches", "event:page", ["^/blog/.*"]]


class TestLogicalFilter:
    """Test logical filter nesting."""

    def test_and_preserves_order(self):
        f = LogicalFilter("and", [
            ["is", "visit:country", ["US"]],
            ["contains", "event:page", ["/blog"]],
        ])
        assert f.operator == LogicalOperator.AND
        assert isinstance(f.filters[0], SimpleFilter)
        assert f.to_wire() == [
            "and",
            [["is", "visit:country", ["US"]], ["contains", "event:page", ["/blog"]]],
        ]

    def test_deep_nesting(self):
        f = and_(
            is_("visit:country", "US"),
            or_(contains("event:page", "/pricing"), contains("event:page", "/products")),
            not_(is_("visit:device", "Mobile")),
        )
        assert f.to_wire() == [
            "and",
            [
                ["is", "visit:country", ["US"]],
                ["or", [
                    ["contains", "event:page", ["/pricing"]],
                    ["contains", "event:page", ["/products"]],
                ]],
                ["not", [["is", "visit:device", ["Mobile"]]]],
            ],
        ]

    def test_invalid_subfilter_rejected(self):
        with pytest.raises(ValidationError):
            LogicalFilter("or", [["bogus", "visit:country", ["US"]]])


class TestParseFilter:
    """Test dispatch on the first element of the wire form."""

    def test_simple(self):
        f = parse_filter(["is", "event:page", ["/home"]])
        assert isinstance(f, SimpleFilter)
        assert f.to_wire() == ["is", "event:page", ["/home"]]

    def test_logical(self):
        raw = ["or", [["is", "visit:source", ["twitter"]], ["is", "visit:source", ["facebook"]]]]
        f = parse_filter(raw)
        assert isinstance(f, LogicalFilter)
        assert f.to_wire() == raw

    def test_tuple_form(self):
        f = parse_filter(("is_not", "visit:device", ("Mobile",)))
        assert f.to_wire() == ["is_not", "visit:device", ["Mobile"]]

    def test_instance_passthrough(self):
        f = is_("visit:country", "US")
        assert parse_filter(f) is f

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            parse_filter(["xor", []])

    def test_wrong_arity(self):
        with pytest.raises(ValueError):
            parse_filter(["is", "visit:country"])

    def test_not_a_list(self):
        with pytest.raises(ValueError):
            parse_filter("is visit:country US")

    def test_empty(self):
        with pytest.raises(ValueError):
            parse_filter([])

    def test_query_params_accept_wire_filters(self):
        params = _params(filters=[["and", [["is", "visit:country", ["US"]]]]])
        assert isinstance(params.filters[0], LogicalFilter)


class TestCustomProperty:
    """Test CustomProperty dimension variant."""

    def test_wire_name(self):
        assert CustomProperty("author").wire_name == "event:props:author"
        assert str(CustomProperty("author")) == "event:props:author"

    def test_parse(self):
        assert CustomProperty.parse("event:props:author").name == "author"

    def test_parse_rejects_other_dimensions(self):
        with pytest.raises(ValueError):
            CustomProperty.parse("event:page")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            CustomProperty("")


class TestQueryResponse:
    """Test response parsing."""

    def test_results_unmodified(self):
        response = QueryResponse.model_validate({
            "results": [{"visit:country": "US", "visitors": 500, "percentage": 50.0, "flag": True, "x": None}],
        })
        row = response.results[0]
        assert row == {"visit:country": "US", "visitors": 500, "percentage": 50.0, "flag": True, "x": None}
        assert response.meta is None

    def test_meta_warning(self):
        response = QueryResponse.model_validate({
            "results": [],
            "meta": {"warning": "Some metrics may not be available"},
        })
        assert response.meta.warning == "Some metrics may not be available"

    def test_extra_keys_kept(self):
        response = QueryResponse.model_validate({"results": [], "query": {"site_id": "example.com"}})
        assert response.model_extra == {"query": {"site_id": "example.com"}}

    def test_missing_results_rejected(self):
        with pytest.raises(ValidationError):
            QueryResponse.model_validate({"error": "nope"})
