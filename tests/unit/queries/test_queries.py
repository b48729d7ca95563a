"""Unit tests for the query pass-through."""

from __future__ import annotations

import asyncio
import datetime as dt
import json

import pytest

from keen_client import ConfigurationError, DeliveryError, KeenClient, ProjectSettings, ValidationError
from keen_client.queries import (
    FilterOperator,
    FunnelStep,
    MultiAnalysisParam,
    Queries,
    QueryFilter,
    QueryTimeframe,
    QueryType,
)
from keen_client.testing import FakeTransport
from keen_client.transport import TransportResponse

QUERIES = "https://api.keen.io/3.0/projects/p1/queries"


def _queries(transport: FakeTransport, **keys: str) -> Queries:
    keys = keys or {"read_key": "read", "write_key": "write"}
    return Queries(transport, ProjectSettings(project_id="p1", **keys))


def _result(value: object) -> TransportResponse:
    return TransportResponse(200, {"result": value})


# ---------------------------------------------------------------------------
# Parameter value objects
# ---------------------------------------------------------------------------


class TestParameters:
    def test_filter_to_dict(self) -> None:
        f = QueryFilter("price", FilterOperator.GT, 10)
        assert f.to_dict() == {"property_name": "price", "operator": "gt", "property_value": 10}

    def test_relative_timeframe(self) -> None:
        assert QueryTimeframe.this(7, "days").to_param() == "this_7_days"
        assert QueryTimeframe.previous(2, "hours").to_param() == "previous_2_hours"

    def test_absolute_timeframe(self) -> None:
        tf = QueryTimeframe(start=dt.datetime(2024, 1, 1), end=dt.datetime(2024, 2, 1))
        assert json.loads(tf.to_param()) == {"start": "2024-01-01T00:00:00", "end": "2024-02-01T00:00:00"}

    @pytest.mark.parametrize(
        "kwargs",
        [{}, {"start": dt.datetime(2024, 1, 1)}, {"relative": "this_day", "start": dt.datetime(2024, 1, 1), "end": dt.datetime(2024, 1, 2)}],
    )
    def test_invalid_timeframe(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            QueryTimeframe(**kwargs)

    def test_funnel_step_to_dict(self) -> None:
        step = FunnelStep("signups", "user.id", optional=True)
        assert step.to_dict() == {"event_collection": "signups", "actor_property": "user.id", "optional": True}


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_count(self) -> None:
        transport = FakeTransport([_result(12)])
        result = asyncio.run(
            _queries(transport).metric(
                QueryType.COUNT,
                "purchases",
                timeframe=QueryTimeframe.this(7, "days"),
                filters=[QueryFilter("price", "gt", 10)],
                timezone="UTC",
            )
        )
        assert result == 12
        call = transport.calls[0]
        assert call.url == f"{QUERIES}/count"
        assert call.credential == "read"
        assert call.params["event_collection"] == "purchases"
        assert call.params["timeframe"] == "this_7_days"
        assert json.loads(call.params["filters"])[0]["operator"] == "gt"
        assert "target_property" not in call.params

    def test_sum_requires_target_property(self) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_queries(FakeTransport()).metric("sum", "purchases"))

    def test_percentile_requires_value(self) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_queries(FakeTransport()).metric("percentile", "purchases", "price"))

    def test_interval_requires_timeframe(self) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_queries(FakeTransport()).metric("count", "purchases", interval="daily"))

    def test_group_by(self) -> None:
        transport = FakeTransport([_result([{"item": "book", "result": 2}])])
        result = asyncio.run(_queries(transport).metric("sum", "purchases", "price", group_by="item"))
        assert result == [{"item": "book", "result": 2}]
        assert transport.calls[0].params["group_by"] == "item"

    def test_master_key_used_when_no_read_key(self) -> None:
        transport = FakeTransport([_result(1)])
        asyncio.run(_queries(transport, master_key="master").metric("count", "purchases"))
        assert transport.calls[0].credential == "master"

    def test_read_key_required(self) -> None:
        transport = FakeTransport()
        with pytest.raises(ConfigurationError):
            asyncio.run(_queries(transport, write_key="w").metric("count", "purchases"))
        assert transport.calls == []

    def test_error_code_raises(self) -> None:
        transport = FakeTransport([TransportResponse(200, {"error_code": "E", "message": "m"})])
        with pytest.raises(DeliveryError, match="E : m"):
            asyncio.run(_queries(transport).metric("count", "purchases"))

    def test_extract(self) -> None:
        transport = FakeTransport([_result([{"n": 1}])])
        result = asyncio.run(_queries(transport).extract("purchases", latest=5, email="a@b.c"))
        assert result == [{"n": 1}]
        params = transport.calls[0].params
        assert (params["latest"], params["email"]) == (5, "a@b.c")
        assert transport.calls[0].url == f"{QUERIES}/extraction"

    def test_funnel(self) -> None:
        transport = FakeTransport([_result([10, 4])])
        steps = [FunnelStep("visits", "uid"), FunnelStep("signups", "uid")]
        assert asyncio.run(_queries(transport).funnel(steps)) == [10, 4]
        sent = json.loads(transport.calls[0].params["steps"])
        assert [s["event_collection"] for s in sent] == ["visits", "signups"]

    def test_funnel_requires_steps(self) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(_queries(FakeTransport()).funnel([]))

    def test_multi_analysis(self) -> None:
        transport = FakeTransport([_result({"total": 3, "uniques": 2})])
        analyses = [
            MultiAnalysisParam("total", QueryType.COUNT),
            MultiAnalysisParam("uniques", QueryType.COUNT_UNIQUE, "uid"),
        ]
        result = asyncio.run(_queries(transport).multi_analysis("visits", analyses))
        assert result == {"total": 3, "uniques": 2}
        sent = json.loads(transport.calls[0].params["analyses"])
        assert sent["uniques"] == {"analysis_type": "count_unique", "target_property": "uid"}

    def test_available_queries(self) -> None:
        transport = FakeTransport([TransportResponse(200, {"count_url": f"{QUERIES}/count"})])
        assert asyncio.run(_queries(transport).available_queries()) == {"count_url": f"{QUERIES}/count"}
        assert transport.calls[0].url == QUERIES


class TestClientQueries:
    def test_blocking_metric(self) -> None:
        transport = FakeTransport([_result(5)])
        client = KeenClient(ProjectSettings(project_id="p1", write_key="w", read_key="r"), transport=transport)
        assert client.metric("count", "purchases") == 5

    def test_blocking_query_unwraps_error(self) -> None:
        transport = FakeTransport([TransportResponse(500, {})])
        client = KeenClient(ProjectSettings(project_id="p1", write_key="w", read_key="r"), transport=transport)
        with pytest.raises(DeliveryError, match="Metric failed with status: 500"):
            client.metric("count", "purchases")

    def test_blocking_query_passthrough(self) -> None:
        transport = FakeTransport([_result(12.5)])
        client = KeenClient(ProjectSettings(project_id="p1", write_key="w", read_key="r"), transport=transport)
        assert client.query(QueryType.AVERAGE, "purchases", "price", group_by="item") == 12.5
        call = transport.calls[0]
        assert call.url == f"{QUERIES}/average"
        assert call.params == {"event_collection": "purchases", "target_property": "price", "group_by": "item"}

    def test_query_error_names_collection(self) -> None:
        transport = FakeTransport([TransportResponse(500, {})])
        client = KeenClient(ProjectSettings(project_id="p1", write_key="w", read_key="r"), transport=transport)
        with pytest.raises(DeliveryError) as exc_info:
            client.query("count", "purchases")
        assert exc_info.value.collection == "purchases"
