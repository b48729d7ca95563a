"""Queries – thin pass-through to the service's analysis endpoints."""
from __future__ import annotations

import dataclasses
import datetime as dt
import json
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any

from keen_client.config import ProjectSettings
from keen_client.errors import ValidationError
from keen_client.transport import Transport, raise_for_response
from keen_client.validation import validate_collection_name


class QueryType(str, Enum):
    COUNT = "count"
    COUNT_UNIQUE = "count_unique"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    AVERAGE = "average"
    SUM = "sum"
    SELECT_UNIQUE = "select_unique"
    MEDIAN = "median"
    PERCENTILE = "percentile"


class FilterOperator(str, Enum):
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    EXISTS = "exists"
    IN = "in"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    WITHIN = "within"


@dataclasses.dataclass(frozen=True)
class QueryFilter:
    property_name: str
    operator: FilterOperator | str
    property_value: Any

    def to_dict(self) -> dict[str, Any]:
        op = self.operator.value if isinstance(self.operator, FilterOperator) else self.operator
        return {"property_name": self.property_name, "operator": op, "property_value": self.property_value}


@dataclasses.dataclass(frozen=True)
class QueryTimeframe:
    """Either a relative timeframe (``this_7_days``) or an absolute start/end."""

    relative: str | None = None
    start: dt.datetime | None = None
    end: dt.datetime | None = None

    def __post_init__(self) -> None:
        absolute = self.start is not None and self.end is not None
        if bool(self.relative) == absolute:
            raise ValidationError("A timeframe needs either a relative value or both start and end.")

    @classmethod
    def this(cls, count: int, unit: str) -> "QueryTimeframe":
        return cls(relative=f"this_{count}_{unit}")

    @classmethod
    def previous(cls, count: int, unit: str) -> "QueryTimeframe":
        return cls(relative=f"previous_{count}_{unit}")

    def to_param(self) -> str:
        if self.relative:
            return self.relative
        assert self.start is not None and self.end is not None
        return json.dumps({"start": self.start.isoformat(), "end": self.end.isoformat()})


@dataclasses.dataclass(frozen=True)
class FunnelStep:
    collection: str
    actor_property: str
    filters: Sequence[QueryFilter] = ()
    optional: bool = False
    inverted: bool = False

    def to_dict(self) -> dict[str, Any]:
        step: dict[str, Any] = {
            "event_collection": validate_collection_name(self.collection),
            "actor_property": self.actor_property,
        }
        if self.filters:
            step["filters"] = [f.to_dict() for f in self.filters]
        if self.optional:
            step["optional"] = True
        if self.inverted:
            step["inverted"] = True
        return step


@dataclasses.dataclass(frozen=True)
class MultiAnalysisParam:
    label: str
    analysis_type: QueryType
    target_property: str | None = None

    def to_dict(self) -> dict[str, Any]:
        analysis: dict[str, Any] = {"analysis_type": QueryType(self.analysis_type).value}
        if self.target_property:
            analysis["target_property"] = self.target_property
        return analysis


def _common_params(
    timeframe: QueryTimeframe | None,
    filters: Iterable[QueryFilter] | None,
    timezone: str | None,
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if timeframe is not None:
        params["timeframe"] = timeframe.to_param()
    filters = list(filters or [])
    if filters:
        params["filters"] = json.dumps([f.to_dict() for f in filters])
    if timezone:
        params["timezone"] = timezone
    return params


class Queries:
    """Read-side API. Every call requires the read (or master) key."""

    def __init__(self, transport: Transport, settings: ProjectSettings) -> None:
        self._transport = transport
        self._settings = settings

    @property
    def queries_url(self) -> str:
        return f"{self._settings.project_url}/queries"

    async def available_queries(self) -> dict[str, str]:
        """Map of query name to its endpoint URL."""
        body = await self._get(self.queries_url, {}, "AvailableQueries")
        return dict(body) if isinstance(body, Mapping) else {}

    async def metric(
        self,
        query_type: QueryType | str,
        collection: str,
        target_property: str | None = None,
        *,
        timeframe: QueryTimeframe | None = None,
        filters: Iterable[QueryFilter] | None = None,
        group_by: str | None = None,
        interval: str | None = None,
        percentile: float | None = None,
        timezone: str | None = None,
    ) -> Any:
        query_type = QueryType(query_type)
        params = {"event_collection": validate_collection_name(collection)}
        if query_type is not QueryType.COUNT:
            if not target_property:
                raise ValidationError(f"{query_type.value} queries require a target property.")
            params["target_property"] = target_property
        if query_type is QueryType.PERCENTILE:
            if percentile is None:
                raise ValidationError("percentile queries require a percentile value.")
            params["percentile"] = percentile
        if group_by:
            params["group_by"] = group_by
        if interval:
            if timeframe is None:
                raise ValidationError("interval queries require a timeframe.")
            params["interval"] = interval
        params.update(_common_params(timeframe, filters, timezone))
        return await self._result(f"{self.queries_url}/{query_type.value}", params, "Metric")

    async def extract(
        self,
        collection: str,
        *,
        timeframe: QueryTimeframe | None = None,
        filters: Iterable[QueryFilter] | None = None,
        latest: int = 0,
        email: str | None = None,
    ) -> Any:
        params = {"event_collection": validate_collection_name(collection)}
        params.update(_common_params(timeframe, filters, None))
        if latest > 0:
            params["latest"] = latest
        if email:
            params["email"] = email
        return await self._result(f"{self.queries_url}/extraction", params, "Extract")

    async def funnel(
        self,
        steps: Sequence[FunnelStep],
        *,
        timeframe: QueryTimeframe | None = None,
        timezone: str | None = None,
    ) -> Any:
        if not steps:
            raise ValidationError("A funnel requires at least one step.")
        params = {"steps": json.dumps([s.to_dict() for s in steps])}
        params.update(_common_params(timeframe, None, timezone))
        return await self._result(f"{self.queries_url}/funnel", params, "Funnel")

    async def multi_analysis(
        self,
        collection: str,
        analyses: Sequence[MultiAnalysisParam],
        *,
        timeframe: QueryTimeframe | None = None,
        filters: Iterable[QueryFilter] | None = None,
        group_by: str | None = None,
        interval: str | None = None,
        timezone: str | None = None,
    ) -> Any:
        if not analyses:
            raise ValidationError("A multi-analysis requires at least one analysis.")
        params = {
            "event_collection": validate_collection_name(collection),
            "analyses": json.dumps({a.label: a.to_dict() for a in analyses}),
        }
        if group_by:
            params["group_by"] = group_by
        if interval:
            params["interval"] = interval
        params.update(_common_params(timeframe, filters, timezone))
        return await self._result(f"{self.queries_url}/multi_analysis", params, "MultiAnalysis")

    async def _result(self, url: str, params: dict[str, Any], operation: str) -> Any:
        body = await self._get(url, params, operation)
        return body.get("result") if isinstance(body, Mapping) else body

    async def _get(self, url: str, params: dict[str, Any], operation: str) -> Any:
        key = self._settings.require_read_key(operation)
        response = await self._transport.get(url, key, params)
        raise_for_response(response, operation, collection=params.get("event_collection"))
        return response.body


__all__ = [
    "FilterOperator",
    "FunnelStep",
    "MultiAnalysisParam",
    "Queries",
    "QueryFilter",
    "QueryTimeframe",
    "QueryType",
]
