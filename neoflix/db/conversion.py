"""Conversion of Neo4j driver values into plain Python primitives.

Records leave the driver carrying temporal, spatial and graph types that
JSON encoders and Pydantic models do not understand. ``to_native_types`` is
applied to every property map before it crosses a service boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from neo4j.graph import Node, Relationship
from neo4j.spatial import Point
from neo4j.time import Date, DateTime, Duration, Time

__all__ = ["to_native_types", "value_to_native_type"]

_TEMPORAL_TYPES = (Date, DateTime, Time, Duration)


def _point_to_dict(point: Point) -> dict[str, Any]:
    coordinates = dict(zip(("x", "y", "z"), point))
    return {"srid": point.srid, **coordinates}


def value_to_native_type(value: Any) -> Any:
    """Convert a single driver value, recursing into containers."""

    if isinstance(value, _TEMPORAL_TYPES):
        return value.iso_format()
    if isinstance(value, (Node, Relationship)):
        return to_native_types(dict(value.items()))
    if isinstance(value, Point):
        return _point_to_dict(value)
    if isinstance(value, Mapping):
        return to_native_types(value)
    if isinstance(value, (list, tuple)):
        return [value_to_native_type(item) for item in value]
    return value


def to_native_types(properties: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``properties`` with every value converted."""

    return {key: value_to_native_type(value) for key, value in properties.items()}
