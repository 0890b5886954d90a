"""Load waypoint routes from JSON files.

Two layouts are accepted:

* a plain JSON array of ``[lat, lon]`` pairs, in traversal order;
* a GeoJSON ``LineString``, either bare or wrapped in a ``Feature``. GeoJSON
  stores positions as ``[lon, lat]``, so coordinates are swapped on load.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any

from route_sim.core.exceptions import ValidationError
from route_sim.geo.distance import Waypoint

logger = logging.getLogger(__name__)


def parse_route(data: Any) -> list[Waypoint]:
    """Convert decoded JSON into an ordered list of waypoints."""
    if isinstance(data, dict):
        return _parse_geojson(data)
    if isinstance(data, list):
        return [_to_waypoint(item, index, lon_first=False) for index, item in enumerate(data)]
    raise ValidationError(
        "Route must be a list of [lat, lon] pairs or a GeoJSON LineString",
        details={"type": type(data).__name__},
    )


def load_route(path: str | Path) -> list[Waypoint]:
    """Read and parse a route file."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Route file is not valid JSON: {path}", details={"error": str(e)}) from e

    route = parse_route(data)
    logger.info(f"Loaded route with {len(route)} waypoints from {path}")
    return route


def _parse_geojson(data: dict[str, Any]) -> list[Waypoint]:
    geometry = data.get("geometry") if data.get("type") == "Feature" else data
    if not isinstance(geometry, dict) or geometry.get("type") != "LineString":
        raise ValidationError(
            "GeoJSON route must be a LineString geometry or Feature",
            details={"type": data.get("type")},
        )
    coordinates = geometry.get("coordinates", [])
    if not isinstance(coordinates, list):
        raise ValidationError("GeoJSON coordinates must be an array")
    return [_to_waypoint(item, index, lon_first=True) for index, item in enumerate(coordinates)]


def _to_waypoint(item: Any, index: int, lon_first: bool) -> Waypoint:
    if not isinstance(item, (list, tuple)) or len(item) < 2:
        raise ValidationError(f"Route point {index} is not a coordinate pair", details={"point": item})
    try:
        first, second = float(item[0]), float(item[1])
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Route point {index} has non-numeric coordinates", details={"point": item}
        ) from e
    if not (math.isfinite(first) and math.isfinite(second)):
        raise ValidationError(f"Route point {index} has non-finite coordinates", details={"point": item})
    return Waypoint(second, first) if lon_first else Waypoint(first, second)
