"""Centralized geographic distance calculations.

This module provides Haversine distance calculations between waypoints and
the local flat-Earth conversion used to displace a position by a few meters.
"""

from math import atan2, cos, radians, sin, sqrt
from typing import NamedTuple

EARTH_RADIUS_M = 6_371_000  # Earth radius in meters

# Meters per degree of latitude in the local flat-Earth approximation
METERS_PER_DEGREE_LAT: float = 111_320.0


class Waypoint(NamedTuple):
    """A latitude/longitude pair in degrees."""

    lat: float
    lon: float


def haversine_distance_m(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Calculate the great-circle distance between two waypoints in meters.

    Uses the Haversine formula to calculate the shortest distance over
    the Earth's surface between two (lat, lon) points.

    Args:
        a: First point as (latitude, longitude) in degrees
        b: Second point as (latitude, longitude) in degrees

    Returns:
        Distance between the two points in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [a[0], a[1], b[0], b[1]])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))

    return EARTH_RADIUS_M * c


def route_length_m(route: "list[tuple[float, float]] | tuple[tuple[float, float], ...]") -> float:
    """Total length of a route in meters, 0.0 for fewer than 2 points."""
    return sum(haversine_distance_m(route[i], route[i + 1]) for i in range(len(route) - 1))


def offset_by_meters(lat: float, lon: float, north_m: float, east_m: float) -> Waypoint:
    """Displace a position by a small north/east offset in meters.

    Flat-Earth approximation: 111,320 m per degree of latitude, longitude
    degrees scaled by cos(latitude). Only meaningful for offsets of a few
    meters to a few hundred meters away from the poles.
    """
    lat_offset = north_m / METERS_PER_DEGREE_LAT
    lon_offset = east_m / (METERS_PER_DEGREE_LAT * cos(radians(lat)))
    return Waypoint(lat + lat_offset, lon + lon_offset)


def interpolate_position(
    start: tuple[float, float], end: tuple[float, float], fraction: float
) -> Waypoint:
    """Linear interpolation of latitude and longitude between two points."""
    lat = start[0] + (end[0] - start[0]) * fraction
    lon = start[1] + (end[1] - start[1]) * fraction
    return Waypoint(lat, lon)
