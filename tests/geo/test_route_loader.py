"""Tests for loading waypoint routes from JSON files."""

import json

import pytest

from route_sim.core.exceptions import ValidationError
from route_sim.geo.distance import Waypoint
from route_sim.geo.route_loader import load_route, parse_route


@pytest.mark.unit
class TestParseRoute:
    def test_plain_pairs_are_lat_lon(self) -> None:
        route = parse_route([[-23.55, -46.63], [-23.56, -46.64]])

        assert route == [Waypoint(-23.55, -46.63), Waypoint(-23.56, -46.64)]

    def test_geojson_linestring_swaps_to_lat_lon(self) -> None:
        data = {"type": "LineString", "coordinates": [[-46.63, -23.55], [-46.64, -23.56]]}

        assert parse_route(data) == [Waypoint(-23.55, -46.63), Waypoint(-23.56, -46.64)]

    def test_geojson_feature(self) -> None:
        data = {
            "type": "Feature",
            "properties": {"name": "loop"},
            "geometry": {"type": "LineString", "coordinates": [[1.0, 2.0], [3.0, 4.0, 120.0]]},
        }

        assert parse_route(data) == [Waypoint(2.0, 1.0), Waypoint(4.0, 3.0)]

    def test_empty_route_is_allowed(self) -> None:
        assert parse_route([]) == []

    def test_order_is_preserved(self) -> None:
        pairs = [[float(i), float(-i)] for i in range(10)]

        assert [tuple(p) for p in parse_route(pairs)] == [tuple(p) for p in pairs]

    def test_rejects_non_linestring_geometry(self) -> None:
        with pytest.raises(ValidationError):
            parse_route({"type": "Point", "coordinates": [1.0, 2.0]})

    @pytest.mark.parametrize("point", [[1.0], "1,2", [None, 2.0], ["a", "b"], [float("nan"), 1.0]])
    def test_rejects_malformed_points(self, point) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_route([[0.0, 0.0], point])

        assert "point 1" in exc_info.value.message

    def test_rejects_scalar_document(self) -> None:
        with pytest.raises(ValidationError):
            parse_route(42)


@pytest.mark.unit
class TestLoadRoute:
    def test_loads_file(self, tmp_path) -> None:
        path = tmp_path / "route.json"
        path.write_text(json.dumps([[0.0, 0.0], [0.0, 1.0]]))

        assert load_route(path) == [Waypoint(0.0, 0.0), Waypoint(0.0, 1.0)]

    def test_invalid_json_raises_validation_error(self, tmp_path) -> None:
        path = tmp_path / "route.json"
        path.write_text("[[0.0, 0.0],")

        with pytest.raises(ValidationError):
            load_route(path)

    def test_non_utf8_file_raises_validation_error(self, tmp_path) -> None:
        path = tmp_path / "route.json"
        path.write_bytes(b"\xff\xfe[[0, 0], [0, 1]]")

        with pytest.raises(ValidationError):
            load_route(path)

    def test_missing_file_raises_os_error(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_route(tmp_path / "missing.json")
