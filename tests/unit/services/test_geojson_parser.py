import json

import pytest

from annoview.services.exceptions import AnnotationParseError
from annoview.services.geojson_parser import normalize_ring, parse_geojson


def _feature(geometry_type, coordinates, properties=None):
    return {
        "type": "Feature",
        "geometry": {"type": geometry_type, "coordinates": coordinates},
        "properties": properties,
    }


def test_pixel_space_ring_is_divided_by_image_size():
    ring = [[10, 20], [60, 20], [60, 120], [10, 120], [10, 20]]

    points = normalize_ring(ring, image_width=100, image_height=200)

    assert points[:4] == pytest.approx([0.1, 0.1, 0.6, 0.1])
    assert len(points) == 10


def test_unit_ring_is_kept():
    ring = [[0.1, 0.2], [0.3, 0.2], [0.3, 0.4]]

    assert normalize_ring(ring, 100, 100) == pytest.approx([0.1, 0.2, 0.3, 0.2, 0.3, 0.4])


def test_unknown_space_ring_is_fitted_to_unit_square():
    ring = [[2, 2], [4, 2], [4, 5]]

    assert normalize_ring(ring, 100, 100) == pytest.approx([0, 0, 1, 0, 1, 1])


def test_pixel_ring_outside_image_is_clipped():
    ring = [[-20, 0], [150, 0], [150, 50]]

    points = normalize_ring(ring, 100, 100)

    assert min(points) == 0.0
    assert max(points) == 1.0


def test_parse_feature_collection():
    collection = {
        "type": "FeatureCollection",
        "features": [
            _feature("Polygon", [[[0.1, 0.1], [0.2, 0.1], [0.2, 0.2]]], {"class": "lake"}),
            _feature(
                "MultiPolygon",
                [
                    [[[0.5, 0.5], [0.6, 0.5], [0.6, 0.6]]],
                    [[[0.7, 0.7], [0.8, 0.7], [0.8, 0.8]]],
                ],
                {"name": "forest"},
            ),
            _feature("Point", [0.5, 0.5], {"label": "tree"}),
            {"type": "Feature", "geometry": None},
        ],
    }

    annotations = parse_geojson(json.dumps(collection), 100, 100, source_file="map.geojson")

    assert [a.label for a in annotations] == ["lake", "forest", "forest"]
    assert annotations[0].properties == {"class": "lake"}
    assert annotations[0].source_file == "map.geojson"
    assert annotations[2].points == pytest.approx([0.7, 0.7, 0.8, 0.7, 0.8, 0.8])


def test_parse_single_feature_without_label():
    feature = _feature("Polygon", [[[0.1, 0.1], [0.2, 0.1], [0.2, 0.2]]])

    annotations = parse_geojson(json.dumps(feature), 100, 100)

    assert len(annotations) == 1
    assert annotations[0].label is None


def test_parse_unknown_root_type_yields_nothing():
    assert parse_geojson(json.dumps({"type": "Topology"}), 100, 100) == []


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_parse_invalid_content_raises(content):
    with pytest.raises(AnnotationParseError):
        parse_geojson(content, 100, 100)


def test_non_numeric_coordinates_raise_parse_error():
    feature = _feature("Polygon", [[["a", "b"], ["c", "d"], ["e", "f"]]])

    with pytest.raises(AnnotationParseError):
        parse_geojson(json.dumps(feature), 100, 100)


def test_non_mapping_properties_are_dropped():
    feature = _feature("Polygon", [[[0.1, 0.1], [0.2, 0.1], [0.2, 0.2]]], ["x"])

    annotations = parse_geojson(json.dumps(feature), 100, 100)

    assert annotations[0].properties is None
    assert annotations[0].label is None
