import json

import cv2
import numpy as np
import pytest

from annoview.services.exceptions import (
    ImageDecodeError,
    MissingImageError,
    UnsupportedFileTypeError,
)
from annoview.services.file_loader import FileLoader, guess_file_type


@pytest.fixture
def loader(workspace):
    return FileLoader(workspace)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("photo.png", "image/png"),
        ("scan.TIF", "image/tiff"),
        ("labels.txt", "text/plain"),
        ("regions.geojson", "application/geo+json"),
        ("archive.unknownext", None),
    ],
)
def test_guess_file_type(name, expected):
    assert guess_file_type(name) == expected


def test_color_image_becomes_base_image(loader, workspace, color_png_bytes):
    loader.load("a.png", color_png_bytes)

    assert workspace.state.image_file_name == "a.png"
    assert workspace.state.mask is None


def test_matching_grayscale_image_becomes_mask(loader, workspace, color_png_bytes, gray_png_bytes):
    loader.load("a.png", color_png_bytes)
    loader.load("mask.png", gray_png_bytes)

    assert workspace.state.image_file_name == "a.png"
    assert workspace.state.mask is not None
    assert workspace.history.labels() == ["Load image a.png", "Load mask"]


def test_grayscale_image_of_other_size_replaces_image(loader, workspace, color_png_bytes):
    loader.load("a.png", color_png_bytes)
    ok, encoded = cv2.imencode(".png", np.zeros((10, 10), dtype=np.uint8))
    assert ok

    loader.load("small.png", encoded.tobytes())

    assert workspace.state.image_file_name == "small.png"
    assert workspace.state.mask is None


def test_first_grayscale_image_is_not_a_mask(loader, workspace, gray_png_bytes):
    loader.load("gray.png", gray_png_bytes)

    assert workspace.state.image_file_name == "gray.png"


def test_yolo_file_is_added_with_first_class_color(
    loader, workspace, color_png_bytes, yolo_text
):
    loader.load("a.png", color_png_bytes)
    loader.load("labels.txt", yolo_text.encode())

    annotation_file = workspace.state.find_file("labels.txt")
    assert annotation_file is not None
    assert annotation_file.color == workspace.get_class_color("0")
    assert [a.label for a in annotation_file.annotations] == ["0", "1"]


def test_yolo_file_uses_class_names(workspace, color_png_bytes, yolo_text):
    loader = FileLoader(workspace, class_names={0: "car", 1: "bus"})
    loader.load("a.png", color_png_bytes)
    loader.load("labels.txt", yolo_text.encode())

    assert workspace.state.find_file("labels.txt").labels() == ["car", "bus"]


def test_annotations_before_image_raise(loader, yolo_text):
    with pytest.raises(MissingImageError):
        loader.load("labels.txt", yolo_text.encode())

    with pytest.raises(MissingImageError):
        loader.load("regions.geojson", b'{"type": "FeatureCollection", "features": []}')


def test_non_yolo_text_is_rejected(loader, color_png_bytes):
    loader.load("a.png", color_png_bytes)

    with pytest.raises(UnsupportedFileTypeError):
        loader.load("notes.txt", b"remember the milk\n")


def test_unknown_file_type_is_rejected(loader):
    with pytest.raises(UnsupportedFileTypeError):
        loader.load("archive.unknownext", b"\x00\x01")


def test_broken_image_propagates_decode_error(loader):
    with pytest.raises(ImageDecodeError):
        loader.load("broken.png", b"not a png")


def test_geojson_uses_image_size(loader, workspace, color_png_bytes):
    loader.load("a.png", color_png_bytes)
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0, 0], [32, 0], [32, 24], [0, 24]]],
                },
                "properties": {"class": "roof"},
            }
        ],
    }

    loader.load("regions.geojson", json.dumps(collection).encode())

    polygon = workspace.state.find_file("regions.geojson").annotations[0]
    assert polygon.label == "roof"
    assert polygon.points == pytest.approx([0, 0, 0.5, 0, 0.5, 0.5, 0, 0.5])


def test_load_path_reads_file(loader, workspace, tmp_path, color_png_bytes):
    path = tmp_path / "disk.png"
    path.write_bytes(color_png_bytes)

    loader.load_path(path)

    assert workspace.state.image_file_name == "disk.png"


def test_yolo_file_with_late_invalid_line_still_loads(
    loader, workspace, color_png_bytes
):
    loader.load("a.png", color_png_bytes)
    content = "0 0.5 0.5 0.1 0.1\n" * 12 + "0 nan 0.5 0.1 0.1\n"

    loader.load("labels.txt", content.encode())

    assert len(workspace.state.find_file("labels.txt").annotations) == 12
