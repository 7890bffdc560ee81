"""
Pytest configuration and shared fixtures for annoview tests.
"""

import itertools

import cv2
import numpy as np
import pytest

from annoview.frontend.utils import settings_store
from annoview.models.annotations import AnnotationFile, BBoxAnnotation
from annoview.models.workspace import ImagePayload
from annoview.services.workspace import Workspace


@pytest.fixture(autouse=True)
def reset_display_defaults():
    """Display defaults are module level, restore them around every test."""
    settings_store.reset_settings()
    yield
    settings_store.reset_settings()


@pytest.fixture
def clock():
    """Deterministic nanosecond clock."""
    return itertools.count(1_000).__next__


@pytest.fixture
def workspace(clock):
    return Workspace(clock=clock)


@pytest.fixture
def make_payload():
    def _make(width: int = 64, height: int = 48, value=(10, 20, 30)) -> ImagePayload:
        pixels = np.zeros((height, width, 3), dtype=np.uint8)
        pixels[:] = value
        return ImagePayload.from_array(pixels)

    return _make


@pytest.fixture
def make_annotation_file():
    def _make(name: str = "f1", labels=("car",), visible: bool = True) -> AnnotationFile:
        annotations = [
            BBoxAnnotation(label=label, x=0.5, y=0.5, w=0.2, h=0.2, source_file=name)
            for label in labels
        ]
        return AnnotationFile(
            name=name, annotations=annotations, visible=visible, color="hsl(10, 70%, 50%)"
        )

    return _make


@pytest.fixture
def color_png_bytes():
    """64x48 PNG with a red left half and a blue right half."""
    pixels = np.zeros((48, 64, 3), dtype=np.uint8)
    pixels[:, :32] = (0, 0, 255)
    pixels[:, 32:] = (255, 0, 0)
    ok, encoded = cv2.imencode(".png", pixels)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def gray_png_bytes():
    """64x48 single channel PNG with a white square in the middle."""
    pixels = np.zeros((48, 64), dtype=np.uint8)
    pixels[16:32, 24:40] = 255
    ok, encoded = cv2.imencode(".png", pixels)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def yolo_text():
    return "0 0.5 0.5 0.2 0.2\n1 0.25 0.25 0.1 0.1\n"
