"""Content-addressed display colors for annotation class labels."""

import logging
import re
from functools import lru_cache
from typing import Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

HUE_STEP = 137.508  # golden angle, spreads neighbouring hashes around the wheel
SATURATION = 70
LIGHTNESS = 50

_HSL_PATTERN = re.compile(
    r"^hsl\(\s*([-\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)$", re.IGNORECASE
)
_HEX_PATTERN = re.compile(r"^#([0-9a-f]{6})$", re.IGNORECASE)


def label_hash(label: str) -> int:
    """Order dependent character-code hash, wrapped to a signed 32-bit int."""
    value = 0
    for char in label:
        value = (ord(char) + ((value << 5) - value)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def hue_for_label(label: str) -> float:
    return (abs(label_hash(label)) * HUE_STEP) % 360


def color_for_label(label: str) -> str:
    """Return the CSS hsl() color assigned to ``label``."""
    return f"hsl({hue_for_label(label):.1f}, {SATURATION}%, {LIGHTNESS}%)"


@lru_cache(maxsize=512)
def to_bgr(color: str) -> Tuple[int, int, int]:
    """Convert an ``hsl(h, s%, l%)`` or ``#rrggbb`` string to an OpenCV BGR tuple."""
    color = color.strip()
    hex_match = _HEX_PATTERN.match(color)
    if hex_match:
        value = hex_match.group(1)
        red, green, blue = (int(value[i : i + 2], 16) for i in (0, 2, 4))
        return (blue, green, red)

    hsl_match = _HSL_PATTERN.match(color)
    if not hsl_match:
        raise ValueError(f"Unsupported color string: {color!r}")

    hue = float(hsl_match.group(1)) % 360
    saturation = min(float(hsl_match.group(2)), 100.0) / 100.0
    lightness = min(float(hsl_match.group(3)), 100.0) / 100.0
    # 8-bit HLS in OpenCV stores hue as degrees / 2.
    hls = np.array(
        [[[round(hue / 2) % 180, round(lightness * 255), round(saturation * 255)]]],
        dtype=np.uint8,
    )
    blue, green, red = cv2.cvtColor(hls, cv2.COLOR_HLS2BGR)[0, 0]
    return (int(blue), int(green), int(red))


class ClassColorRegistry:
    """Fills a class -> color map on first sight of each label.

    The map it edits belongs to the caller (the workspace state), so a replay that
    starts from an empty map reproduces the same colors without storing them.
    """

    def color(self, class_colors: dict, label: str) -> str:
        existing = class_colors.get(label)
        if existing is not None:
            return existing
        assigned = color_for_label(label)
        class_colors[label] = assigned
        logger.debug(f"Assigned color {assigned} to class '{label}'")
        return assigned

    def seed(self, class_colors: dict, labels) -> None:
        for label in labels:
            self.color(class_colors, label)

    def override(self, class_colors: dict, label: str, color: str) -> None:
        to_bgr(color)  # reject strings the renderer could not draw
        class_colors[label] = color
