import colorsys
from typing import Iterator, Tuple

from dsmanalysis.config import (
    GOLDEN_RATIO_CONJUGATE, CLUSTER_COLOR_START_HUE, CLUSTER_COLOR_SATURATION, CLUSTER_COLOR_VALUE
)

RGB = Tuple[float, float, float]


def hsv_to_quantized_rgb(h: float, s: float, v: float) -> RGB:
    """Convert HSV to RGB, rounding each channel to 8 bits like a display colour."""
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return (int(r * 255.0 + 0.5) / 255.0, int(g * 255.0 + 0.5) / 255.0, int(b * 255.0 + 0.5) / 255.0)


def golden_ratio_colors(start_hue: float = CLUSTER_COLOR_START_HUE) -> Iterator[RGB]:
    """
    Infinite sequence of well separated colours.

    Every step advances the hue by the golden ratio conjugate (mod 1), which
    keeps consecutive colours far apart on the colour wheel.
    """
    hue = start_hue
    while True:
        hue = (hue + GOLDEN_RATIO_CONJUGATE) % 1.0
        yield hsv_to_quantized_rgb(hue, CLUSTER_COLOR_SATURATION, CLUSTER_COLOR_VALUE)
