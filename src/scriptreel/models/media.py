"""Media shape options accepted by the generators."""

from enum import Enum


class AspectRatio(str, Enum):
    """Supported image and video aspect ratios."""
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    SQUARE = "1:1"
    CLASSIC = "4:3"
    CLASSIC_PORTRAIT = "3:4"


class ImageSize(str, Enum):
    """Resolution tiers of the pro image model."""
    SIZE_1K = "1K"
    SIZE_2K = "2K"
    SIZE_4K = "4K"
