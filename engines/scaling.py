"""Long-edge geometry shared by the resize adapters."""

from typing import Tuple


def needs_downscale(width: int, height: int, max_long_edge: int) -> bool:
    """True if either side is larger than the allowed long edge."""
    return width > max_long_edge or height > max_long_edge


def fit_long_edge(width: int, height: int, long_edge: int) -> Tuple[int, int]:
    """Size with the given long edge, preserving aspect ratio."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid size {width}x{height}")
    if long_edge <= 0:
        raise ValueError(f"long_edge must be > 0, got {long_edge}")
    scale = long_edge / max(width, height)
    if width >= height:
        return long_edge, max(1, round(height * scale))
    return max(1, round(width * scale)), long_edge
