"""Decoded raster held by the engine during a single run."""

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """RGB uint8 pixels, shape (height, width, 3)."""
    
    pixels: np.ndarray
    
    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"Expected HxWx3 pixels, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")
    
    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])
    
    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])
    
    @property
    def long_edge(self) -> int:
        return max(self.width, self.height)
