"""Search constants: quality ladder and dimension fallback."""

from dataclasses import dataclass
from typing import Optional, Tuple

# Encoder quality is never reduced below this
MIN_QUALITY = 1


@dataclass(frozen=True)
class SearchPolicy:
    """How far and how fast the engine walks quality and dimension down."""
    
    quality_step: int = 15
    min_dimension: int = 64
    dimension_factor: float = 0.5
    
    def __post_init__(self):
        for field_name in ('quality_step', 'min_dimension'):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{field_name} must be an integer, got {value!r}")
        if self.quality_step < 1:
            raise ValueError(f"quality_step must be >= 1, got {self.quality_step}")
        if self.min_dimension < 1:
            raise ValueError(f"min_dimension must be >= 1, got {self.min_dimension}")
        if not (0.0 < self.dimension_factor < 1.0):
            raise ValueError(f"dimension_factor must be in (0, 1), got {self.dimension_factor}")
    
    def quality_ladder(self, initial_quality: int) -> Tuple[int, ...]:
        """Strictly decreasing qualities for one search round, ending at MIN_QUALITY."""
        if not (MIN_QUALITY <= initial_quality <= 100):
            raise ValueError(f"initial_quality must be 1-100, got {initial_quality}")
        quality = initial_quality
        ladder = [quality]
        while quality > MIN_QUALITY:
            quality = max(MIN_QUALITY, quality - self.quality_step)
            ladder.append(quality)
        return tuple(ladder)
    
    def next_dimension(self, long_edge: int) -> Optional[int]:
        """Long edge for the next fallback round, None once the floor is reached."""
        if long_edge <= self.min_dimension:
            return None
        return max(self.min_dimension, int(long_edge * self.dimension_factor))
