"""Result of a compression run."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EncodeAttempt:
    """One encode call made during the search."""
    
    long_edge: int
    quality: int
    size: int


@dataclass(frozen=True)
class EncodedImage:
    """Encoded bytes plus how the engine got there."""
    
    data: bytes
    quality: int
    width: int
    height: int
    attempts: int
    history: Tuple[EncodeAttempt, ...] = ()
    
    @property
    def size(self) -> int:
        return len(self.data)
    
    @property
    def long_edge(self) -> int:
        return max(self.width, self.height)
    
    def fits(self, budget) -> bool:
        """True when both the byte and dimension ceilings hold."""
        return self.size <= budget.max_output_bytes and self.long_edge <= budget.max_dimension
