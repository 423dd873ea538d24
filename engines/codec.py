"""Codec capability consumed by the compression engine."""

from typing import Protocol, runtime_checkable

from models.pixel_buffer import PixelBuffer


@runtime_checkable
class ImageCodec(Protocol):
    """
    Decode, resize and encode primitives supplied by the host.
    
    Implementations must be deterministic for fixed inputs and must not
    keep mutable state between calls; the engine may share one instance
    across threads.
    """
    
    name: str
    
    def decode(self, data: bytes) -> PixelBuffer:
        """Decode image bytes. Raises DecodeError on malformed input."""
        ...
    
    def resize(self, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
        """Aspect-preserving resize so the long edge equals `long_edge`."""
        ...
    
    def encode(self, buffer: PixelBuffer, quality: int) -> bytes:
        """Lossy encode at quality 1-100."""
        ...
