"""Shared fixtures: a recording codec with predictable sizes."""

import math

import numpy as np
import pytest

from models.errors import DecodeError
from models.pixel_buffer import PixelBuffer
from engines.scaling import fit_long_edge


def make_input(width: int, height: int) -> bytes:
    """Input bytes understood by RecordingCodec."""
    return f"IMG:{width}x{height}".encode()


class RecordingCodec:
    """
    Fake codec: encoded size is `density * pixels * quality / 100` plus a
    fixed header, and every call is recorded.
    
    With `incompressible=True` the size ignores quality (3 bytes per pixel).
    """
    
    name = 'recording'
    
    def __init__(self, density: float = 1.0, header: int = 0, incompressible: bool = False):
        self.density = density
        self.header = header
        self.incompressible = incompressible
        self.calls = []
    
    def decode(self, data: bytes) -> PixelBuffer:
        self.calls.append(('decode', len(data)))
        if not data.startswith(b'IMG:'):
            raise DecodeError("not a test image")
        width, height = (int(v) for v in data[4:].decode().split('x'))
        return PixelBuffer(np.zeros((height, width, 3), dtype=np.uint8))
    
    def resize(self, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
        self.calls.append(('resize', long_edge))
        width, height = fit_long_edge(buffer.width, buffer.height, long_edge)
        return PixelBuffer(np.zeros((height, width, 3), dtype=np.uint8))
    
    def encode_size(self, width: int, height: int, quality: int) -> int:
        if self.incompressible:
            return self.header + width * height * 3
        return self.header + math.ceil(self.density * width * height * quality / 100)
    
    def encode(self, buffer: PixelBuffer, quality: int) -> bytes:
        self.calls.append(('encode', buffer.width, buffer.height, quality))
        size = self.encode_size(buffer.width, buffer.height, quality)
        return bytes([quality % 256]) * size
    
    def calls_named(self, name: str):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def recording_codec():
    return RecordingCodec


@pytest.fixture
def image_bytes():
    return make_input
