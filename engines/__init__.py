"""Compression engine and codec adapters - pure computation, no I/O."""

from .codec import ImageCodec
from .scaling import fit_long_edge, needs_downscale
from .opencv_codec import OpenCVCodec
from .pillow_codec import PillowCodec
from .dct_codec import DctCodec
from .compressor import compress, clamp_to_budget, search_quality
from .batch import compress_many, CompressionOutcome

CODECS = {
    'opencv': OpenCVCodec,
    'pillow': PillowCodec,
    'dct': DctCodec,
}


def get_codec(name: str, **options) -> ImageCodec:
    """Build a codec adapter by name."""
    if name not in CODECS:
        raise ValueError(f"Unknown codec {name!r}, expected one of {sorted(CODECS)}")
    return CODECS[name](**options)


__all__ = [
    'ImageCodec',
    'fit_long_edge',
    'needs_downscale',
    'OpenCVCodec',
    'PillowCodec',
    'DctCodec',
    'compress',
    'clamp_to_budget',
    'search_quality',
    'compress_many',
    'CompressionOutcome',
    'CODECS',
    'get_codec',
]
