"""Data models for budgets, pixel buffers, results and errors."""

from .compression_budget import (
    CompressionBudget,
    DEFAULT,
    PROFILE_PHOTO,
    CHAT_IMAGE,
    PRESETS,
    get_preset,
)
from .search_policy import SearchPolicy, MIN_QUALITY
from .pixel_buffer import PixelBuffer
from .encoded_image import EncodedImage, EncodeAttempt
from .errors import (
    CompressionError,
    InvalidBudget,
    DecodeError,
    EncoderFailure,
    ResizerFailure,
    BudgetUnsatisfiable,
)

__all__ = [
    'CompressionBudget',
    'DEFAULT',
    'PROFILE_PHOTO',
    'CHAT_IMAGE',
    'PRESETS',
    'get_preset',
    'SearchPolicy',
    'MIN_QUALITY',
    'PixelBuffer',
    'EncodedImage',
    'EncodeAttempt',
    'CompressionError',
    'InvalidBudget',
    'DecodeError',
    'EncoderFailure',
    'ResizerFailure',
    'BudgetUnsatisfiable',
]
