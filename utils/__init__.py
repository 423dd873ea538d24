"""Shared utilities."""

from .constants import JPEG_LUMA_Q50, JPEG_CHROMA_Q50, ZIGZAG_ORDER
from .metrics import Fidelity, compute_psnr_ssim, measure_fidelity
from .test_images import (
    generate_noise,
    generate_gradient,
    generate_colored_checkerboard,
    generate_photo_like,
    generate_demo_image,
)
from .image_io import read_bytes, write_bytes, encode_png
from .settings import Settings, load_settings

__all__ = [
    'JPEG_LUMA_Q50',
    'JPEG_CHROMA_Q50',
    'ZIGZAG_ORDER',
    'Fidelity',
    'compute_psnr_ssim',
    'measure_fidelity',
    'generate_noise',
    'generate_gradient',
    'generate_colored_checkerboard',
    'generate_photo_like',
    'generate_demo_image',
    'read_bytes',
    'write_bytes',
    'encode_png',
    'Settings',
    'load_settings',
]
