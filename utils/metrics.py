"""Fidelity metrics: PSNR and SSIM of an encoded result against its source."""

import math
from dataclasses import dataclass

import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

from models.encoded_image import EncodedImage
from models.pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class Fidelity:
    """PSNR in dB (inf for identical images) and SSIM in [-1, 1]."""
    
    psnr: float
    ssim: float


def _ssim_window(height: int, width: int) -> int:
    # skimage needs an odd window no larger than the smallest side
    side = min(7, height, width)
    return side if side % 2 == 1 else side - 1


def compute_psnr_ssim(original_rgb: np.ndarray, reconstructed_rgb: np.ndarray) -> Fidelity:
    """Compute PSNR and SSIM over RGB uint8 images of equal shape."""
    if original_rgb.shape != reconstructed_rgb.shape:
        raise ValueError(f"Shape mismatch: {original_rgb.shape} vs {reconstructed_rgb.shape}")
    if np.array_equal(original_rgb, reconstructed_rgb):
        return Fidelity(psnr=math.inf, ssim=1.0)
    
    psnr = peak_signal_noise_ratio(original_rgb, reconstructed_rgb, data_range=255)
    win_size = _ssim_window(*original_rgb.shape[:2])
    if win_size < 3:
        ssim = float('nan')
    else:
        ssim = structural_similarity(
            original_rgb, reconstructed_rgb, channel_axis=2, data_range=255, win_size=win_size
        )
    return Fidelity(psnr=float(psnr), ssim=float(ssim))


def measure_fidelity(reference: PixelBuffer, encoded: EncodedImage, codec) -> Fidelity:
    """
    Decode `encoded` with `codec` and compare it to `reference`.
    
    The reference is resized to the encoded long edge first, so the score
    reflects both the downscale and the lossy encode. Pass the buffer the
    engine searched from (the decoded source after `clamp_to_budget`);
    resizing the unclamped source can round the short edge differently.
    """
    decoded = codec.decode(encoded.data)
    if reference.long_edge != decoded.long_edge:
        reference = codec.resize(reference, decoded.long_edge)
    if (reference.width, reference.height) != (decoded.width, decoded.height):
        raise ValueError(
            f"Decoded {decoded.width}x{decoded.height} does not match "
            f"reference {reference.width}x{reference.height}"
        )
    return compute_psnr_ssim(reference.pixels, decoded.pixels)
