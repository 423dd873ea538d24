"""Pillow codec adapter (JPEG / WebP)."""

import io

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from models.errors import DecodeError, EncoderFailure, ResizerFailure
from models.pixel_buffer import PixelBuffer
from engines.scaling import fit_long_edge

_FORMATS = ('JPEG', 'WEBP')


def _flatten(img: Image.Image, background=(255, 255, 255)) -> Image.Image:
    """Drop transparency by compositing onto a solid background."""
    if img.mode == 'P' and 'transparency' in img.info:
        img = img.convert('RGBA')
    if img.mode in ('RGBA', 'LA'):
        base = Image.new('RGB', img.size, background)
        base.paste(img, mask=img.getchannel('A'))
        return base
    return img.convert('RGB')


class PillowCodec:
    """Decode with EXIF transpose, resize with Lanczos, save optimized."""
    
    def __init__(self, fmt: str = 'JPEG'):
        fmt = fmt.upper()
        if fmt not in _FORMATS:
            raise ValueError(f"Unsupported format {fmt!r}, expected one of {_FORMATS}")
        self.fmt = fmt
        self.name = f"pillow-{fmt.lower()}"
    
    def decode(self, data: bytes) -> PixelBuffer:
        if not data:
            raise DecodeError("Input is empty")
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                img = ImageOps.exif_transpose(img)
                rgb = _flatten(img)
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise DecodeError(f"Pillow could not decode {len(data)} bytes") from exc
        return PixelBuffer(np.asarray(rgb, dtype=np.uint8).copy())
    
    def resize(self, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
        new_w, new_h = fit_long_edge(buffer.width, buffer.height, long_edge)
        if (new_w, new_h) == (buffer.width, buffer.height):
            return buffer
        try:
            img = Image.fromarray(buffer.pixels)
            resized = img.resize((new_w, new_h), Image.Resampling.LANCZOS)
        except (ValueError, OSError) as exc:
            raise ResizerFailure(f"Pillow resize to {new_w}x{new_h} failed") from exc
        return PixelBuffer(np.asarray(resized, dtype=np.uint8).copy())
    
    def encode(self, buffer: PixelBuffer, quality: int) -> bytes:
        if not (1 <= quality <= 100):
            raise ValueError(f"Quality must be 1-100, got {quality}")
        buf = io.BytesIO()
        try:
            Image.fromarray(buffer.pixels).save(
                buf, self.fmt, quality=int(quality), optimize=True
            )
        except (ValueError, OSError) as exc:
            raise EncoderFailure(f"Pillow {self.fmt} encode failed") from exc
        return buf.getvalue()
