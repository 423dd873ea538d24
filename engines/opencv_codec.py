"""OpenCV codec adapter (JPEG / WebP)."""

import cv2
import numpy as np

from models.errors import DecodeError, EncoderFailure, ResizerFailure
from models.pixel_buffer import PixelBuffer
from engines.scaling import fit_long_edge

_FORMATS = {
    'jpeg': ('.jpg', cv2.IMWRITE_JPEG_QUALITY),
    'webp': ('.webp', cv2.IMWRITE_WEBP_QUALITY),
}


def _check_quality(quality: int) -> None:
    if not (1 <= quality <= 100):
        raise ValueError(f"Quality must be 1-100, got {quality}")


class OpenCVCodec:
    """Decode with imdecode, resize with INTER_AREA, encode with imencode."""
    
    def __init__(self, fmt: str = 'jpeg'):
        if fmt not in _FORMATS:
            raise ValueError(f"Unsupported format {fmt!r}, expected one of {sorted(_FORMATS)}")
        self.fmt = fmt
        self.name = f"opencv-{fmt}"
        self._ext, self._quality_flag = _FORMATS[fmt]
    
    def decode(self, data: bytes) -> PixelBuffer:
        if not data:
            raise DecodeError("Input is empty")
        raw = np.frombuffer(data, dtype=np.uint8)
        try:
            # IMREAD_COLOR applies EXIF orientation and drops alpha
            bgr = cv2.imdecode(raw, cv2.IMREAD_COLOR)
        except cv2.error as exc:
            raise DecodeError(f"OpenCV could not decode {len(data)} bytes") from exc
        if bgr is None:
            raise DecodeError(f"OpenCV could not decode {len(data)} bytes")
        return PixelBuffer(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))
    
    def resize(self, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
        new_w, new_h = fit_long_edge(buffer.width, buffer.height, long_edge)
        if (new_w, new_h) == (buffer.width, buffer.height):
            return buffer
        shrinking = new_w < buffer.width or new_h < buffer.height
        interp = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
        try:
            resized = cv2.resize(buffer.pixels, (new_w, new_h), interpolation=interp)
        except cv2.error as exc:
            raise ResizerFailure(f"OpenCV resize to {new_w}x{new_h} failed") from exc
        return PixelBuffer(resized)
    
    def encode(self, buffer: PixelBuffer, quality: int) -> bytes:
        _check_quality(quality)
        bgr = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGB2BGR)
        try:
            ok, encoded = cv2.imencode(self._ext, bgr, [self._quality_flag, int(quality)])
        except cv2.error as exc:
            raise EncoderFailure(f"OpenCV {self.fmt} encode failed") from exc
        if not ok:
            raise EncoderFailure(f"OpenCV {self.fmt} encode returned no data")
        return encoded.tobytes()
