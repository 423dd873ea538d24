"""Block-DCT codec: JPEG-like transform coding in a small zlib container."""

import math
import struct
import zlib
from typing import List, Literal, Tuple

import cv2
import numpy as np
from scipy.fft import dctn, idctn

from models.errors import DecodeError
from models.pixel_buffer import PixelBuffer
from engines.opencv_codec import OpenCVCodec
from utils.constants import JPEG_LUMA_Q50, JPEG_CHROMA_Q50, ZIGZAG_ORDER

MAGIC = b'BDCT'
VERSION = 1
BLOCK_SIZE = 8

# magic, version, chroma factor, width, height, quality
_HEADER = struct.Struct('>4sBBIIB')
_CHROMA_FACTORS = {'4:4:4': 1, '4:2:0': 2}


def scale_quant_matrix(base_matrix: np.ndarray, quality: int) -> np.ndarray:
    """Scale a Q50 table by quality factor (1-100) using the IJG formula."""
    quality = int(np.clip(quality, 1, 100))
    if quality < 50:
        scale = 5000.0 / quality
    else:
        scale = 200.0 - 2.0 * quality
    Q = np.floor((base_matrix * scale + 50.0) / 100.0)
    return np.clip(Q, 1, 255)


def rgb_to_ycbcr(rgb: np.ndarray) -> np.ndarray:
    """RGB to YCbCr using ITU-R BT.601."""
    R, G, B = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    Y = 0.299 * R + 0.587 * G + 0.114 * B
    Cb = -0.168736 * R - 0.331264 * G + 0.5 * B + 128.0
    Cr = 0.5 * R - 0.418688 * G - 0.081312 * B + 128.0
    return np.stack([Y, Cb, Cr], axis=-1)


def ycbcr_to_rgb(ycbcr: np.ndarray) -> np.ndarray:
    """YCbCr to RGB uint8 using ITU-R BT.601."""
    Y, Cb, Cr = ycbcr[..., 0], ycbcr[..., 1] - 128.0, ycbcr[..., 2] - 128.0
    R = Y + 1.402 * Cr
    G = Y - 0.344136 * Cb - 0.714136 * Cr
    B = Y + 1.772 * Cb
    return np.clip(np.rint(np.stack([R, G, B], axis=-1)), 0, 255).astype(np.uint8)


def plane_shapes(width: int, height: int, factor: int) -> List[Tuple[int, int]]:
    """(rows, cols) of the Y, Cb and Cr planes."""
    chroma = (math.ceil(height / factor), math.ceil(width / factor))
    return [(height, width), chroma, chroma]


def _block_count(shape: Tuple[int, int]) -> int:
    return math.ceil(shape[0] / BLOCK_SIZE) * math.ceil(shape[1] / BLOCK_SIZE)


def _to_blocks(plane: np.ndarray) -> np.ndarray:
    """Edge-pad to a multiple of the block size, view as (rows, cols, B, B)."""
    h, w = plane.shape
    padded = np.pad(plane, ((0, -h % BLOCK_SIZE), (0, -w % BLOCK_SIZE)), mode='edge')
    ph, pw = padded.shape
    return padded.reshape(ph // BLOCK_SIZE, BLOCK_SIZE, pw // BLOCK_SIZE, BLOCK_SIZE).swapaxes(1, 2)


def _from_blocks(blocks: np.ndarray, shape: Tuple[int, int]) -> np.ndarray:
    rows, cols = blocks.shape[:2]
    merged = blocks.swapaxes(1, 2).reshape(rows * BLOCK_SIZE, cols * BLOCK_SIZE)
    return merged[:shape[0], :shape[1]]


def encode_plane(plane: np.ndarray, table: np.ndarray) -> np.ndarray:
    """Level shift, DCT and quantize; returns (64, n_blocks) int16 in zigzag order."""
    coeffs = dctn(_to_blocks(plane) - 128.0, type=2, axes=(-2, -1), norm='ortho')
    quantized = np.round(coeffs / table).astype(np.int16)
    return quantized.reshape(-1, BLOCK_SIZE * BLOCK_SIZE)[:, ZIGZAG_ORDER].T


def decode_plane(zigzag: np.ndarray, shape: Tuple[int, int], table: np.ndarray) -> np.ndarray:
    """Inverse of encode_plane, returns float64 samples cropped to `shape`."""
    rows = math.ceil(shape[0] / BLOCK_SIZE)
    cols = math.ceil(shape[1] / BLOCK_SIZE)
    flat = np.empty((rows * cols, BLOCK_SIZE * BLOCK_SIZE), dtype=np.float64)
    flat[:, ZIGZAG_ORDER] = zigzag.T
    blocks = flat.reshape(rows, cols, BLOCK_SIZE, BLOCK_SIZE) * table
    spatial = idctn(blocks, type=2, axes=(-2, -1), norm='ortho') + 128.0
    return _from_blocks(spatial, shape)


class DctCodec:
    """
    Deterministic transform codec built on scipy's DCT.

    Output is identical on every platform, unlike libjpeg builds, which
    makes it the reference codec for reproducible budgets. Anything that
    is not a BDCT container is decoded through OpenCV.
    """

    name = 'dct'

    def __init__(self, subsampling: Literal['4:4:4', '4:2:0'] = '4:2:0'):
        if subsampling not in _CHROMA_FACTORS:
            raise ValueError(f"Unknown subsampling mode: {subsampling}")
        self.subsampling = subsampling
        self._factor = _CHROMA_FACTORS[subsampling]
        self._fallback = OpenCVCodec()

    def encode(self, buffer: PixelBuffer, quality: int) -> bytes:
        if not (1 <= quality <= 100):
            raise ValueError(f"Quality must be 1-100, got {quality}")
        ycbcr = rgb_to_ycbcr(buffer.pixels.astype(np.float64))
        shapes = plane_shapes(buffer.width, buffer.height, self._factor)
        luma_q = scale_quant_matrix(JPEG_LUMA_Q50, quality)
        chroma_q = scale_quant_matrix(JPEG_CHROMA_Q50, quality)

        columns = [encode_plane(ycbcr[..., 0], luma_q)]
        for idx in (1, 2):
            channel = ycbcr[..., idx]
            if self._factor > 1:
                rows, cols = shapes[idx]
                channel = cv2.resize(np.ascontiguousarray(channel), (cols, rows), interpolation=cv2.INTER_AREA)
            columns.append(encode_plane(channel, chroma_q))

        packed = np.concatenate(columns, axis=1).astype('<i2')
        header = _HEADER.pack(MAGIC, VERSION, self._factor, buffer.width, buffer.height, quality)
        return header + zlib.compress(packed.tobytes(), 9)

    def decode(self, data: bytes) -> PixelBuffer:
        if not data.startswith(MAGIC):
            return self._fallback.decode(data)
        if len(data) < _HEADER.size:
            raise DecodeError("Truncated BDCT header")
        _, version, factor, width, height, quality = _HEADER.unpack_from(data)
        if version != VERSION or factor not in _CHROMA_FACTORS.values():
            raise DecodeError(f"Unsupported BDCT stream (version {version}, factor {factor})")
        if width == 0 or height == 0 or not (1 <= quality <= 100):
            raise DecodeError(f"Corrupt BDCT header ({width}x{height}, quality {quality})")

        shapes = plane_shapes(width, height, factor)
        counts = [_block_count(shape) for shape in shapes]
        expected = BLOCK_SIZE * BLOCK_SIZE * sum(counts) * 2
        inflater = zlib.decompressobj()
        try:
            raw = inflater.decompress(data[_HEADER.size:], expected + 1)
        except zlib.error as exc:
            raise DecodeError("Corrupt BDCT payload") from exc
        if not inflater.eof or len(raw) != expected:
            raise DecodeError(f"BDCT payload has {len(raw)} bytes, expected {expected}")

        packed = np.frombuffer(raw, dtype='<i2').reshape(BLOCK_SIZE * BLOCK_SIZE, sum(counts))
        parts = np.split(packed, np.cumsum(counts)[:-1], axis=1)
        luma_q = scale_quant_matrix(JPEG_LUMA_Q50, quality)
        chroma_q = scale_quant_matrix(JPEG_CHROMA_Q50, quality)

        planes = [decode_plane(parts[0], shapes[0], luma_q)]
        for idx in (1, 2):
            plane = decode_plane(parts[idx], shapes[idx], chroma_q)
            if factor > 1:
                plane = cv2.resize(np.ascontiguousarray(plane), (width, height), interpolation=cv2.INTER_LINEAR)
            planes.append(plane)
        return PixelBuffer(ycbcr_to_rgb(np.stack(planes, axis=-1)))

    def resize(self, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
        return self._fallback.resize(buffer, long_edge)
