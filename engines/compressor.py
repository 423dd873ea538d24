"""Budget-constrained compression: clamp, quality search, dimension fallback."""

import logging
from typing import List, Optional

from models.compression_budget import CompressionBudget, DEFAULT
from models.encoded_image import EncodedImage, EncodeAttempt
from models.errors import BudgetUnsatisfiable, EncoderFailure, ResizerFailure
from models.pixel_buffer import PixelBuffer
from models.search_policy import SearchPolicy
from engines.codec import ImageCodec
from engines.opencv_codec import OpenCVCodec
from engines.scaling import needs_downscale

logger = logging.getLogger(__name__)


def _resize(codec: ImageCodec, buffer: PixelBuffer, long_edge: int) -> PixelBuffer:
    resized = codec.resize(buffer, long_edge)
    if resized.long_edge > long_edge:
        raise ResizerFailure(
            f"{codec.name} resized to {resized.width}x{resized.height}, "
            f"long edge exceeds requested {long_edge}"
        )
    return resized


def _encode(codec: ImageCodec, buffer: PixelBuffer, quality: int) -> bytes:
    data = codec.encode(buffer, quality)
    if not isinstance(data, (bytes, bytearray)):
        raise EncoderFailure(f"{codec.name} returned {type(data).__name__}, expected bytes")
    return bytes(data)


def clamp_to_budget(codec: ImageCodec, buffer: PixelBuffer, max_dimension: int) -> PixelBuffer:
    """Single pre-pass resize so the long edge is at most max_dimension."""
    if not needs_downscale(buffer.width, buffer.height, max_dimension):
        return buffer
    clamped = _resize(codec, buffer, max_dimension)
    logger.debug("Clamped %dx%d to %dx%d", buffer.width, buffer.height, clamped.width, clamped.height)
    return clamped


def search_quality(
    codec: ImageCodec,
    buffer: PixelBuffer,
    budget: CompressionBudget,
    policy: SearchPolicy,
    history: List[EncodeAttempt],
) -> EncodedImage:
    """
    Walk the quality ladder downward at a fixed size.

    Stops at the first encoding within the byte budget and returns it. If
    none fits, returns the encoding made at the quality floor. Every
    attempt is appended to `history`.
    """
    for quality in policy.quality_ladder(budget.initial_quality):
        data = _encode(codec, buffer, quality)
        history.append(EncodeAttempt(buffer.long_edge, quality, len(data)))
        logger.debug(
            "Attempt %d: %dx%d q=%d -> %d bytes",
            len(history), buffer.width, buffer.height, quality, len(data),
        )
        if len(data) <= budget.max_output_bytes:
            break
    return _result(data, quality, buffer, history)


def _result(data: bytes, quality: int, buffer: PixelBuffer, history: List[EncodeAttempt]) -> EncodedImage:
    return EncodedImage(
        data=data,
        quality=quality,
        width=buffer.width,
        height=buffer.height,
        attempts=len(history),
        history=tuple(history),
    )


def compress(
    data: bytes,
    budget: CompressionBudget = DEFAULT,
    codec: Optional[ImageCodec] = None,
    policy: Optional[SearchPolicy] = None,
) -> EncodedImage:
    """
    Re-encode image bytes so they fit `budget`.

    Decodes once, clamps the long edge to `budget.max_dimension`, then
    searches quality from `budget.initial_quality` down to the floor. If the
    floor still does not fit, the long edge is reduced by
    `policy.dimension_factor` and the quality search restarts, until
    `policy.min_dimension` is reached.

    Raises:
        DecodeError: `data` is empty or not a decodable image.
        BudgetUnsatisfiable: both floors were reached without fitting;
            the last encoding is attached as `best_effort`.
        EncoderFailure, ResizerFailure: raised by the codec, not retried.
    """
    codec = codec if codec is not None else OpenCVCodec()
    policy = policy if policy is not None else SearchPolicy()

    source = codec.decode(data)
    working = clamp_to_budget(codec, source, budget.max_dimension)
    del source

    history: List[EncodeAttempt] = []
    buffer = working
    while True:
        result = search_quality(codec, buffer, budget, policy, history)
        if result.size <= budget.max_output_bytes:
            logger.debug(
                "Fit %d bytes at %dx%d q=%d after %d attempts",
                result.size, result.width, result.height, result.quality, result.attempts,
            )
            return result

        next_edge = policy.next_dimension(buffer.long_edge)
        if next_edge is None:
            raise BudgetUnsatisfiable(result, budget)

        logger.info(
            "Quality floor reached at long edge %d (%d bytes > %d), retrying at %d",
            buffer.long_edge, result.size, budget.max_output_bytes, next_edge,
        )
        buffer = _resize(codec, working, next_edge)
