"""Run many compressions on a thread pool, returning explicit outcomes."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional

from models.compression_budget import CompressionBudget, DEFAULT
from models.encoded_image import EncodedImage
from models.errors import BudgetUnsatisfiable, CompressionError
from models.search_policy import SearchPolicy
from engines.codec import ImageCodec
from engines.compressor import compress
from engines.opencv_codec import OpenCVCodec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressionOutcome:
    """Result or error for one input; `result` is the best effort when unsatisfiable."""
    
    index: int
    result: Optional[EncodedImage] = None
    error: Optional[CompressionError] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None


def _run_one(index: int, data: bytes, budget, codec, policy) -> CompressionOutcome:
    try:
        return CompressionOutcome(index, result=compress(data, budget, codec, policy))
    except BudgetUnsatisfiable as exc:
        return CompressionOutcome(index, result=exc.best_effort, error=exc)
    except CompressionError as exc:
        logger.warning("Item %d failed: %s", index, exc)
        return CompressionOutcome(index, error=exc)


def compress_many(
    items: Iterable[bytes],
    budget: CompressionBudget = DEFAULT,
    codec: Optional[ImageCodec] = None,
    policy: Optional[SearchPolicy] = None,
    max_workers: Optional[int] = None,
) -> List[CompressionOutcome]:
    """Compress every input with the same budget; outcomes keep input order."""
    codec = codec if codec is not None else OpenCVCodec()
    policy = policy if policy is not None else SearchPolicy()
    payloads = list(items)
    if not payloads:
        return []
    
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(_run_one, i, data, budget, codec, policy)
            for i, data in enumerate(payloads)
        ]
        return [future.result() for future in futures]
