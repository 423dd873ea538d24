"""Image file I/O using OpenCV."""

from pathlib import Path

import cv2
import numpy as np


def read_bytes(path) -> bytes:
    """Read a whole file; raises FileNotFoundError if missing."""
    return Path(path).read_bytes()


def write_bytes(data: bytes, path) -> None:
    """Write bytes, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def encode_png(image: np.ndarray) -> bytes:
    """Lossless PNG bytes from an RGB array."""
    ok, encoded = cv2.imencode('.png', cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
    if not ok:
        raise ValueError("Could not encode PNG")
    return encoded.tobytes()
