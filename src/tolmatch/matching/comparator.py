from __future__ import annotations

from typing import Sequence

import numpy as np

CHANNELS = 4


def pixels_match(a: Sequence[int], b: Sequence[int], tolerance: int) -> bool:
    """
    True when every RGBA channel of ``a`` and ``b`` differs by at most ``tolerance``.
    """
    if len(a) != CHANNELS or len(b) != CHANNELS:
        raise ValueError("pixels must have exactly 4 channels")
    for channel in range(CHANNELS):
        if abs(int(a[channel]) - int(b[channel])) > tolerance:
            return False
    return True


def mismatch_mask(a: np.ndarray, b: np.ndarray, tolerance: int) -> np.ndarray:
    """
    Vectorized ``pixels_match`` over same-shaped pixel arrays.

    Returns a boolean array with the channel axis dropped, ``True`` where the
    pixel pair does not match.
    """
    if a.shape != b.shape:
        raise ValueError(f"pixel arrays must share a shape, got {a.shape} and {b.shape}")
    diff = np.abs(a.astype(np.int16) - b.astype(np.int16))
    return np.any(diff > tolerance, axis=-1)
