from __future__ import annotations

import numpy as np

from ..models import Origin
from .comparator import mismatch_mask


def mismatch_budget(pixel_count: int, percentage: int) -> int:
    """
    Number of mismatching pixels a window may contain and still pass.
    """
    return pixel_count * percentage // 100


def evaluate_window(
    source: np.ndarray,
    template: np.ndarray,
    origin: Origin,
    tolerance: int,
    budget: int,
) -> bool:
    """
    Score one window of ``source`` whose top-left corner is ``origin``.

    Rows of the template are compared in order and the running mismatch count
    is checked after each row, so most failing windows stop after a few rows.
    """
    x, y = origin
    height, width = template.shape[:2]
    if y + height > source.shape[0] or x + width > source.shape[1] or x < 0 or y < 0:
        raise ValueError(f"window at {origin} does not fit inside the source image")

    if budget >= height * width:
        return True

    mismatches = 0
    for row in range(height):
        source_row = source[y + row, x : x + width]
        mismatches += int(np.count_nonzero(mismatch_mask(source_row, template[row], tolerance)))
        if mismatches > budget:
            return False
    return True
