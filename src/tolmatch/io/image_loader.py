from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..exceptions import ImageDecodeError
from ..models import freeze

PathLike = Union[str, Path]

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


def to_rgba(image: np.ndarray) -> np.ndarray:
    """
    Convert an OpenCV-decoded array (gray, BGR or BGRA) to 8-bit RGBA.
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"unsupported pixel type {image.dtype}")

    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels not in _TO_RGBA:
        raise ValueError(f"unsupported channel count {channels}")
    if image.ndim == 3 and channels == 1:
        image = image[:, :, 0]
    return cv2.cvtColor(image, _TO_RGBA[channels])


def load_rgba(path: PathLike) -> np.ndarray:
    """
    Load an image as a read-only RGBA array suitable for tolerance matching.
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(path, "Unable to load image")
    try:
        rgba = to_rgba(image)
    except ValueError as exc:
        raise ImageDecodeError(path, str(exc)) from exc
    return freeze(rgba)

