from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import cv2

from ..config import DEFAULT_BOX_SIZE, DEFAULT_OUTPUT_PATH
from ..exceptions import ImageDecodeError
from ..models import MatchOutputSet
from .image_loader import PathLike

logger = logging.getLogger(__name__)

BOX_COLOR = (0, 0, 0)


def draw_matches(
    output: MatchOutputSet,
    source_path: PathLike,
    output_path: PathLike = DEFAULT_OUTPUT_PATH,
    box_size: int = DEFAULT_BOX_SIZE,
) -> Optional[Path]:
    """
    Draw a hollow ``box_size`` square at every matched origin and save the image.

    Returns the written path, or ``None`` when there was nothing to draw.
    """
    if output.match_count == 0:
        logger.info("No template matched in %s, no result image written", source_path)
        return None

    annotated = cv2.imread(str(source_path), cv2.IMREAD_COLOR)
    if annotated is None:
        raise ImageDecodeError(source_path, "Unable to load image")

    for result in output.results:
        for x, y in result.origins:
            cv2.rectangle(annotated, (x, y), (x + box_size - 1, y + box_size - 1), BOX_COLOR, thickness=1)

    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(target), annotated):
        raise OSError(f"Failed to write result image: {target}")
    logger.info("Result image with %d markers saved to %s", output.match_count, target)
    return target
