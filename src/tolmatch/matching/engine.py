from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DEFAULT_PERCENTAGE, DEFAULT_TOLERANCE, validate_percentage, validate_tolerance
from ..exceptions import ConfigurationError, MatchCancelledError
from ..models import Origin, SearchZone
from .scorer import evaluate_window, mismatch_budget

logger = logging.getLogger(__name__)


def validate_zone(source: np.ndarray, zone: SearchZone) -> None:
    """
    Reject a zone that is wider or taller than the source image.
    """
    height, width = source.shape[:2]
    if zone.width > width or zone.height > height:
        raise ConfigurationError(
            f"search zone {zone.width}x{zone.height} exceeds source image {width}x{height}"
        )


def candidate_origins(
    source_shape: Sequence[int],
    template_shape: Sequence[int],
    zone: SearchZone,
) -> List[Origin]:
    """
    Every top-left corner inside ``zone`` where the template fits.

    x runs over [left, left + width - template_width] and y over
    [top, top + height - template_height], clipped to the source bounds.
    """
    source_height, source_width = source_shape[:2]
    template_height, template_width = template_shape[:2]

    x_last = min(zone.left + zone.width, source_width) - template_width
    y_last = min(zone.top + zone.height, source_height) - template_height
    if x_last < zone.left or y_last < zone.top:
        return []

    return [(x, y) for y in range(zone.top, y_last + 1) for x in range(zone.left, x_last + 1)]


def _chunks(origins: List[Origin], size: int) -> Iterator[List[Origin]]:
    for start in range(0, len(origins), size):
        yield origins[start : start + size]


@dataclass(slots=True)
class TemplateSearchEngine:
    """
    Exhaustive windowed search with per-pixel tolerance.

    Candidate origins are split into chunks that are scored concurrently on
    ``executor``. When no executor is given each search spins up its own
    thread pool of ``workers`` threads.
    """

    executor: Optional[Executor] = None
    workers: Optional[int] = None
    chunk_size: int = 256

    def search(
        self,
        source: np.ndarray,
        template: np.ndarray,
        tolerance: int = DEFAULT_TOLERANCE,
        percentage: int = DEFAULT_PERCENTAGE,
        zone: Optional[SearchZone] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Origin]:
        """
        Return every origin whose window passes, sorted by (y, x).
        """
        if source.ndim != template.ndim:
            raise ValueError("source and template dimensionality must match")
        validate_tolerance(tolerance)
        validate_percentage(percentage)
        if zone is None:
            zone = SearchZone.full(source)
        validate_zone(source, zone)

        origins = candidate_origins(source.shape, template.shape, zone)
        if not origins:
            logger.debug(
                "template %sx%s does not fit in zone %s",
                template.shape[1],
                template.shape[0],
                zone,
            )
            return []

        budget = mismatch_budget(template.shape[0] * template.shape[1], percentage)

        def score_chunk(chunk: List[Origin]) -> List[Origin]:
            passed: List[Origin] = []
            for origin in chunk:
                if cancel_event is not None and cancel_event.is_set():
                    raise MatchCancelledError("search cancelled")
                if evaluate_window(source, template, origin, tolerance, budget):
                    passed.append(origin)
            return passed

        chunks = list(_chunks(origins, self.chunk_size))
        if self.executor is not None:
            matches = self._collect(self.executor, score_chunk, chunks)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                matches = self._collect(executor, score_chunk, chunks)

        matches.sort(key=lambda origin: (origin[1], origin[0]))
        logger.debug("scored %d origins in %d chunks, %d passed", len(origins), len(chunks), len(matches))
        return matches

    @staticmethod
    def _collect(executor: Executor, score_chunk, chunks: List[List[Origin]]) -> List[Origin]:
        futures = [executor.submit(score_chunk, chunk) for chunk in chunks]
        matches: List[Origin] = []
        try:
            for future in futures:
                matches.extend(future.result())
        except BaseException:
            for future in futures:
                future.cancel()
            raise
        return matches


def similarity_map(
    source: np.ndarray,
    template: np.ndarray,
    threshold: int,
    max_diff: Optional[int] = None,
) -> np.ndarray:
    """
    Exhaustive absolute-difference similarity for every valid origin.

    Each cell holds ``max_diff - sum(|source - template|)`` for the window at
    that origin, or 0 when the similarity is below ``threshold``. The map has
    shape (source_h - template_h + 1, source_w - template_w + 1).
    """
    if source.ndim != template.ndim:
        raise ValueError("source and template dimensionality must match")
    source_height, source_width = source.shape[:2]
    template_height, template_width = template.shape[:2]
    if template_height > source_height or template_width > source_width:
        raise ValueError("template is larger than the source image")

    if max_diff is None:
        max_diff = 255 * int(template.size)

    rows = source_height - template_height + 1
    cols = source_width - template_width + 1
    similarity = np.zeros((rows, cols), dtype=np.int64)
    template_wide = template.astype(np.int64)

    for y in range(rows):
        for x in range(cols):
            window = source[y : y + template_height, x : x + template_width].astype(np.int64)
            sim = max_diff - int(np.abs(window - template_wide).sum())
            if sim >= threshold:
                similarity[y, x] = sim
    return similarity


def best_similarity(similarity: np.ndarray) -> Tuple[Origin, int]:
    """
    Location and value of the highest cell of a similarity map.
    """
    index = int(np.argmax(similarity))
    y, x = divmod(index, similarity.shape[1])
    return (x, y), int(similarity[y, x])
