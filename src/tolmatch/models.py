"""
Value types shared by the loaders, the search engine and the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from .config import DEFAULT_PERCENTAGE, DEFAULT_TOLERANCE, validate_percentage, validate_tolerance
from .exceptions import ConfigurationError

Origin = Tuple[int, int]


def freeze(image: np.ndarray) -> np.ndarray:
    """
    Return a read-only RGBA uint8 view of ``image``.
    """
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"expected an RGBA image of shape (h, w, 4), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"expected uint8 pixels, got {image.dtype}")
    frozen = np.ascontiguousarray(image)
    if frozen is image:
        frozen = image.view()
    frozen.flags.writeable = False
    return frozen


@dataclass(frozen=True, slots=True)
class TemplateParams:
    """
    Matching parameters derived from a template file name.
    """

    label: str
    tolerance: int = DEFAULT_TOLERANCE
    percentage: int = DEFAULT_PERCENTAGE
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        validate_tolerance(self.tolerance)
        validate_percentage(self.percentage)


@dataclass(frozen=True, slots=True)
class Template:
    name: str
    image: np.ndarray
    tolerance: int = DEFAULT_TOLERANCE
    percentage: int = DEFAULT_PERCENTAGE
    path: Optional[Path] = None
    label: str = ""
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        validate_tolerance(self.tolerance)
        validate_percentage(self.percentage)
        object.__setattr__(self, "image", freeze(self.image))
        if not self.label:
            object.__setattr__(self, "label", self.name)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass(frozen=True, slots=True)
class SearchZone:
    """
    Rectangle of the source image in which window origins are considered.
    """

    left: int
    top: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if min(self.left, self.top, self.width, self.height) < 0:
            raise ConfigurationError(f"search zone fields must be non-negative: {self}")

    @classmethod
    def full(cls, image: np.ndarray) -> "SearchZone":
        return cls(0, 0, int(image.shape[1]), int(image.shape[0]))


@dataclass(slots=True)
class MatchResult:
    name: str
    origins: List[Origin] = field(default_factory=list)
    elapsed: Optional[float] = None

    def __len__(self) -> int:
        return len(self.origins)


@dataclass(frozen=True, slots=True)
class TemplateFailure:
    """
    A template that was skipped, with the error that caused it.
    """

    name: str
    error: Exception
    path: Optional[Path] = None


@dataclass(slots=True)
class MatchOutputSet:
    """
    Aggregated output of one run.

    ``results`` is indexed by template submission order. A template that
    failed keeps an empty slot so indices stay aligned.
    """

    results: List[MatchResult]
    failures: List[TemplateFailure] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def origins(self) -> List[List[Origin]]:
        return [result.origins for result in self.results]

    @property
    def match_count(self) -> int:
        return sum(len(result.origins) for result in self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index: int) -> MatchResult:
        return self.results[index]
