from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .exceptions import ConfigurationError

DEFAULT_TOLERANCE = 30
DEFAULT_PERCENTAGE = 25
DEFAULT_BOX_SIZE = 20
DEFAULT_EXTENSIONS = (".png",)
DEFAULT_OUTPUT_PATH = Path("tests/result_image.png")

MAX_TOLERANCE = 255
MAX_PERCENTAGE = 100


def validate_tolerance(tolerance: int) -> int:
    if not 0 <= tolerance <= MAX_TOLERANCE:
        raise ConfigurationError(f"tolerance must be between 0 and {MAX_TOLERANCE}, got {tolerance}")
    return int(tolerance)


def validate_percentage(percentage: int) -> int:
    if not 0 <= percentage <= MAX_PERCENTAGE:
        raise ConfigurationError(f"percentage must be between 0 and {MAX_PERCENTAGE}, got {percentage}")
    return int(percentage)


@dataclass(slots=True)
class MatchSettings:
    """
    Run-wide knobs for the orchestrator.

    ``template_workers`` bounds how many templates are searched at once and
    ``window_workers`` how many origin chunks are scored at once. ``None``
    lets the executor pick from the CPU count.
    """

    tolerance: int = DEFAULT_TOLERANCE
    percentage: int = DEFAULT_PERCENTAGE
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    template_workers: Optional[int] = None
    window_workers: Optional[int] = None
    chunk_size: int = 256
    box_size: int = DEFAULT_BOX_SIZE
    output_path: Path = DEFAULT_OUTPUT_PATH

    def __post_init__(self) -> None:
        validate_tolerance(self.tolerance)
        validate_percentage(self.percentage)
        if not self.extensions:
            raise ConfigurationError("extensions must contain at least one suffix")
        self.extensions = tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in self.extensions)
        for name in ("template_workers", "window_workers"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ConfigurationError(f"{name} must be >= 1")
        if self.chunk_size < 1:
            raise ConfigurationError("chunk_size must be >= 1")
        if self.box_size < 1:
            raise ConfigurationError("box_size must be >= 1")
        self.output_path = Path(self.output_path)

    @property
    def resolved_window_workers(self) -> int:
        return self.window_workers or min(32, (os.cpu_count() or 1) + 4)
