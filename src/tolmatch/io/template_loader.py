from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from ..config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_PERCENTAGE,
    DEFAULT_TOLERANCE,
    MAX_PERCENTAGE,
    MAX_TOLERANCE,
)
from ..exceptions import ConfigurationError, ImageDecodeError
from ..models import Template, TemplateFailure, TemplateParams
from .image_loader import PathLike, load_rgba

logger = logging.getLogger(__name__)


def _parse_bounded(raw: str, default: int, upper: int, field: str, stem: str, warnings: List[str]) -> int:
    try:
        value = int(raw)
    except ValueError:
        warnings.append(f"{stem}: {field} {raw!r} is not an integer, using {default}")
        return default
    if not 0 <= value <= upper:
        warnings.append(f"{stem}: {field} {value} outside 0..{upper}, using {default}")
        return default
    return value


def parse_template_name(
    stem: str,
    tolerance: int = DEFAULT_TOLERANCE,
    percentage: int = DEFAULT_PERCENTAGE,
) -> TemplateParams:
    """
    Derive matching parameters from a ``<label>_<tolerance>_<percentage>`` name.

    Names with fewer than three ``_``-separated parts keep the defaults.
    Unparseable numbers fall back to the defaults and are reported through
    ``TemplateParams.warnings`` and the module logger.
    """
    parts = stem.split("_")
    if len(parts) < 3:
        return TemplateParams(label=stem, tolerance=tolerance, percentage=percentage)

    warnings: List[str] = []
    parsed_tolerance = _parse_bounded(parts[1], tolerance, MAX_TOLERANCE, "tolerance", stem, warnings)
    parsed_percentage = _parse_bounded(parts[2], percentage, MAX_PERCENTAGE, "percentage", stem, warnings)
    for message in warnings:
        logger.warning(message)

    return TemplateParams(
        label=parts[0],
        tolerance=parsed_tolerance,
        percentage=parsed_percentage,
        warnings=tuple(warnings),
    )


def list_template_files(directory: PathLike, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> List[Path]:
    root = Path(directory)
    if not root.is_dir():
        raise ConfigurationError(f"Template directory not found: {root}")
    suffixes = {ext.lower() for ext in extensions}
    return sorted(path for path in root.iterdir() if path.is_file() and path.suffix.lower() in suffixes)


def load_templates(
    directory: PathLike,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    tolerance: int = DEFAULT_TOLERANCE,
    percentage: int = DEFAULT_PERCENTAGE,
) -> Tuple[List[Template], List[TemplateFailure]]:
    """
    Load every template image under ``directory`` in file-name order.

    Files that fail to decode are returned as failures instead of aborting
    the whole load.
    """
    templates: List[Template] = []
    failures: List[TemplateFailure] = []

    for path in list_template_files(directory, extensions):
        try:
            image = load_rgba(path)
        except ImageDecodeError as exc:
            logger.warning("Skipping template %s: %s", path, exc.reason)
            failures.append(TemplateFailure(name=path.stem, error=exc, path=path))
            continue

        params = parse_template_name(path.stem, tolerance, percentage)
        templates.append(
            Template(
                name=path.stem,
                image=image,
                tolerance=params.tolerance,
                percentage=params.percentage,
                path=path,
                label=params.label,
                warnings=params.warnings,
            )
        )
        logger.debug(
            "loaded template %s %dx%d tolerance=%d percentage=%d",
            path.stem,
            image.shape[1],
            image.shape[0],
            params.tolerance,
            params.percentage,
        )

    return templates, failures
