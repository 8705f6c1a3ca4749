from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from tolmatch import MatchOutputSet, MatchResult
from tolmatch.io import draw_matches


def write_source(path: Path) -> Path:
    image = np.full((100, 100, 3), 120, dtype=np.uint8)
    cv2.imwrite(str(path), image)
    return path


def test_draw_matches_outlines_each_origin(tmp_path: Path) -> None:
    source_path = write_source(tmp_path / "screen.png")
    output = MatchOutputSet(results=[MatchResult("a", [(40, 40)]), MatchResult("b", [])])

    written = draw_matches(output, source_path, tmp_path / "result.png")

    assert written == tmp_path / "result.png"
    annotated = cv2.imread(str(written))
    assert tuple(annotated[40, 40]) == (0, 0, 0)
    assert tuple(annotated[40, 59]) == (0, 0, 0)
    assert tuple(annotated[59, 40]) == (0, 0, 0)
    assert tuple(annotated[50, 50]) == (120, 120, 120)
    assert tuple(annotated[60, 60]) == (120, 120, 120)


def test_draw_matches_without_matches_writes_nothing(tmp_path: Path) -> None:
    source_path = write_source(tmp_path / "screen.png")
    output = MatchOutputSet(results=[MatchResult("a"), MatchResult("b")])

    assert draw_matches(output, source_path, tmp_path / "result.png") is None
    assert not (tmp_path / "result.png").exists()
