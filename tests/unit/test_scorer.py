import numpy as np
import pytest

from tolmatch.matching.scorer import evaluate_window, mismatch_budget

BACKGROUND = (10, 10, 10, 255)
BLOCK = (200, 200, 200, 255)


def solid(height: int, width: int, color=BACKGROUND) -> np.ndarray:
    return np.full((height, width, 4), color, dtype=np.uint8)


def test_mismatch_budget_floors() -> None:
    assert mismatch_budget(100, 25) == 25
    assert mismatch_budget(7, 50) == 3
    assert mismatch_budget(100, 0) == 0
    assert mismatch_budget(100, 100) == 100


def test_single_bad_pixel_against_budget() -> None:
    source = solid(10, 10, BLOCK)
    template = source.copy()
    template[4, 4] = (0, 0, 0, 255)

    assert not evaluate_window(source, template, (0, 0), 0, mismatch_budget(100, 0))
    assert evaluate_window(source, template, (0, 0), 0, mismatch_budget(100, 1))
    assert evaluate_window(source, template, (0, 0), 255, 0)


def test_full_budget_passes_any_window() -> None:
    source = solid(8, 8)
    template = solid(4, 4, BLOCK)

    assert evaluate_window(source, template, (2, 3), 0, mismatch_budget(16, 100))


def test_window_must_fit_inside_source() -> None:
    with pytest.raises(ValueError):
        evaluate_window(solid(5, 5), solid(3, 3), (3, 0), 0, 0)


def test_exact_only_when_every_pixel_matches() -> None:
    rng = np.random.default_rng(11)
    source = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
    template = source[2:6, 5:9].copy()

    for y in range(9):
        for x in range(9):
            window = source[y : y + 4, x : x + 4]
            expected = bool(np.array_equal(window, template))
            assert evaluate_window(source, template, (x, y), 0, 0) == expected
