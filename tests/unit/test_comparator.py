import numpy as np
import pytest

from tolmatch.matching.comparator import mismatch_mask, pixels_match


def test_pixels_match_within_tolerance() -> None:
    assert pixels_match((10, 20, 30, 255), (40, 50, 0, 225), 30)
    assert not pixels_match((10, 20, 30, 255), (41, 20, 30, 255), 30)


def test_pixels_match_does_not_wrap_unsigned_channels() -> None:
    assert not pixels_match(np.array([0, 0, 0, 0], dtype=np.uint8), np.array([255, 0, 0, 0], dtype=np.uint8), 10)
    assert pixels_match(np.array([255, 255, 255, 255], dtype=np.uint8), np.array([255, 255, 255, 255], dtype=np.uint8), 0)


def test_pixels_match_is_symmetric() -> None:
    rng = np.random.default_rng(7)
    for _ in range(500):
        a = rng.integers(0, 256, size=4, dtype=np.uint8)
        b = rng.integers(0, 256, size=4, dtype=np.uint8)
        tolerance = int(rng.integers(0, 256))
        assert pixels_match(a, b, tolerance) == pixels_match(b, a, tolerance)


def test_pixels_match_rejects_wrong_channel_count() -> None:
    with pytest.raises(ValueError):
        pixels_match((1, 2, 3), (1, 2, 3), 0)


def test_mismatch_mask_agrees_with_scalar_comparison() -> None:
    rng = np.random.default_rng(3)
    a = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)
    b = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)

    mask = mismatch_mask(a, b, 100)

    assert mask.shape == (6, 5)
    for y in range(6):
        for x in range(5):
            assert mask[y, x] == (not pixels_match(a[y, x], b[y, x], 100))


def test_mismatch_mask_requires_same_shape() -> None:
    with pytest.raises(ValueError):
        mismatch_mask(np.zeros((2, 2, 4), np.uint8), np.zeros((2, 3, 4), np.uint8), 0)
