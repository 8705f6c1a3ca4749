from pathlib import Path

import pytest

from tolmatch import ConfigurationError, MatchSettings, TolmatchError
from tolmatch.models import TemplateParams


def test_defaults() -> None:
    settings = MatchSettings()

    assert settings.tolerance == 30
    assert settings.percentage == 25
    assert settings.extensions == (".png",)
    assert settings.box_size == 20
    assert settings.resolved_window_workers >= 1


def test_extensions_are_normalized() -> None:
    settings = MatchSettings(extensions=("PNG", ".Jpg"), output_path="out/result.png")

    assert settings.extensions == (".png", ".jpg")
    assert settings.output_path == Path("out/result.png")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tolerance": 256},
        {"tolerance": -1},
        {"percentage": 101},
        {"extensions": ()},
        {"window_workers": 0},
        {"chunk_size": 0},
        {"box_size": 0},
    ],
)
def test_invalid_settings_are_rejected(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        MatchSettings(**kwargs)


def test_template_params_validate_ranges() -> None:
    with pytest.raises(ConfigurationError):
        TemplateParams(label="x", tolerance=300)


def test_configuration_error_hierarchy() -> None:
    assert issubclass(ConfigurationError, TolmatchError)
    assert issubclass(ConfigurationError, ValueError)
