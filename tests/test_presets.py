import pytest

from pdfequiv.presets import CompareConfig, config_from_env, get_preset, iter_presets, parse_color


def test_default_config_values():
    config = CompareConfig()
    assert (config.raster_width, config.raster_height) == (1000, 1414)
    assert config.pixel_threshold == 0.1
    assert config.highlight_color == (255, 0, 0)
    assert config.validate() is config


def test_copy_overrides_without_mutating():
    base = CompareConfig()
    changed = base.copy(pixel_threshold=0.3)
    assert changed.pixel_threshold == 0.3
    assert base.pixel_threshold == 0.1


@pytest.mark.parametrize(
    "overrides",
    [
        {"raster_width": 0},
        {"raster_height": -5},
        {"pixel_threshold": 1.1},
        {"pixel_threshold": -0.01},
        {"highlight_color": (256, 0, 0)},
    ],
)
def test_validate_rejects_bad_values(overrides):
    with pytest.raises(ValueError):
        CompareConfig().copy(**overrides).validate()


def test_presets():
    assert get_preset("strict").config.pixel_threshold == 0.0
    assert get_preset(" Default ").config == CompareConfig()
    assert {p.name for p in iter_presets()} == {"default", "strict", "tolerant"}
    with pytest.raises(KeyError, match="Known presets"):
        get_preset("fuzzy")


def test_parse_color():
    assert parse_color("0, 128,255") == (0, 128, 255)
    for bad in ("1,2", "a,b,c", "0,0,300"):
        with pytest.raises(ValueError):
            parse_color(bad)


def test_config_from_env_overrides():
    env = {
        "PDFEQUIV_RASTER_WIDTH": "800",
        "PDFEQUIV_RASTER_HEIGHT": "",
        "PDFEQUIV_PIXEL_THRESHOLD": "0.25",
        "PDFEQUIV_HIGHLIGHT_COLOR": "0,255,0",
    }
    config = config_from_env(environ=env)
    assert config.raster_width == 800
    assert config.raster_height == 1414
    assert config.pixel_threshold == 0.25
    assert config.highlight_color == (0, 255, 0)


def test_config_from_env_keeps_base_preset():
    config = config_from_env(get_preset("strict").config, environ={})
    assert config.pixel_threshold == 0.0


def test_config_from_env_invalid_value():
    with pytest.raises(ValueError, match="PDFEQUIV_RASTER_WIDTH"):
        config_from_env(environ={"PDFEQUIV_RASTER_WIDTH": "wide"})
