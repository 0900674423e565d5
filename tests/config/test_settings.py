"""Tests for settings module behavior."""

from __future__ import annotations

import importlib
from pathlib import Path


def test_settings_default_to_config_values(config_runtime_env: Path) -> None:
    """Default configuration yields the documented runtime settings."""
    _ = config_runtime_env

    import knitcache.config.config as config_module
    import knitcache.config.settings as settings

    config_module.config = config_module.Config.load()
    reloaded = importlib.reload(settings)

    assert reloaded.FINGERPRINT_ALGORITHM == "sha256"
    assert reloaded.FIG_WIDTH == 7.0
    assert reloaded.FIG_HEIGHT == 7.0
    assert reloaded.OUTPUT_SUFFIX == ".md"
    assert reloaded.DEFAULT_ENGINE == "python"


def test_invalid_values_fall_back_to_defaults(config_runtime_env: Path) -> None:
    """Unusable configuration values are replaced by defaults."""
    _ = config_runtime_env

    import knitcache.config.config as config_module
    import knitcache.config.settings as settings

    config_module.config = config_module.Config(
        fingerprint_algorithm="not-a-hash",
        fig_width=-2,
        fig_height=4,
        output_suffix="md",
    )
    reloaded = importlib.reload(settings)

    assert reloaded.FINGERPRINT_ALGORITHM == "sha256"
    assert reloaded.FIG_WIDTH == 7.0
    assert reloaded.FIG_HEIGHT == 4.0
    assert reloaded.OUTPUT_SUFFIX == ".md"


def test_algorithm_name_is_normalised(config_runtime_env: Path) -> None:
    _ = config_runtime_env

    import knitcache.config.config as config_module
    import knitcache.config.settings as settings

    config_module.config = config_module.Config(fingerprint_algorithm="SHA1")
    reloaded = importlib.reload(settings)

    assert reloaded.FINGERPRINT_ALGORITHM == "sha1"


def test_variable_length_digests_fall_back_to_default(config_runtime_env: Path) -> None:
    """shake_* digests need an explicit length, so they cannot key the cache."""
    _ = config_runtime_env

    import knitcache.config.config as config_module
    import knitcache.config.settings as settings

    config_module.config = config_module.Config(fingerprint_algorithm="shake_128")
    reloaded = importlib.reload(settings)

    assert reloaded.FINGERPRINT_ALGORITHM == "sha256"
