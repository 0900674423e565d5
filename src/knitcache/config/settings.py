"""Where: src/knitcache/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to feature layers without file I/O.
Assumptions: - Config defaults remain compatible with current runtime expectations.
Trade-offs: - Invalid values fall back to defaults instead of failing the build.
"""

from __future__ import annotations

import hashlib

from knitcache.config.config import (
    FIG_HEIGHT_DEFAULT,
    FIG_WIDTH_DEFAULT,
    FINGERPRINT_ALGORITHM_DEFAULT,
    OUTPUT_SUFFIX_DEFAULT,
    config as app_config,
)

# Fingerprinting ---------------------------------------------------------------

_algorithm = str(getattr(app_config, "fingerprint_algorithm", FINGERPRINT_ALGORITHM_DEFAULT)).lower()
# Variable-length digests (shake_*) report a digest size of 0 and need an explicit length.
FINGERPRINT_ALGORITHM: str = (
    _algorithm
    if _algorithm in hashlib.algorithms_guaranteed and hashlib.new(_algorithm).digest_size > 0
    else FINGERPRINT_ALGORITHM_DEFAULT
)


# Figure hints -----------------------------------------------------------------


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


FIG_WIDTH: float = _positive_float(getattr(app_config, "fig_width", None), FIG_WIDTH_DEFAULT)
FIG_HEIGHT: float = _positive_float(getattr(app_config, "fig_height", None), FIG_HEIGHT_DEFAULT)


# Output -----------------------------------------------------------------------

_suffix = str(getattr(app_config, "output_suffix", OUTPUT_SUFFIX_DEFAULT) or "")
OUTPUT_SUFFIX: str = (
    _suffix if _suffix.startswith(".") and len(_suffix) > 1 else OUTPUT_SUFFIX_DEFAULT
)

# Engine name assumed for chunks whose header omits it.
DEFAULT_ENGINE: str = "python"


__all__ = [
    "DEFAULT_ENGINE",
    "FIG_HEIGHT",
    "FIG_WIDTH",
    "FINGERPRINT_ALGORITHM",
    "OUTPUT_SUFFIX",
]
