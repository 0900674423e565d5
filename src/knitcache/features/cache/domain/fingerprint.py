"""
Summary: Digest a snippet's literal source text into its cache-validity key.
Why: Only source text participates; upstream changes and runtime values never invalidate an entry.
"""

from __future__ import annotations

import hashlib
from typing import Final

DEFAULT_ALGORITHM: Final[str] = "sha256"


def fingerprint(source: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the hex digest of ``source`` prefixed with the algorithm name.

    The prefix keeps digests from different algorithms from ever comparing
    equal, so switching algorithms behaves like editing every snippet.

    Raises:
        ValueError: When ``algorithm`` is unknown or has no fixed digest size.
    """

    hasher = hashlib.new(algorithm, source.encode("utf-8"))
    if hasher.digest_size == 0:
        raise ValueError(f"Fingerprint algorithm '{algorithm}' has no fixed digest size")
    digest = hasher.hexdigest()
    return f"{algorithm}:{digest}"


__all__ = ["DEFAULT_ALGORITHM", "fingerprint"]
