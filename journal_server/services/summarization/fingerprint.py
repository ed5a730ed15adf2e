"""Content fingerprints used to detect when cached summaries go stale."""

from __future__ import annotations

import hashlib

FINGERPRINT_BYTES = 8


def fingerprint(text: str) -> str:
    """Return a fixed-size hex digest of ``text``.

    Change detection only: equal inputs always produce equal tokens, but the
    digest is not meant to resist deliberate collisions.
    """
    data = (text or "").encode("utf-8")
    return hashlib.blake2b(data, digest_size=FINGERPRINT_BYTES).hexdigest()


__all__ = ["FINGERPRINT_BYTES", "fingerprint"]
