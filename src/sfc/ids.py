# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Reproducible element identifiers."""

import hashlib

ELEMENT_REF_PREFIX = "SPDXRef-"


class IdGenerator:
    """Generate reproducible identifiers for one collection run.

    The first id for a seed ends in ``0``; every further call with the same
    seed increments that seed's counter. The hashed seed is embedded in the
    id, so different seeds never share ids. Instances are not thread-safe.
    """

    def __init__(self, prefix: str = ELEMENT_REF_PREFIX) -> None:
        self._prefix = prefix
        self._counters: dict[str, int] = {}

    def generate_id(self, seed: str) -> str:
        """Return the next identifier for ``seed``."""
        counter = self._counters.get(seed, -1) + 1
        self._counters[seed] = counter
        digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()  # noqa: S324
        return f"{self._prefix}{digest}-{counter}"

    def reset(self) -> None:
        """Forget every seed counter."""
        self._counters.clear()
