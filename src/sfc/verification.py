# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Package verification code calculation."""

import hashlib
import logging
from collections.abc import Iterable

from sfc.checksums import to_hex_string
from sfc.model import VerificationCode

logger = logging.getLogger(__name__)


def compute_verification_code(
    file_checksums: Iterable[tuple[str, str]], excluded_names: Iterable[str] = ()
) -> VerificationCode:
    """Compute the verification code for a set of files.

    The SHA-1 digests of every non-excluded file are sorted, concatenated and
    hashed with SHA-1. The result does not depend on input order.

    Args:
        file_checksums: ``(stable_name, sha1_hex)`` pairs.
        excluded_names: Stable names to leave out, typically the manifest file
            itself.

    Returns:
        The verification code and the names that were actually omitted.
    """
    excluded = set(excluded_names)
    omitted: set[str] = set()
    digests: list[str] = []
    for name, sha1_hex in file_checksums:
        if name in excluded:
            omitted.add(name)
            continue
        digests.append(sha1_hex.lower())
    digests.sort()
    hasher = hashlib.sha1()  # noqa: S324
    for digest in digests:
        hasher.update(digest.encode("utf-8"))
    value = to_hex_string(hasher.digest())
    logger.debug(
        f"Computed verification code (files={len(digests)} excluded={len(omitted)} value={value})"
    )
    return VerificationCode(value=value, excluded_names=tuple(sorted(omitted)))
