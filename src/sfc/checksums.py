# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Checksum computation over file content."""

import hashlib
import logging
from collections.abc import Iterable
from pathlib import Path

from sfc.errors import ConfigurationError, ReadError

logger = logging.getLogger(__name__)

SHA1 = "SHA1"

# Algorithm token -> hashlib constructor name.
CHECKSUM_ALGORITHMS: dict[str, str] = {
    "SHA1": "sha1",
    "SHA224": "sha224",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
    "SHA3-256": "sha3_256",
    "SHA3-384": "sha3_384",
    "SHA3-512": "sha3_512",
    "MD5": "md5",
    "BLAKE2B-256": "blake2b-256",
    "BLAKE2B-384": "blake2b-384",
    "BLAKE2B-512": "blake2b-512",
}

_ALIASES: dict[str, str] = {
    "SHA-1": "SHA1",
    "SHA-224": "SHA224",
    "SHA-256": "SHA256",
    "SHA-384": "SHA384",
    "SHA-512": "SHA512",
    "SHA3_256": "SHA3-256",
    "SHA3_384": "SHA3-384",
    "SHA3_512": "SHA3-512",
    "BLAKE2B_256": "BLAKE2B-256",
    "BLAKE2B_384": "BLAKE2B-384",
    "BLAKE2B_512": "BLAKE2B-512",
}


def canonical_algorithm(token: str) -> str:
    """Return the canonical algorithm token.

    Args:
        token: Algorithm name such as ``SHA256``, ``sha-256`` or ``SHA3_256``.

    Returns:
        Canonical token, e.g. ``SHA256``.

    Raises:
        ConfigurationError: If the algorithm is not supported.
    """
    upper = token.strip().upper()
    upper = _ALIASES.get(upper, upper)
    if upper not in CHECKSUM_ALGORITHMS:
        raise ConfigurationError(f"Unsupported checksum algorithm: {token}")
    return upper


def resolve_algorithms(tokens: Iterable[str]) -> frozenset[str]:
    """Canonicalize and validate a set of algorithm tokens."""
    return frozenset(canonical_algorithm(token) for token in tokens)


def to_hex_string(digest_bytes: bytes) -> str:
    """Render digest bytes as lower-case hex with no separators."""
    return digest_bytes.hex()


def checksum(data: bytes, algorithms: Iterable[str]) -> dict[str, str]:
    """Compute digests of a byte string.

    Args:
        data: Content to hash.
        algorithms: Algorithm tokens.

    Returns:
        Mapping of canonical algorithm token to lower-case hex digest.

    Raises:
        ConfigurationError: If an algorithm is not supported.
    """
    digests: dict[str, str] = {}
    for algorithm in sorted(resolve_algorithms(algorithms)):
        hasher = _new_hasher(CHECKSUM_ALGORITHMS[algorithm])
        hasher.update(data)
        digests[algorithm] = to_hex_string(hasher.digest())
    return digests


def read_file_bytes(path: Path) -> bytes:
    """Read a whole file.

    Raises:
        ReadError: If the file cannot be read.
    """
    try:
        return path.read_bytes()
    except OSError as exc:
        logger.warning(f"Failed reading file for checksum (path={path} error={exc})")
        raise ReadError(f"Unable to read {path}: {exc}") from exc


def checksum_file(path: Path, algorithms: Iterable[str]) -> dict[str, str]:
    """Compute digests of a file's content.

    Raises:
        ReadError: If the file cannot be read.
        ConfigurationError: If an algorithm is not supported.
    """
    return checksum(read_file_bytes(path), algorithms)


def _new_hasher(name: str) -> "hashlib._Hash":
    if name.startswith("blake2b-"):
        bits = int(name.split("-", 1)[1])
        return hashlib.blake2b(digest_size=bits // 8)
    return hashlib.new(name)
