# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for checksum computation."""

import hashlib
from pathlib import Path

import pytest

from sfc.checksums import (
    canonical_algorithm,
    checksum,
    checksum_file,
    resolve_algorithms,
    to_hex_string,
)
from sfc.errors import ConfigurationError, ReadError


def test_chk_001_hex_string_is_lower_case_and_zero_padded() -> None:
    data = bytes(list(range(0x0E)) + [0x1E])

    assert to_hex_string(data) == "000102030405060708090a0b0c0d1e"


def test_chk_002_known_digests_of_empty_input() -> None:
    digests = checksum(b"", ["SHA1", "SHA256", "MD5"])

    assert digests == {
        "MD5": "d41d8cd98f00b204e9800998ecf8427e",
        "SHA1": "da39a3ee5e6b4b0d3255bfef95601890afd80709",
        "SHA256": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    }


def test_chk_003_algorithm_tokens_are_canonicalized() -> None:
    assert canonical_algorithm("sha-256") == "SHA256"
    assert canonical_algorithm("sha3_512") == "SHA3-512"
    assert canonical_algorithm("blake2b-256") == "BLAKE2B-256"
    assert resolve_algorithms(["SHA1", "sha1", "SHA-1"]) == frozenset({"SHA1"})


def test_chk_004_unknown_algorithm_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        checksum(b"data", ["CRC32"])


def test_chk_005_blake2b_uses_requested_digest_size() -> None:
    digests = checksum(b"abc", ["BLAKE2b-256", "BLAKE2b-512"])

    assert digests["BLAKE2B-256"] == hashlib.blake2b(b"abc", digest_size=32).hexdigest()
    assert len(digests["BLAKE2B-512"]) == 128


def test_chk_006_file_checksum_matches_byte_checksum(tmp_path: Path) -> None:
    target = tmp_path / "data.bin"
    target.write_bytes(b"\x00\x01binary\xff")

    assert checksum_file(target, ["SHA1", "SHA3-256"]) == checksum(
        b"\x00\x01binary\xff", ["SHA1", "SHA3-256"]
    )


def test_chk_007_missing_file_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        checksum_file(tmp_path / "missing.bin", ["SHA1"])
