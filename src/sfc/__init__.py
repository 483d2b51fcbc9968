# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for SPDX file collection."""

from sfc.checksums import checksum, checksum_file, resolve_algorithms, to_hex_string
from sfc.collector import CollectionResult, FileCollector, collect_config
from sfc.config import (
    CollectorConfig,
    ExtractedLicenseSpec,
    FileInfo,
    FileSet,
    PathFileInfo,
    SnippetSpec,
    load_collector_config,
)
from sfc.errors import CollectionError, ConfigurationError, PathError, ReadError
from sfc.ids import IdGenerator
from sfc.model import Checksum, FileRecord, Relationship, SnippetRecord, VerificationCode
from sfc.paths import normalize_path
from sfc.verification import compute_verification_code

__all__ = [
    "Checksum",
    "CollectionError",
    "CollectionResult",
    "CollectorConfig",
    "ConfigurationError",
    "ExtractedLicenseSpec",
    "FileCollector",
    "FileInfo",
    "FileRecord",
    "FileSet",
    "IdGenerator",
    "PathError",
    "PathFileInfo",
    "ReadError",
    "Relationship",
    "SnippetRecord",
    "SnippetSpec",
    "VerificationCode",
    "checksum",
    "checksum_file",
    "collect_config",
    "compute_verification_code",
    "load_collector_config",
    "normalize_path",
    "resolve_algorithms",
    "to_hex_string",
]
