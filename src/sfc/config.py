# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Collector input descriptors and JSON configuration loading."""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from sfc.errors import ConfigurationError
from sfc.paths import to_relative_key

logger = logging.getLogger(__name__)

NOASSERTION = "NOASSERTION"
DEFAULT_RELATIONSHIP_TYPE = "GENERATES"
DEFAULT_PACKAGE_REF = "SPDXRef-Package"

_RANGE_PATTERN = re.compile(r"^\s*(\d+):(\d+)\s*$")


def parse_range(text: str, label: str) -> tuple[int, int]:
    """Parse a ``start:end`` range.

    Args:
        text: Range text such as ``12:5234``.
        label: Range name used in error messages.

    Returns:
        Start and end values.

    Raises:
        ConfigurationError: If the text is malformed, starts below 1 or ends
            before it starts.
    """
    match = _RANGE_PATTERN.match(text)
    if match is None:
        raise ConfigurationError(f"Invalid snippet {label} range: {text!r}")
    start, end = int(match.group(1)), int(match.group(2))
    if start < 1 or end < start:
        raise ConfigurationError(f"Invalid snippet {label} range bounds: {text!r}")
    return start, end


@dataclass(frozen=True)
class FileSet:
    """Describe one tree of files to collect.

    Attributes:
        root_directory: Directory the patterns are matched under.
        output_directory_prefix: Prefix for stable names; when ``None`` names
            are relative to the project root.
        include_patterns: Gitignore-style patterns selecting files.
        exclude_patterns: Gitignore-style patterns removing files.
    """

    root_directory: Path
    output_directory_prefix: str | None = None
    include_patterns: tuple[str, ...] = ("**",)
    exclude_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class SnippetSpec:
    """Describe a snippet to record for a source file."""

    name: str
    byte_range: str
    line_range: str | None = None
    comment: str = ""
    concluded_license: str = NOASSERTION
    license_info_in_snippet: str = NOASSERTION
    license_comment: str = ""
    copyright_text: str = NOASSERTION

    def __post_init__(self) -> None:
        parse_range(self.byte_range, "byte")
        if self.line_range is not None:
            parse_range(self.line_range, "line")

    @property
    def byte_offsets(self) -> tuple[int, int]:
        return parse_range(self.byte_range, "byte")

    @property
    def line_numbers(self) -> tuple[int, int] | None:
        if self.line_range is None:
            return None
        return parse_range(self.line_range, "line")


@dataclass(frozen=True)
class FileInfo:
    """Describe the metadata applied to collected files."""

    comment: str = ""
    copyright_text: str = NOASSERTION
    license_comment: str = ""
    notice_text: str = ""
    contributors: tuple[str, ...] = ()
    concluded_license: str = NOASSERTION
    declared_license: str = NOASSERTION
    snippets: tuple[SnippetSpec, ...] = ()


@dataclass(frozen=True)
class PathFileInfo:
    """Describe a partial metadata override for a file or directory.

    Fields left as ``None`` inherit from the default file information.
    """

    comment: str | None = None
    copyright_text: str | None = None
    license_comment: str | None = None
    notice_text: str | None = None
    contributors: tuple[str, ...] | None = None
    concluded_license: str | None = None
    declared_license: str | None = None
    snippets: tuple[SnippetSpec, ...] | None = None

    def apply_to(self, defaults: FileInfo) -> FileInfo:
        """Return ``defaults`` with this override's fields applied."""
        fields = {
            "comment": self.comment,
            "copyright_text": self.copyright_text,
            "license_comment": self.license_comment,
            "notice_text": self.notice_text,
            "contributors": self.contributors,
            "concluded_license": self.concluded_license,
            "declared_license": self.declared_license,
            "snippets": self.snippets,
        }
        changes = {name: value for name, value in fields.items() if value is not None}
        return replace(defaults, **changes)


def resolve_file_info(
    relative_path: str,
    overrides: Mapping[str, FileInfo | PathFileInfo],
    defaults: FileInfo,
) -> FileInfo:
    """Find the metadata for a file by nearest path match.

    An override for the exact file wins over the nearest enclosing directory
    override, which wins over the defaults.

    Args:
        relative_path: Project-root-relative file path.
        overrides: Overrides keyed by file or directory path.
        defaults: Default file information.

    Returns:
        Resolved file information.
    """
    normalized = {to_relative_key(key): value for key, value in overrides.items()}
    candidate = to_relative_key(relative_path)
    while candidate:
        override = normalized.get(candidate)
        if override is not None:
            logger.debug(f"Using path specific file information (path={relative_path} match={candidate})")
            if isinstance(override, PathFileInfo):
                return override.apply_to(defaults)
            return override
        if "/" not in candidate:
            break
        candidate = candidate.rsplit("/", 1)[0]
    return defaults


@dataclass(frozen=True)
class ExtractedLicenseSpec:
    """Describe a non-listed license supplied by configuration."""

    license_id: str
    extracted_text: str
    name: str | None = None
    comment: str | None = None
    cross_refs: tuple[str, ...] = ()


@dataclass(frozen=True)
class CollectorConfig:
    """Bundle every input of one collection run."""

    project_root: Path
    file_sets: tuple[FileSet, ...]
    default_file_info: FileInfo = field(default_factory=FileInfo)
    path_overrides: Mapping[str, FileInfo | PathFileInfo] = field(default_factory=dict)
    checksum_algorithms: tuple[str, ...] = ("SHA1",)
    package_ref: str = DEFAULT_PACKAGE_REF
    relationship_type: str = DEFAULT_RELATIONSHIP_TYPE
    extracted_licenses: tuple[ExtractedLicenseSpec, ...] = ()
    implicit_license_refs: bool = True
    manifest_name: str | None = None


def load_collector_config(config_path: Path, project_root: Path | None = None) -> CollectorConfig:
    """Load a collector configuration from a JSON file.

    Relative directories in the file are resolved against the directory that
    contains it.

    Args:
        config_path: JSON configuration file.
        project_root: Optional project root overriding the file's value.

    Returns:
        Parsed configuration.

    Raises:
        ConfigurationError: If the file cannot be read or has invalid content.
    """
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(f"Failed to read collector config (path={config_path} error={exc})")
        raise ConfigurationError(f"Unable to read config {config_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config {config_path} must contain a JSON object")

    base_dir = config_path.parent
    try:
        root = project_root or _resolve_dir(base_dir, payload.get("project_root", "."))
        file_sets_payload = payload.get("file_sets") or [{"root_directory": str(root)}]
        file_sets = tuple(_file_set_from_dict(base_dir, item) for item in file_sets_payload)
        overrides = {
            key: _path_file_info_from_dict(value)
            for key, value in (payload.get("path_overrides") or {}).items()
        }
        return CollectorConfig(
            project_root=root,
            file_sets=file_sets,
            default_file_info=_file_info_from_dict(payload.get("default_file_info") or {}),
            path_overrides=overrides,
            checksum_algorithms=tuple(payload.get("checksum_algorithms") or ("SHA1",)),
            package_ref=payload.get("package_ref", DEFAULT_PACKAGE_REF),
            relationship_type=payload.get("relationship_type", DEFAULT_RELATIONSHIP_TYPE),
            extracted_licenses=tuple(
                _extracted_license_from_dict(item)
                for item in payload.get("extracted_licenses") or []
            ),
            implicit_license_refs=bool(payload.get("implicit_license_refs", True)),
            manifest_name=payload.get("manifest_name"),
        )
    except (TypeError, KeyError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid config {config_path}: {exc}") from exc


def _resolve_dir(base_dir: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def _file_set_from_dict(base_dir: Path, item: dict[str, Any]) -> FileSet:
    return FileSet(
        root_directory=_resolve_dir(base_dir, item["root_directory"]),
        output_directory_prefix=item.get("output_directory_prefix"),
        include_patterns=tuple(item.get("include_patterns") or ("**",)),
        exclude_patterns=tuple(item.get("exclude_patterns") or ()),
    )


def _snippets_from_list(items: list[dict[str, Any]]) -> tuple[SnippetSpec, ...]:
    return tuple(SnippetSpec(**item) for item in items)


def _file_info_from_dict(item: dict[str, Any]) -> FileInfo:
    values = dict(item)
    if "contributors" in values:
        values["contributors"] = tuple(values["contributors"])
    if "snippets" in values:
        values["snippets"] = _snippets_from_list(values["snippets"])
    return FileInfo(**values)


def _path_file_info_from_dict(item: dict[str, Any]) -> PathFileInfo:
    values = dict(item)
    if values.get("contributors") is not None:
        values["contributors"] = tuple(values["contributors"])
    if values.get("snippets") is not None:
        values["snippets"] = _snippets_from_list(values["snippets"])
    return PathFileInfo(**values)


def _extracted_license_from_dict(item: dict[str, Any]) -> ExtractedLicenseSpec:
    values = dict(item)
    values["cross_refs"] = tuple(values.get("cross_refs") or ())
    return ExtractedLicenseSpec(**values)
