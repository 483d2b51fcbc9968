# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Collect file records, checksums and embedded licenses from file sets."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import pathspec

from license_expr import (
    InvalidLicenseIdError,
    LicenseExpression,
    LicenseRegistry,
    ParseError,
    UnknownLicenseRefError,
    extract_expressions,
    parse_expression,
)
from sfc.checksums import SHA1, checksum, read_file_bytes, resolve_algorithms
from sfc.config import (
    CollectorConfig,
    FileInfo,
    FileSet,
    PathFileInfo,
    SnippetSpec,
    resolve_file_info,
)
from sfc.errors import CollectionError, ConfigurationError, PathError, ReadError
from sfc.file_types import classify
from sfc.ids import IdGenerator
from sfc.model import Checksum, FileRecord, Relationship, SnippetRecord, VerificationCode
from sfc.paths import file_extension, normalize_path, to_spdx_file_name
from sfc.verification import compute_verification_code

logger = logging.getLogger(__name__)

CollectorState = Literal["idle", "collecting", "done", "failed"]

# Files larger than this are checksummed but not scanned for license tags.
MAXIMUM_PARSE_BYTES = 300_000

LICENSE_ID_COMMENT = "This file contains SPDX-License-Identifiers for "


@dataclass(frozen=True)
class CollectionResult:
    """Represent the outcome of one collection run.

    Attributes:
        files: Collected files sorted by stable name.
        snippets: Snippets in collection order.
        license_info_from_files: Every license found across all files.
        project_root: Resolved project root that stable names are relative to.
    """

    files: tuple[FileRecord, ...]
    snippets: tuple[SnippetRecord, ...]
    license_info_from_files: frozenset[LicenseExpression]
    project_root: str | None = None

    def file_checksums(self) -> list[tuple[str, str]]:
        """Return ``(stable_name, sha1)`` pairs for every collected file."""
        return [(record.name, record.sha1) for record in self.files]

    def verification_code(self, manifest_name: str | None = None) -> VerificationCode:
        """Compute the package verification code.

        Args:
            manifest_name: Path of the manifest being written, either relative
                to the project root or absolute; excluded when it was collected.

        Returns:
            The package verification code.
        """
        excluded: list[str] = []
        if manifest_name is not None:
            name = self._manifest_file_name(manifest_name)
            if name is not None:
                excluded.append(name)
        return compute_verification_code(self.file_checksums(), excluded)

    def _manifest_file_name(self, manifest_name: str) -> str | None:
        manifest_path = Path(manifest_name)
        if not manifest_path.is_absolute():
            return to_spdx_file_name(manifest_name)
        if self.project_root is None:
            logger.warning(f"Cannot relate absolute manifest path without a project root (path={manifest_name})")
            return None
        try:
            return normalize_path(str(manifest_path.resolve()), self.project_root)
        except PathError:
            logger.debug(f"Manifest is outside the project root (path={manifest_name})")
            return None


@dataclass(frozen=True)
class _Candidate:
    path: Path
    name: str
    relative_path: str


class FileCollector:
    """Collect SPDX file information for the files in a set of file trees.

    A collector performs one run. Create a new collector, with a fresh id
    generator, to retry after a failure.
    """

    def __init__(
        self,
        id_generator: IdGenerator | None = None,
        license_registry: LicenseRegistry | None = None,
        max_parse_bytes: int = MAXIMUM_PARSE_BYTES,
    ) -> None:
        """Initialize collector state.

        Args:
            id_generator: Id generator shared with the caller's document model.
            license_registry: Registry used to canonicalize found licenses.
            max_parse_bytes: Size limit for license tag scanning.

        Raises:
            ValueError: If ``max_parse_bytes`` is negative.
        """
        if max_parse_bytes < 0:
            raise ValueError("max_parse_bytes must be >= 0")
        self.id_generator = id_generator or IdGenerator()
        self.license_registry = license_registry or LicenseRegistry(id_source=self.id_generator)
        self._max_parse_bytes = max_parse_bytes
        self._state: CollectorState = "idle"
        self._parsed_licenses: dict[str, LicenseExpression] = {}

    @property
    def state(self) -> CollectorState:
        return self._state

    def collect(
        self,
        file_sets: Iterable[FileSet],
        project_root: Path,
        default_file_info: FileInfo,
        path_overrides: Mapping[str, FileInfo | PathFileInfo],
        owning_package_ref: str,
        relationship_type: str,
        checksum_algorithms: Iterable[str],
    ) -> CollectionResult:
        """Collect every file matched by the file sets.

        Args:
            file_sets: File trees and their include/exclude patterns.
            project_root: Root that override keys and default names are
                relative to.
            default_file_info: Metadata for files without an override.
            path_overrides: Overrides keyed by file or directory path.
            owning_package_ref: Package every file is related to.
            relationship_type: Label of the file-to-package relationship.
            checksum_algorithms: Algorithm tokens; SHA1 is always added.

        Returns:
            Collected files, snippets and the aggregated license set.

        Raises:
            ConfigurationError: If inputs are invalid or two files map to the
                same stable name.
            CollectionError: If reading, scanning or snippet creation fails
                for a file.
            RuntimeError: If this collector has already run.
        """
        if self._state != "idle":
            raise RuntimeError(f"FileCollector already used (state={self._state})")
        self._state = "collecting"
        try:
            result = self._collect(
                file_sets=list(file_sets),
                project_root=project_root,
                default_file_info=default_file_info,
                path_overrides=path_overrides,
                owning_package_ref=owning_package_ref,
                relationship_type=relationship_type,
                algorithms=resolve_algorithms(checksum_algorithms) | {SHA1},
            )
        except Exception:
            self._state = "failed"
            raise
        self._state = "done"
        return result

    def _collect(
        self,
        file_sets: list[FileSet],
        project_root: Path,
        default_file_info: FileInfo,
        path_overrides: Mapping[str, FileInfo | PathFileInfo],
        owning_package_ref: str,
        relationship_type: str,
        algorithms: frozenset[str],
    ) -> CollectionResult:
        files: dict[str, FileRecord] = {}
        snippets: list[SnippetRecord] = []
        licenses_from_files: set[LicenseExpression] = set()

        try:
            self._configured_license(default_file_info.declared_license)
            self._configured_license(default_file_info.concluded_license)
        except UnknownLicenseRefError as exc:
            raise ConfigurationError(f"Invalid default license: {exc}") from exc
        for file_set in file_sets:
            for candidate in self._iter_candidates(file_set, project_root):
                if candidate.name in files:
                    raise ConfigurationError(
                        f"Duplicate collection target {candidate.name} ({candidate.path})"
                    )
                file_info = resolve_file_info(
                    candidate.relative_path, path_overrides, default_file_info
                )
                record, file_snippets = self._collect_file(
                    candidate=candidate,
                    file_info=file_info,
                    algorithms=algorithms,
                    owning_package_ref=owning_package_ref,
                    relationship_type=relationship_type,
                )
                files[record.name] = record
                snippets.extend(file_snippets)
                licenses_from_files.update(record.license_info_from_files)

        logger.info(
            f"File collection completed (files={len(files)} snippets={len(snippets)} "
            f"licenses={len(licenses_from_files)})"
        )
        return CollectionResult(
            files=tuple(files[name] for name in sorted(files)),
            snippets=tuple(snippets),
            license_info_from_files=frozenset(licenses_from_files),
            project_root=str(project_root.resolve()),
        )

    def _iter_candidates(self, file_set: FileSet, project_root: Path) -> Iterator[_Candidate]:
        root = file_set.root_directory.resolve()
        if not root.is_dir():
            raise ConfigurationError(f"File set directory does not exist: {root}")
        include = pathspec.GitIgnoreSpec.from_lines(file_set.include_patterns)
        exclude = pathspec.GitIgnoreSpec.from_lines(file_set.exclude_patterns)
        project_root_text = str(project_root.resolve())
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            included_path = path.relative_to(root).as_posix()
            if not include.match_file(included_path) or exclude.match_file(included_path):
                logger.debug(f"Skipping file not selected by patterns (path={included_path})")
                continue
            try:
                project_name = normalize_path(str(path), project_root_text)
            except PathError as exc:
                raise ConfigurationError(
                    f"File set {root} is not under project root {project_root}"
                ) from exc
            if file_set.output_directory_prefix:
                prefix = file_set.output_directory_prefix.replace("\\", "/").rstrip("/")
                name = to_spdx_file_name(f"{prefix}/{included_path}")
            else:
                name = project_name
            yield _Candidate(path=path, name=name, relative_path=project_name[2:])

    def _collect_file(
        self,
        candidate: _Candidate,
        file_info: FileInfo,
        algorithms: frozenset[str],
        owning_package_ref: str,
        relationship_type: str,
    ) -> tuple[FileRecord, list[SnippetRecord]]:
        name = candidate.name
        logger.debug(f"Collecting file (name={name})")
        try:
            data = read_file_bytes(candidate.path)
        except ReadError as exc:
            raise CollectionError(name, "read", str(exc)) from exc
        digests = checksum(data, algorithms)

        found: list[LicenseExpression] = []
        if len(data) <= self._max_parse_bytes:
            try:
                found = extract_expressions(data.decode("utf-8", errors="replace"))
            except ParseError as exc:
                raise CollectionError(name, "parse", str(exc)) from exc
        else:
            logger.warning(f"File too large to scan for license identifiers (name={name} size={len(data)})")

        try:
            found = [self.license_registry.resolve(expression) for expression in found]
            default_declared = self._configured_license(file_info.declared_license)
            default_concluded = self._configured_license(file_info.concluded_license)
        except UnknownLicenseRefError as exc:
            raise CollectionError(name, "license", str(exc)) from exc

        license_comment = file_info.license_comment
        if found:
            declared = found[0]
            concluded = found[1] if len(found) == 2 else found[0]
            license_info_from_files = frozenset(found)
            if license_comment:
                license_comment += ";  "
            license_comment += LICENSE_ID_COMMENT + ", ".join(str(item) for item in found)
        else:
            declared = default_declared
            concluded = default_concluded
            license_info_from_files = frozenset({default_declared})

        spdx_id = self.id_generator.generate_id(name)
        file_type = classify(file_extension(candidate.path.name))
        snippets: list[SnippetRecord] = []
        if file_type == "SOURCE":
            for spec in file_info.snippets:
                snippets.append(self._build_snippet(spec, name))
        elif file_info.snippets:
            logger.debug(f"Skipping snippets for non-source file (name={name} type={file_type})")

        record = FileRecord(
            name=name,
            spdx_id=spdx_id,
            checksums=tuple(
                Checksum(algorithm=algorithm, value=value)
                for algorithm, value in sorted(digests.items())
            ),
            file_type=file_type,
            concluded_license=concluded,
            declared_license=declared,
            license_info_from_files=license_info_from_files,
            license_comment=license_comment,
            copyright_text=file_info.copyright_text,
            comment=file_info.comment,
            notice_text=file_info.notice_text,
            contributors=tuple(file_info.contributors),
            relationships=(
                Relationship(
                    element_id=spdx_id,
                    relationship_type=relationship_type,
                    related_element=owning_package_ref,
                ),
            ),
            snippet_ids=tuple(snippet.spdx_id for snippet in snippets),
        )
        return record, snippets

    def _build_snippet(self, spec: SnippetSpec, file_name: str) -> SnippetRecord:
        try:
            concluded = self._configured_license(spec.concluded_license)
            in_snippet = self._configured_license(spec.license_info_in_snippet)
        except (ConfigurationError, UnknownLicenseRefError) as exc:
            raise CollectionError(file_name, "snippet", str(exc)) from exc
        return SnippetRecord(
            spdx_id=self.id_generator.generate_id(f"{file_name}#{spec.name}"),
            name=spec.name,
            file_name=file_name,
            byte_range=spec.byte_offsets,
            line_range=spec.line_numbers,
            comment=spec.comment,
            concluded_license=concluded,
            license_info_in_snippet=frozenset({in_snippet}),
            license_comment=spec.license_comment,
            copyright_text=spec.copyright_text,
        )

    def _configured_license(self, text: str) -> LicenseExpression:
        """Parse a license expression supplied by configuration.

        Raises:
            ConfigurationError: If the expression is malformed.
            UnknownLicenseRefError: If it references an unregistered license
                and implicit registration is disabled.
        """
        cached = self._parsed_licenses.get(text)
        if cached is not None:
            return cached
        try:
            expression = parse_expression(text)
        except ParseError as exc:
            raise ConfigurationError(f"Invalid configured license expression {text!r}: {exc}") from exc
        resolved = self.license_registry.resolve(expression)
        self._parsed_licenses[text] = resolved
        return resolved


def collect_config(
    config: CollectorConfig, id_generator: IdGenerator | None = None
) -> tuple[CollectionResult, LicenseRegistry]:
    """Run one collection described by a loaded configuration.

    Args:
        config: Collector configuration.
        id_generator: Optional id generator shared with the caller.

    Returns:
        The collection result and the registry holding extracted licenses.

    Raises:
        ConfigurationError: If an extracted license id is invalid or the
            configuration is otherwise unusable.
        CollectionError: If a file cannot be collected.
    """
    generator = id_generator or IdGenerator()
    registry = LicenseRegistry(
        id_source=generator, implicit_license_refs=config.implicit_license_refs
    )
    for spec in config.extracted_licenses:
        try:
            registry.add_extracted_license(
                license_id=spec.license_id,
                extracted_text=spec.extracted_text,
                name=spec.name,
                comment=spec.comment,
                cross_refs=spec.cross_refs,
            )
        except InvalidLicenseIdError as exc:
            raise ConfigurationError(str(exc)) from exc
    collector = FileCollector(id_generator=generator, license_registry=registry)
    result = collector.collect(
        file_sets=config.file_sets,
        project_root=config.project_root,
        default_file_info=config.default_file_info,
        path_overrides=config.path_overrides,
        owning_package_ref=config.package_ref,
        relationship_type=config.relationship_type,
        checksum_algorithms=config.checksum_algorithms,
    )
    return result, registry
