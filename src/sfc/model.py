# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for collected manifest entries."""

from dataclasses import dataclass

from license_expr import LicenseExpression
from sfc.checksums import SHA1
from sfc.file_types import FileType


@dataclass(frozen=True)
class Checksum:
    """Represent one file digest.

    Attributes:
        algorithm: Canonical algorithm token, e.g. ``SHA256``.
        value: Lower-case hex digest.
    """

    algorithm: str
    value: str


@dataclass(frozen=True)
class Relationship:
    """Link a collected element to the package that owns it.

    Attributes:
        element_id: Id of the collected element.
        relationship_type: Caller-supplied label such as ``GENERATES``.
        related_element: Caller-supplied package reference.
    """

    element_id: str
    relationship_type: str
    related_element: str


@dataclass(frozen=True)
class SnippetRecord:
    """Represent a byte range of a file with its own license data.

    Attributes:
        spdx_id: Element id.
        name: Snippet name.
        file_name: Stable name of the owning file.
        byte_range: Start and end byte offsets.
        line_range: Start and end line numbers, when configured.
        comment: Snippet comment.
        concluded_license: Concluded license expression.
        license_info_in_snippet: Licenses found in the snippet.
        license_comment: License comment.
        copyright_text: Copyright text.
    """

    spdx_id: str
    name: str
    file_name: str
    byte_range: tuple[int, int]
    line_range: tuple[int, int] | None
    comment: str
    concluded_license: LicenseExpression
    license_info_in_snippet: frozenset[LicenseExpression]
    license_comment: str
    copyright_text: str


@dataclass(frozen=True)
class FileRecord:
    """Represent one collected file.

    Attributes:
        name: Stable ``./``-prefixed, forward-slash name.
        spdx_id: Element id.
        checksums: Digests sorted by algorithm.
        file_type: Coarse classification from the file extension.
        concluded_license: Concluded license expression.
        declared_license: First license found in the file, or the configured
            declared license.
        license_info_from_files: Every license expression found in the file.
        license_comment: License comment.
        copyright_text: Copyright text.
        comment: File comment.
        notice_text: Notice text.
        contributors: File contributors.
        relationships: Relationship to the owning package.
        snippet_ids: Ids of snippets carved from this file.
    """

    name: str
    spdx_id: str
    checksums: tuple[Checksum, ...]
    file_type: FileType
    concluded_license: LicenseExpression
    declared_license: LicenseExpression
    license_info_from_files: frozenset[LicenseExpression]
    license_comment: str
    copyright_text: str
    comment: str
    notice_text: str
    contributors: tuple[str, ...]
    relationships: tuple[Relationship, ...]
    snippet_ids: tuple[str, ...] = ()

    @property
    def sha1(self) -> str:
        """Return the SHA-1 digest used for the verification code."""
        for item in self.checksums:
            if item.algorithm == SHA1:
                return item.value
        raise LookupError(f"No SHA1 checksum recorded for {self.name}")


@dataclass(frozen=True)
class VerificationCode:
    """Represent a package verification code.

    Attributes:
        value: SHA-1 over the sorted file digests.
        excluded_names: Stable names omitted from the computation.
    """

    value: str
    excluded_names: tuple[str, ...]
