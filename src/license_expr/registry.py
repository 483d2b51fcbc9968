# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Document-scoped registry of listed and extracted licenses."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from license_expr.listed import LISTED_LICENSE_IDS, canonical_listed_id
from license_expr.model import (
    ConjunctiveSet,
    DisjunctiveSet,
    LicenseExpression,
    LICENSE_REF_PREFIX,
    SimpleLicenseRef,
    make_set,
)

logger = logging.getLogger(__name__)

_LICENSE_REF_PATTERN = re.compile(r"^LicenseRef-[A-Za-z0-9.\-]+$")


class InvalidLicenseIdError(ValueError):
    """Represent an extracted license id that is not ``LicenseRef-<idstring>``."""


class UnknownLicenseRefError(LookupError):
    """Represent a ``LicenseRef-`` reference with no registered license text."""


class IdSource(Protocol):
    """Provide element identifiers for newly registered licenses."""

    def generate_id(self, seed: str) -> str:
        """Return a new identifier derived from ``seed``."""


@dataclass(frozen=True)
class ExtractedLicenseInfo:
    """Represent a license that is not on the SPDX license list.

    Attributes:
        license_id: ``LicenseRef-`` identifier.
        extracted_text: Verbatim license text; empty for implicit registrations.
        name: Optional human-readable name.
        comment: Optional comment.
        cross_refs: URLs where the license text can be found.
        element_id: Document element identifier, when an id source is configured.
        implicit: Whether the entry was created from a reference in scanned text.
    """

    license_id: str
    extracted_text: str = ""
    name: str | None = None
    comment: str | None = None
    cross_refs: tuple[str, ...] = ()
    element_id: str | None = None
    implicit: bool = False


class LicenseRegistry:
    """Track extracted licenses and canonicalize license references."""

    def __init__(
        self,
        id_source: IdSource | None = None,
        listed_ids: frozenset[str] = LISTED_LICENSE_IDS,
        implicit_license_refs: bool = True,
    ) -> None:
        """Initialize an empty registry.

        Args:
            id_source: Optional generator for extracted license element ids.
            listed_ids: Identifiers treated as listed licenses.
            implicit_license_refs: Register unknown ``LicenseRef-`` references
                with empty text instead of raising ``UnknownLicenseRefError``.
        """
        self._id_source = id_source
        self._listed_ids = listed_ids
        self._implicit_license_refs = implicit_license_refs
        self._extracted: dict[str, ExtractedLicenseInfo] = {}

    def add_extracted_license(
        self,
        license_id: str,
        extracted_text: str,
        name: str | None = None,
        comment: str | None = None,
        cross_refs: tuple[str, ...] = (),
    ) -> ExtractedLicenseInfo:
        """Register a non-listed license.

        Args:
            license_id: ``LicenseRef-`` identifier.
            extracted_text: License text.
            name: Optional license name.
            comment: Optional comment.
            cross_refs: URLs for the license.

        Returns:
            The registered license info.

        Raises:
            InvalidLicenseIdError: If the id does not match ``LicenseRef-<idstring>``.
        """
        if not _LICENSE_REF_PATTERN.match(license_id):
            raise InvalidLicenseIdError(
                f"Extracted license id must match LicenseRef-<idstring>: {license_id!r}"
            )
        registered = self._find_extracted(license_id)
        if registered is not None:
            logger.warning(f"Replacing extracted license (license_id={registered})")
            del self._extracted[registered]
        info = ExtractedLicenseInfo(
            license_id=license_id,
            extracted_text=extracted_text,
            name=name,
            comment=comment,
            cross_refs=tuple(cross_refs),
            element_id=self._new_element_id(license_id),
        )
        self._extracted[license_id] = info
        return info

    def get(self, license_id: str) -> ExtractedLicenseInfo | None:
        """Return the registered extracted license, if any.

        The lookup ignores case.
        """
        registered = self._find_extracted(license_id)
        return None if registered is None else self._extracted[registered]

    def extracted_licenses(self) -> list[ExtractedLicenseInfo]:
        """Return every registered extracted license sorted by id."""
        return [self._extracted[key] for key in sorted(self._extracted)]

    def is_listed(self, license_id: str) -> bool:
        """Return whether the identifier is a known listed license."""
        return canonical_listed_id(license_id, self._listed_ids) is not None

    def resolve(self, expression: LicenseExpression) -> LicenseExpression:
        """Canonicalize an expression against the registry.

        Listed identifiers are rewritten to their canonical case. Unknown
        ``LicenseRef-`` references are registered with empty text, or
        rejected when implicit registration is disabled.

        Args:
            expression: Parsed expression.

        Returns:
            Expression with canonical identifiers.

        Raises:
            UnknownLicenseRefError: If a reference is unknown and implicit
                registration is disabled.
        """
        if isinstance(expression, SimpleLicenseRef):
            return self._resolve_ref(expression)
        if isinstance(expression, ConjunctiveSet):
            return make_set("AND", [self.resolve(m) for m in expression.members])
        if isinstance(expression, DisjunctiveSet):
            return make_set("OR", [self.resolve(m) for m in expression.members])
        return expression

    def _resolve_ref(self, ref: SimpleLicenseRef) -> SimpleLicenseRef:
        if ref.is_extracted:
            registered = self._find_extracted(ref.license_id)
            if registered is not None:
                return ref if registered == ref.license_id else SimpleLicenseRef(license_id=registered)
            if not self._implicit_license_refs:
                raise UnknownLicenseRefError(
                    f"No extracted license registered for {ref.license_id}"
                )
            license_id = LICENSE_REF_PREFIX + ref.license_id[len(LICENSE_REF_PREFIX) :]
            logger.info(f"Registering implicit extracted license (license_id={license_id})")
            self._extracted[license_id] = ExtractedLicenseInfo(
                license_id=license_id,
                element_id=self._new_element_id(license_id),
                implicit=True,
            )
            return ref if license_id == ref.license_id else SimpleLicenseRef(license_id=license_id)
        canonical = canonical_listed_id(ref.license_id, self._listed_ids)
        if canonical is None:
            logger.warning(f"License id is not on the bundled license list (license_id={ref.license_id})")
            return ref
        if canonical == ref.license_id:
            return ref
        return SimpleLicenseRef(license_id=canonical)

    def _find_extracted(self, license_id: str) -> str | None:
        if license_id in self._extracted:
            return license_id
        folded = license_id.lower()
        for registered in self._extracted:
            if registered.lower() == folded:
                return registered
        return None

    def _new_element_id(self, license_id: str) -> str | None:
        if self._id_source is None:
            return None
        return self._id_source.generate_id(license_id)
