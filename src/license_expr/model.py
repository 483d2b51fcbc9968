# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""License expression tree types."""

from dataclasses import dataclass
from typing import Literal, Union

LICENSE_REF_PREFIX = "LicenseRef-"

SpecialKind = Literal["NOASSERTION", "NONE"]


@dataclass(frozen=True)
class SimpleLicenseRef:
    """Represent a single license identifier.

    Attributes:
        license_id: Listed license identifier or ``LicenseRef-`` identifier.
    """

    license_id: str

    @property
    def is_extracted(self) -> bool:
        """Return whether this references an extracted (non-listed) license."""
        return self.license_id.lower().startswith(LICENSE_REF_PREFIX.lower())

    def __str__(self) -> str:
        return self.license_id


@dataclass(frozen=True)
class SpecialLicense:
    """Represent the ``NOASSERTION`` and ``NONE`` sentinels."""

    kind: SpecialKind

    def __str__(self) -> str:
        return self.kind


@dataclass(frozen=True)
class ConjunctiveSet:
    """Represent licenses that all apply (``AND``).

    Attributes:
        members: Two or more member expressions; order is irrelevant.
    """

    members: frozenset["LicenseExpression"]

    def __post_init__(self) -> None:
        if len(self.members) < 2:
            raise ValueError("ConjunctiveSet requires at least two members")

    def __str__(self) -> str:
        return _render_set(self.members, "AND")


@dataclass(frozen=True)
class DisjunctiveSet:
    """Represent a choice between licenses (``OR``).

    Attributes:
        members: Two or more member expressions; order is irrelevant.
    """

    members: frozenset["LicenseExpression"]

    def __post_init__(self) -> None:
        if len(self.members) < 2:
            raise ValueError("DisjunctiveSet requires at least two members")

    def __str__(self) -> str:
        return _render_set(self.members, "OR")


LicenseExpression = Union[SimpleLicenseRef, ConjunctiveSet, DisjunctiveSet, SpecialLicense]

NO_ASSERTION = SpecialLicense(kind="NOASSERTION")
NONE_LICENSE = SpecialLicense(kind="NONE")


def make_set(
    operator: Literal["AND", "OR"], children: list[LicenseExpression]
) -> LicenseExpression:
    """Build a license set, flattening same-operator children.

    Args:
        operator: ``AND`` or ``OR``.
        children: Parsed member expressions.

    Returns:
        A set expression, or the single remaining member when duplicates
        collapse to one.
    """
    set_type = ConjunctiveSet if operator == "AND" else DisjunctiveSet
    members: set[LicenseExpression] = set()
    for child in children:
        if isinstance(child, set_type):
            members.update(child.members)
        else:
            members.add(child)
    if len(members) == 1:
        return next(iter(members))
    return set_type(members=frozenset(members))


def iter_license_refs(expression: LicenseExpression) -> list[SimpleLicenseRef]:
    """Return every simple license reference in an expression tree."""
    if isinstance(expression, SimpleLicenseRef):
        return [expression]
    if isinstance(expression, (ConjunctiveSet, DisjunctiveSet)):
        refs: list[SimpleLicenseRef] = []
        for member in sorted(expression.members, key=str):
            refs.extend(iter_license_refs(member))
        return refs
    return []


def _render_set(members: frozenset[LicenseExpression], operator: str) -> str:
    return "(" + f" {operator} ".join(sorted(str(member) for member in members)) + ")"
