# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for license expression components."""

from license_expr.model import (
    NO_ASSERTION,
    NONE_LICENSE,
    ConjunctiveSet,
    DisjunctiveSet,
    LicenseExpression,
    SimpleLicenseRef,
    SpecialLicense,
)
from license_expr.parser import parse_expression
from license_expr.registry import (
    ExtractedLicenseInfo,
    InvalidLicenseIdError,
    LicenseRegistry,
    UnknownLicenseRefError,
)
from license_expr.scanner import extract_expressions
from license_expr.tokenizer import ParseError

__all__ = [
    "NO_ASSERTION",
    "NONE_LICENSE",
    "ConjunctiveSet",
    "DisjunctiveSet",
    "ExtractedLicenseInfo",
    "InvalidLicenseIdError",
    "LicenseExpression",
    "LicenseRegistry",
    "ParseError",
    "SimpleLicenseRef",
    "SpecialLicense",
    "UnknownLicenseRefError",
    "extract_expressions",
    "parse_expression",
]
