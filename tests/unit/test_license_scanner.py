# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for SPDX-License-Identifier tag scanning."""

from pathlib import Path

import pytest

from license_expr import (
    ConjunctiveSet,
    DisjunctiveSet,
    ParseError,
    SimpleLicenseRef,
    extract_expressions,
)

APACHE = SimpleLicenseRef("Apache-2.0")
MIT = SimpleLicenseRef("MIT")
MINE = SimpleLicenseRef("LicenseRef-mine")

SIMPLE = "SPDX-License-Identifier:Apache-2.0"
CONJUNCTIVE = "  SPDX-License-Identifier:   Apache-2.0 AND MIT AND LicenseRef-mine"
COMPLEX = "SPDX-License-Identifier:((MIT OR Apache-2.0) OR Apache-2.0)"
COMPLEX_MULTI = "  SPDX-License-Identifier: ((MIT OR \nApache-2.0) OR \nApache-2.0)"
MULTIPLE_SIMPLE_IDS = (
    "Now is the time\nSPDX-License-Identifier:Apache-2.0\nFor all good men"
    "  SPDX-License-Identifier:   MIT\nto come to the aid of their country."
)
MULTIPLE_COMPLEX_IDS = (
    COMPLEX
    + "\nNow is the time\nSPDX-License-Identifier:Apache-2.0\nFor all good men"
    + "\n  SPDX-License-Identifier:   MIT\nto come to the aid of their country.\n"
    + COMPLEX_MULTI
    + "\n"
    + CONJUNCTIVE
    + "\n\n\nSPDX-License-Identifier:LicenseRef-mine"
)
MISMATCHED_PARENS = "  SPDX-License-Identifier: (((MIT OR \nApache-2.0) OR \nApache-2.0)"


def test_scan_001_text_without_tags_yields_nothing() -> None:
    assert extract_expressions("") == []
    assert extract_expressions("no license here\njust prose") == []


def test_scan_002_simple_tag_yields_single_identifier() -> None:
    assert extract_expressions(SIMPLE) == [APACHE]


def test_scan_003_conjunctive_tag_yields_three_members() -> None:
    result = extract_expressions(CONJUNCTIVE)

    assert result == [ConjunctiveSet(frozenset({APACHE, MIT, MINE}))]


def test_scan_004_nested_disjunction_flattens_to_two_members() -> None:
    result = extract_expressions(COMPLEX)

    assert len(result) == 1
    assert isinstance(result[0], DisjunctiveSet)
    assert result[0].members == frozenset({APACHE, MIT})


def test_scan_005_parenthesized_tag_spans_lines() -> None:
    assert extract_expressions(COMPLEX_MULTI) == extract_expressions(COMPLEX)


def test_scan_006_multiple_tags_are_returned_in_order() -> None:
    assert extract_expressions(MULTIPLE_SIMPLE_IDS) == [APACHE, MIT]


def test_scan_007_mixed_tags_yield_one_expression_each() -> None:
    result = extract_expressions(MULTIPLE_COMPLEX_IDS)

    either = DisjunctiveSet(frozenset({APACHE, MIT}))
    assert result == [
        either,
        APACHE,
        MIT,
        either,
        ConjunctiveSet(frozenset({APACHE, MIT, MINE})),
        MINE,
    ]


def test_scan_008_unclosed_parenthesis_raises_unbalanced_error() -> None:
    with pytest.raises(ParseError) as exc_info:
        extract_expressions(MISMATCHED_PARENS)

    assert exc_info.value.kind == "unbalanced_parens"


def test_scan_009_adjacent_identifiers_raise_invalid_expression() -> None:
    with pytest.raises(ParseError) as exc_info:
        extract_expressions("SPDX-License-Identifier: Apache-2.0 NOTVALID MIT")

    assert exc_info.value.kind == "invalid_expression"


def test_scan_010_tag_match_is_case_insensitive() -> None:
    assert extract_expressions("spdx-license-identifier: MIT") == [MIT]


def test_scan_011_comment_terminators_are_dropped() -> None:
    text = "/* SPDX-License-Identifier: MIT */\n<!-- SPDX-License-Identifier: Apache-2.0 -->"

    assert extract_expressions(text) == [MIT, APACHE]


def test_scan_012_block_comment_continuation_prefixes_are_ignored() -> None:
    text = "/*\n * SPDX-License-Identifier: (MIT OR\n *   Apache-2.0)\n */\n"

    assert extract_expressions(text) == [DisjunctiveSet(frozenset({APACHE, MIT}))]


def test_scan_013_repeated_scans_are_identical() -> None:
    assert extract_expressions(MULTIPLE_COMPLEX_IDS) == extract_expressions(
        MULTIPLE_COMPLEX_IDS
    )


def test_scan_014_java_source_fixture_yields_three_expressions(fixtures_dir: Path) -> None:
    text = (fixtures_dir / "ClassWithManySpdxIDs.java").read_text(encoding="utf-8")

    result = extract_expressions(text)

    assert result == [APACHE, MIT, DisjunctiveSet(frozenset({APACHE, MIT}))]
