"""Unit tests for license expression parsing."""

import pytest

from license_expr import (
    NO_ASSERTION,
    NONE_LICENSE,
    ConjunctiveSet,
    DisjunctiveSet,
    ParseError,
    SimpleLicenseRef,
    parse_expression,
)
from license_expr.model import iter_license_refs, make_set
from license_expr.tokenizer import tokenize


def _refs(*ids: str) -> frozenset[SimpleLicenseRef]:
    return frozenset(SimpleLicenseRef(item) for item in ids)


def test_lic_001_single_identifier() -> None:
    result = parse_expression("GPL-2.0+")

    assert result == SimpleLicenseRef("GPL-2.0+")
    assert str(result) == "GPL-2.0+"


def test_lic_002_operators_are_case_insensitive() -> None:
    assert parse_expression("MIT and Apache-2.0") == ConjunctiveSet(_refs("MIT", "Apache-2.0"))
    assert parse_expression("MIT Or Apache-2.0") == DisjunctiveSet(_refs("MIT", "Apache-2.0"))


def test_lic_003_parentheses_nest_sets() -> None:
    result = parse_expression("(MIT AND BSD-3-Clause) OR GPL-2.0-only")

    assert result == DisjunctiveSet(
        frozenset({ConjunctiveSet(_refs("MIT", "BSD-3-Clause")), SimpleLicenseRef("GPL-2.0-only")})
    )
    assert str(result) == "((BSD-3-Clause AND MIT) OR GPL-2.0-only)"


def test_lic_004_same_operator_children_flatten_and_deduplicate() -> None:
    result = parse_expression("MIT AND (Apache-2.0 AND MIT) AND (MIT)")

    assert result == ConjunctiveSet(_refs("MIT", "Apache-2.0"))


def test_lic_005_duplicates_collapse_to_single_member() -> None:
    assert parse_expression("(MIT OR MIT)") == SimpleLicenseRef("MIT")


def test_lic_006_whitespace_and_newlines_are_ignored() -> None:
    assert parse_expression(" ( MIT\n\tOR\r\nApache-2.0 ) ") == DisjunctiveSet(
        _refs("MIT", "Apache-2.0")
    )


def test_lic_007_mixed_operators_without_parentheses_are_rejected() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_expression("MIT AND BSD-3-Clause OR GPL-2.0")

    assert exc_info.value.kind == "invalid_expression"


@pytest.mark.parametrize(
    "text",
    ["(MIT OR Apache-2.0", "MIT OR Apache-2.0)", ")", "((MIT)"],
)
def test_lic_008_unbalanced_parentheses(text: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_expression(text)

    assert exc_info.value.kind == "unbalanced_parens"


@pytest.mark.parametrize(
    "text",
    ["", "   ", "MIT AND", "AND MIT", "MIT OR OR Apache-2.0", "MIT $ Apache-2.0", "()", "MIT XOR Apache-2.0"],
)
def test_lic_009_malformed_expressions(text: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_expression(text)

    assert exc_info.value.kind == "invalid_expression"


def test_lic_010_sentinels_parse_only_as_whole_expression() -> None:
    assert parse_expression("NOASSERTION") == NO_ASSERTION
    assert parse_expression("none") == NONE_LICENSE

    with pytest.raises(ParseError):
        parse_expression("MIT OR NONE")


def test_lic_011_license_ref_requires_idstring() -> None:
    assert parse_expression("LicenseRef-my.license-1").is_extracted

    with pytest.raises(ParseError):
        parse_expression("LicenseRef-")


def test_lic_012_tokenizer_records_positions() -> None:
    tokens = tokenize("(MIT and X)")

    assert [(token.kind, token.position) for token in tokens] == [
        ("lparen", 0),
        ("identifier", 1),
        ("and", 5),
        ("identifier", 9),
        ("rparen", 10),
    ]


def test_lic_013_set_requires_two_members() -> None:
    with pytest.raises(ValueError):
        ConjunctiveSet(_refs("MIT"))

    assert make_set("OR", [SimpleLicenseRef("MIT")]) == SimpleLicenseRef("MIT")


def test_lic_014_iter_license_refs_walks_nested_sets() -> None:
    expression = parse_expression("(MIT AND LicenseRef-a) OR Apache-2.0")

    assert sorted(ref.license_id for ref in iter_license_refs(expression)) == [
        "Apache-2.0",
        "LicenseRef-a",
        "MIT",
    ]


@pytest.mark.parametrize(
    "text",
    [
        "MIT",
        "LicenseRef-mine",
        "(MIT AND Apache-2.0) OR GPL-2.0-only",
        "MIT AND (Apache-2.0 AND MIT)",
        "(MIT OR LicenseRef-a) AND (BSD-3-Clause OR GPL-2.0+)",
        "NOASSERTION",
        "NONE",
    ],
)
def test_lic_015_rendered_expressions_parse_back_to_equal_trees(text: str) -> None:
    expression = parse_expression(text)

    assert parse_expression(str(expression)) == expression
