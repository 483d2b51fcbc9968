# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Recursive-descent parser for license expressions.

Grammar::

    expression := term (("AND" | "OR") term)*
    term       := identifier | "(" expression ")"

One level of the grammar uses a single operator. ``MIT AND BSD-3-Clause OR
GPL-2.0`` is rejected; the author must write ``(MIT AND BSD-3-Clause) OR
GPL-2.0`` instead.
"""

import logging
import re

from license_expr.model import (
    LICENSE_REF_PREFIX,
    NO_ASSERTION,
    NONE_LICENSE,
    LicenseExpression,
    SimpleLicenseRef,
    SpecialLicense,
    make_set,
)
from license_expr.tokenizer import ParseError, ParseErrorKind, Token, tokenize

logger = logging.getLogger(__name__)

_LICENSE_REF_PATTERN = re.compile(r"^LicenseRef-[A-Za-z0-9.\-]+$", re.IGNORECASE)
_SPECIAL_LICENSES: dict[str, SpecialLicense] = {
    "NOASSERTION": NO_ASSERTION,
    "NONE": NONE_LICENSE,
}


def parse_expression(text: str) -> LicenseExpression:
    """Parse one license expression.

    Args:
        text: Expression text; may span several lines.

    Returns:
        Parsed expression tree.

    Raises:
        ParseError: If parentheses are unbalanced or the expression is malformed.
    """
    return _Parser(text=text, tokens=tokenize(text)).parse()


class _Parser:
    """Hold cursor state for one parse."""

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self._text = text
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def parse(self) -> LicenseExpression:
        if not self._tokens:
            raise ParseError("invalid_expression", "Empty license expression", self._text)
        expression = self._expression()
        token = self._peek()
        if token is not None:
            if token.kind == "rparen":
                raise self._error(
                    "unbalanced_parens",
                    f"Unmatched ')' at offset {token.position}",
                )
            raise self._error(
                "invalid_expression",
                f"Unexpected token {token.value!r} at offset {token.position}",
            )
        return expression

    def _expression(self) -> LicenseExpression:
        terms = [self._term()]
        operator: str | None = None
        while True:
            token = self._peek()
            if token is None or token.kind not in ("and", "or"):
                break
            if operator is not None and token.kind != operator:
                raise self._error(
                    "invalid_expression",
                    f"Mixed AND/OR without parentheses at offset {token.position}",
                )
            operator = token.kind
            self._pos += 1
            terms.append(self._term())
        if operator is None:
            return terms[0]
        for term in terms:
            if isinstance(term, SpecialLicense):
                raise self._error(
                    "invalid_expression",
                    f"{term.kind} cannot be combined with other licenses",
                )
        return make_set("AND" if operator == "and" else "OR", terms)

    def _term(self) -> LicenseExpression:
        token = self._peek()
        if token is None:
            raise self._error("invalid_expression", "Expected a license identifier")
        if token.kind == "lparen":
            self._pos += 1
            self._depth += 1
            expression = self._expression()
            closing = self._peek()
            if closing is None:
                raise self._error("unbalanced_parens", "Missing ')'")
            if closing.kind != "rparen":
                raise self._error(
                    "invalid_expression",
                    f"Unexpected token {closing.value!r} at offset {closing.position}",
                )
            self._pos += 1
            self._depth -= 1
            return expression
        if token.kind == "identifier":
            self._pos += 1
            return self._identifier(token)
        if token.kind == "rparen" and self._depth == 0:
            raise self._error(
                "unbalanced_parens", f"Unmatched ')' at offset {token.position}"
            )
        raise self._error(
            "invalid_expression",
            f"Expected a license identifier but found {token.value!r} "
            f"at offset {token.position}",
        )

    def _identifier(self, token: Token) -> LicenseExpression:
        special = _SPECIAL_LICENSES.get(token.value.upper())
        if special is not None:
            return special
        if token.value.lower().startswith(LICENSE_REF_PREFIX.lower()):
            if not _LICENSE_REF_PATTERN.match(token.value):
                raise self._error(
                    "invalid_expression",
                    f"Invalid license reference {token.value!r}",
                )
        return SimpleLicenseRef(license_id=token.value)

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _error(self, kind: ParseErrorKind, message: str) -> ParseError:
        logger.debug(f"License expression rejected (kind={kind} text={self._text!r})")
        return ParseError(kind, message, self._text)
