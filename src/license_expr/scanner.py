# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scan arbitrary text for embedded ``SPDX-License-Identifier:`` tags."""

import logging
import re

from license_expr.model import LicenseExpression
from license_expr.parser import parse_expression
from license_expr.tokenizer import ParseError

logger = logging.getLogger(__name__)

TAG = "SPDX-License-Identifier:"

_TAG_PATTERN = re.compile(re.escape(TAG), re.IGNORECASE)
_CONTINUATION_PREFIX = re.compile(r"^\s*(?:\*+|//+|#+|--+|;+)")
_COMMENT_TERMINATORS = ("*/", "-->")


def extract_expressions(text: str) -> list[LicenseExpression]:
    """Extract every tagged license expression from text.

    An expression that starts with ``(`` may continue over several lines and
    ends at its balancing ``)``; any other expression ends at the end of the
    line.

    Args:
        text: Text to scan, usually a whole source file.

    Returns:
        One expression per tag occurrence, in order of appearance.

    Raises:
        ParseError: If a tagged expression is unbalanced or malformed.
    """
    expressions: list[LicenseExpression] = []
    pos = 0
    length = len(text)
    while pos < length:
        match = _TAG_PATTERN.search(text, pos)
        if match is None:
            break
        start = match.end()
        while start < length and text[start] in " \t":
            start += 1
        if start < length and text[start] == "(":
            expression_text, pos = _read_parenthesized(text, start)
        else:
            end = _end_of_line(text, start)
            expression_text = _strip_comment_terminator(text[start:end].strip())
            pos = end
        expressions.append(parse_expression(expression_text))
    logger.debug(f"Extracted license expressions (count={len(expressions)})")
    return expressions


def _read_parenthesized(text: str, start: int) -> tuple[str, int]:
    """Read a parenthesized expression that may span lines.

    Args:
        text: Full text.
        start: Offset of the opening parenthesis.

    Returns:
        The expression with line breaks folded to spaces, and the offset just
        past the closing parenthesis.

    Raises:
        ParseError: If the input ends before the parentheses balance.
    """
    depth = 0
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        index += 1
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                break
    if depth > 0:
        raise ParseError(
            "unbalanced_parens",
            "Mismatched parentheses for expression",
            text[start:index],
        )
    lines = text[start:index].splitlines()
    folded = [lines[0]] + [_CONTINUATION_PREFIX.sub("", line) for line in lines[1:]]
    return " ".join(folded), index


def _end_of_line(text: str, start: int) -> int:
    for index in range(start, len(text)):
        if text[index] in "\r\n":
            return index
    return len(text)


def _strip_comment_terminator(line: str) -> str:
    for terminator in _COMMENT_TERMINATORS:
        if line.endswith(terminator):
            return line[: -len(terminator)].rstrip()
    return line
