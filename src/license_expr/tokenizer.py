# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tokenize license expression text."""

import re
from dataclasses import dataclass
from typing import Literal

ParseErrorKind = Literal["unbalanced_parens", "invalid_expression"]
TokenKind = Literal["lparen", "rparen", "and", "or", "identifier"]

_TOKEN_PATTERN = re.compile(r"(\()|(\))|([A-Za-z0-9.+\-]+)")
_OPERATORS: dict[str, TokenKind] = {"and": "and", "or": "or"}


class ParseError(ValueError):
    """Represent a malformed license expression.

    Attributes:
        kind: ``unbalanced_parens`` or ``invalid_expression``.
        expression: The offending expression text.
    """

    def __init__(self, kind: ParseErrorKind, message: str, expression: str = "") -> None:
        super().__init__(message)
        self.kind: ParseErrorKind = kind
        self.expression = expression


@dataclass(frozen=True)
class Token:
    """Represent one lexical token.

    Attributes:
        kind: Token category.
        value: Raw token text.
        position: Offset of the token in the expression text.
    """

    kind: TokenKind
    value: str
    position: int


def tokenize(text: str) -> list[Token]:
    """Split expression text into tokens.

    Whitespace, including newlines, between tokens is ignored.

    Args:
        text: License expression text.

    Returns:
        Tokens in source order.

    Raises:
        ParseError: If the text contains a character outside the grammar.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            break
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None:
            raise ParseError(
                "invalid_expression",
                f"Unexpected character {text[pos]!r} at offset {pos}",
                text,
            )
        if match.group(1):
            tokens.append(Token(kind="lparen", value="(", position=match.start(1)))
        elif match.group(2):
            tokens.append(Token(kind="rparen", value=")", position=match.start(2)))
        else:
            word = match.group(3)
            kind = _OPERATORS.get(word.lower(), "identifier")
            tokens.append(Token(kind=kind, value=word, position=match.start(3)))
        pos = match.end()
    return tokens
