from __future__ import annotations

import re

from apply_license.core.errors import ParseError


OR_TOKEN = "OR"
LEGACY_SEPARATOR = "/"
UNSUPPORTED_OPERATORS: set[str] = {"AND", "WITH"}

_OR_SPLIT = re.compile(r"(?:^|\s+)OR(?:\s+|$)")


def parse_expression(expression: str) -> list[str]:
    """Parse a license expression into an ordered list of identifiers.

    Only alternatives are understood: the expression is split on ``OR``
    (case sensitive, whitespace on both sides) and each piece is trimmed.
    The legacy Cargo form ``MIT/Apache-2.0`` is accepted as well, ``/``
    acting like ``OR``.

    Identifiers are not checked against any registry here, and may contain
    inner whitespace (``Internal License``). Duplicates are kept in place.
    """
    if expression is None or not expression.strip():
        raise ParseError(
            code="E_PARSE_EMPTY",
            message="license expression is empty",
            path="license",
        )

    identifiers: list[str] = []
    for segment in expression.split(LEGACY_SEPARATOR):
        for piece in _OR_SPLIT.split(segment.strip()):
            identifiers.append(_identifier(piece, expression))
    return identifiers


def _identifier(piece: str, expression: str) -> str:
    identifier = piece.strip()
    tokens = identifier.split()
    # A leftover OR token means two operators in a row.
    if not identifier or OR_TOKEN in tokens:
        raise ParseError(
            code="E_PARSE_EMPTY_IDENTIFIER",
            message=f"empty license identifier in expression: {expression!r}",
            path="license",
        )
    for token in tokens:
        if token in UNSUPPORTED_OPERATORS:
            raise ParseError(
                code="E_PARSE_UNSUPPORTED_OPERATOR",
                message=f"unsupported operator {token} in expression: {expression!r} (only OR is supported)",
                path="license",
            )
    if "(" in identifier or ")" in identifier:
        raise ParseError(
            code="E_PARSE_UNSUPPORTED_OPERATOR",
            message=f"parentheses are not supported in expression: {expression!r}",
            path="license",
        )
    return identifier
