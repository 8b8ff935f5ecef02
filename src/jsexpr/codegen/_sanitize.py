from __future__ import annotations

import keyword
import unicodedata

from ._errors import InvalidIdentifierError

SIGIL = "_"
"""Appended to identifiers that would otherwise collide with Python keywords."""

# Soft keywords that older interpreters don't list.
_SOFT_KEYWORDS = frozenset({"case", "match", "type"})
_RESERVED = (
    frozenset(keyword.kwlist) | frozenset(keyword.softkwlist) | _SOFT_KEYWORDS | {"self"}
) - {"_"}


def _is_letter(char: str) -> bool:
    return unicodedata.category(char).startswith("L") and ("a" + char).isidentifier()


def _keep_valid(text: str) -> str:
    return "".join(c for c in text if c.isdecimal() or _is_letter(c) or c == "_")


def sanitize_identifier(name: str, for_parameter: bool = False) -> str:
    """Map a TypeScript name to a legal Python identifier.

    Leading characters are dropped until a letter or underscore, then every
    character that isn't a letter, digit or underscore is removed. Type and
    member names get an upper-case first letter; parameter names keep their
    case. Names that are Python keywords (or `self`) get a trailing `_`.

    Args:
        name: The TypeScript identifier.
        for_parameter: Keep the first letter's case.

    Returns:
        The sanitized identifier. Sanitizing it again returns it unchanged.

    Raises:
        InvalidIdentifierError: if `name` has no letters or underscores.
    """
    start = 0
    while start < len(name) and not (
        name[start] == "_" or (_is_letter(name[start]) and name[start].isidentifier())
    ):
        start += 1
    if start == len(name):
        raise InvalidIdentifierError(
            f"{name!r} has no letters or underscores to build an identifier from"
        )

    kept = _keep_valid(name[start:])

    # Double underscores would trigger private name mangling in a class body.
    stripped = kept.lstrip("_")
    if len(stripped) < len(kept):
        kept = "_" + stripped

    if not for_parameter:
        # Upper-casing can introduce combining marks, eg for "ǰ".
        kept = _keep_valid(kept[0].upper()) + kept[1:]

    if kept in _RESERVED:
        kept += SIGIL
    return kept
