import keyword
import string

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from jsexpr.codegen import InvalidIdentifierError, sanitize_identifier


@pytest.mark.parametrize(
    "name, expected",
    [
        ("name", "Name"),
        ("Name", "Name"),
        ("$scope", "Scope"),
        ("123abc", "Abc"),
        ("first-name", "Firstname"),
        ("a$b", "Ab"),
        ("_private", "_private"),
        ("__proto__", "_proto__"),
        ("x1", "X1"),
        ("élan", "Élan"),
        ("None", "None_"),
        ("match", "Match"),
    ],
)
def test_member_names(name: str, expected: str) -> None:
    assert sanitize_identifier(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("name", "name"),
        ("class", "class_"),
        ("from", "from_"),
        ("lambda", "lambda_"),
        ("self", "self_"),
        ("match", "match_"),
        ("type", "type_"),
        ("_", "_"),
        ("$event", "event"),
        ("{ a, b }", "ab"),
        ("中文", "中文"),
    ],
)
def test_parameter_names(name: str, expected: str) -> None:
    assert sanitize_identifier(name, for_parameter=True) == expected


@pytest.mark.parametrize("name", ["", "123", "$", "{}", "[ ]", "-"])
def test_names_without_letters(name: str) -> None:
    with pytest.raises(InvalidIdentifierError):
        sanitize_identifier(name)
    # Also a ValueError, for callers that don't know about generator errors.
    with pytest.raises(ValueError):
        sanitize_identifier(name, for_parameter=True)


_NAME_CHARACTERS = string.ascii_letters + string.digits + string.punctuation + "é_ "


@given(st.text(alphabet=_NAME_CHARACTERS, min_size=1), st.booleans())
def test_sanitized_names_are_identifiers(name: str, for_parameter: bool) -> None:
    assume(any(c.isalpha() or c == "_" for c in name))
    sanitized = sanitize_identifier(name, for_parameter)
    assert sanitized.isidentifier()
    assert not keyword.iskeyword(sanitized)
    assert not sanitized.startswith("__")
    assert sanitize_identifier(sanitized, for_parameter) == sanitized
