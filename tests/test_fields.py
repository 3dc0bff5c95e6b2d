import pytest

from errors import ValidationError
from fields import parse_fields


def test_simple_pairs():
    assert parse_fields(["firstName=Jane", "lastName=Doe"]) == {"firstName": "Jane", "lastName": "Doe"}


def test_quoted_value_with_spaces():
    assert parse_fields(['name="value with spaces"']) == {"name": "value with spaces"}


def test_only_first_equals_splits():
    assert parse_fields(['comments="a=b=c"', "expr=x=1"]) == {"comments": "a=b=c", "expr": "x=1"}


def test_empty_value_is_allowed():
    assert parse_fields(["middleName="]) == {"middleName": ""}


def test_single_quote_left_alone():
    assert parse_fields(['nickname="Jo']) == {"nickname": '"Jo'}


@pytest.mark.parametrize("pair", ["firstName", "=Jane"])
def test_malformed_pair(pair):
    with pytest.raises(ValidationError) as exc:
        parse_fields([pair])

    assert pair in exc.value.hint


def test_no_fields():
    with pytest.raises(ValidationError, match="No fields provided"):
        parse_fields([])
