"""Tests for add/match request validation."""

import pytest

from namematcher.core.errors import ValidationError
from namematcher.core.models import MatchQuery
from namematcher.validation.requests import pair_names, parse_name_list, split_name_field


def test_split_name_field():
    assert split_name_field("Bob, Rachel ,Ann") == ['Bob', 'Rachel', 'Ann']
    assert split_name_field(None) == []


def test_pair_names():
    assert pair_names(['Bob', 'Ann'], ['Smith', 'Jones']) == [('Bob', 'Smith'), ('Ann', 'Jones')]


def test_pair_names_rejects_unpaired_lists():
    with pytest.raises(ValidationError, match="unpaired"):
        pair_names(['Bob', 'Ann'], ['Smith'])


def test_pair_names_rejects_missing_lists():
    with pytest.raises(ValidationError, match="no names"):
        pair_names(None, ['Smith'])
    with pytest.raises(ValidationError, match="no names"):
        pair_names([], [])


@pytest.mark.parametrize("first,last", [
    (['', 'Ann'], ['Doe', 'Jones']),
    (['Bob'], ['  ']),
    ([''], ['']),
])
def test_pair_names_rejects_empty_names(first, last):
    """Test that a pair with any empty half is refused."""
    with pytest.raises(ValidationError, match="empty names"):
        pair_names(first, last)


def test_parse_name_list():
    assert parse_name_list("Rob,Jones:Ann,Smith") == [
        MatchQuery('Rob', 'Jones'),
        MatchQuery('Ann', 'Smith'),
    ]


def test_parse_name_list_missing_last():
    assert parse_name_list("Rob") == [MatchQuery('Rob', '')]
