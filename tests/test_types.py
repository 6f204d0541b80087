import click
import pytest

from market_deployment.types import ChecksumAddress, MinInt, Percentage, PrefixedString
from tests.conftest import TOKEN


def test_min_int():
    assert MinInt(0).convert("3", None, None) == 3
    assert MinInt(-1).convert(-1, None, None) == -1
    with pytest.raises(click.BadParameter):
        MinInt(1).convert("0", None, None)
    with pytest.raises(click.BadParameter):
        MinInt(1).convert("many", None, None)


@pytest.mark.parametrize("value, expected", [("0", 0), ("15", 15), (100, 100)])
def test_percentage(value, expected):
    assert Percentage().convert(value, None, None) == expected


@pytest.mark.parametrize("value", ["-1", "101", "fifteen"])
def test_invalid_percentage(value):
    with pytest.raises(click.BadParameter):
        Percentage().convert(value, None, None)


def test_checksum_address():
    assert ChecksumAddress().convert(TOKEN.lower(), None, None) == TOKEN
    with pytest.raises(click.BadParameter):
        ChecksumAddress().convert("0xnotanaddress", None, None)


def test_prefixed_string():
    assert PrefixedString("Moonwell").convert("Moonwell FRAX", None, None) == "Moonwell FRAX"
    with pytest.raises(click.BadParameter):
        PrefixedString("m").convert("FRAX", None, None)
