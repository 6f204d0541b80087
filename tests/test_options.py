import click
import pytest

from market_deployment.options import resolve_num_markets


def test_num_markets_defaults_to_one():
    assert resolve_num_markets([], None) == 1
    assert resolve_num_markets([], 3) == 3


def test_num_markets_follows_params_file(market_configuration):
    markets = [market_configuration, market_configuration]
    assert resolve_num_markets(markets, None) == 2
    assert resolve_num_markets(markets, 2) == 2


def test_conflicting_num_markets_is_rejected(market_configuration):
    with pytest.raises(click.BadParameter, match="lists 1 market"):
        resolve_num_markets([market_configuration], 3)
