import pytest
import yaml

from market_deployment.environment import (
    Environment,
    EnvironmentConfigError,
    load_params,
    markets_from_config,
    validate_chain_id,
)
from market_deployment.models import MarketConfiguration
from tests.conftest import (
    CHAINLINK_FEED,
    COMPTROLLER,
    INTEREST_RATE_MODEL,
    MERC20_IMPLEMENTATION,
    ORACLE,
    TIMELOCK,
    TOKEN,
)


def _config(**deployment):
    config = {
        "deployment": {"environment": "moonbase", "chain_id": 1287},
        "contracts": {
            "comptroller": COMPTROLLER.lower(),
            "timelock": TIMELOCK,
            "interest_rate_model": INTEREST_RATE_MODEL,
            "merc20_implementation": MERC20_IMPLEMENTATION,
            "oracle": ORACLE,
        },
    }
    config["deployment"].update(deployment)
    return config


def _market(**overrides):
    market = {
        "token_address": TOKEN,
        "chainlink_feed_address": CHAINLINK_FEED,
        "token_symbol": "USDC",
        "token_decimals": 6,
        "mtoken_name": "Moonwell USDC",
        "mtoken_symbol": "mUSDC",
        "reserve_factor": 15,
        "collateral_factor": 0,
    }
    market.update(overrides)
    return market


def test_environment_from_config():
    environment = Environment.from_config(_config())

    assert environment.name == "moonbase"
    assert environment.chain_id == 1287
    # addresses are checksummed
    assert environment.comptroller == COMPTROLLER
    assert environment.timelock == TIMELOCK
    assert environment.moonscan_api_url == "https://api-moonbase.moonscan.io/api"
    assert environment.rpc_url == "https://rpc.api.moonbase.moonbeam.network"
    assert environment.native_token_symbol == "DEV"
    assert environment.verification_source is None


def test_explicit_null_disables_explorer():
    environment = Environment.from_config(_config(moonscan_api_url=None))
    assert environment.moonscan_api_url is None


def test_unknown_environment_has_no_defaults():
    environment = Environment.from_config(_config(environment="Local", chain_id=1337))
    assert environment.name == "local"
    assert environment.moonscan_api_url is None
    assert environment.rpc_url is None
    assert environment.native_token_symbol == "ETH"


def test_relative_verification_source(tmp_path):
    environment = Environment.from_config(
        _config(verification_source="sources/MErc20Delegator.json"), base_path=tmp_path
    )
    assert environment.verification_source == tmp_path / "sources" / "MErc20Delegator.json"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c: c.pop("deployment"),
        lambda c: c["deployment"].pop("environment"),
        lambda c: c["deployment"].pop("chain_id"),
        lambda c: c.pop("contracts"),
        lambda c: c["contracts"].pop("timelock"),
        lambda c: c["contracts"].update(oracle="0x1234"),
    ],
)
def test_invalid_environment(mutate):
    config = _config()
    mutate(config)
    with pytest.raises(EnvironmentConfigError):
        Environment.from_config(config)


def test_markets_from_config():
    markets = markets_from_config({"markets": [_market(), _market(borrow_cap=500)]})
    assert len(markets) == 2
    assert markets[0].protocol_seize_share == 3
    assert not markets[0].has_borrow_cap
    assert markets[1].borrow_cap == 500


def test_no_markets_in_config():
    assert markets_from_config({}) == []
    assert markets_from_config({"markets": None}) == []


def test_malformed_markets_in_config():
    with pytest.raises(EnvironmentConfigError):
        markets_from_config({"markets": {"token_address": TOKEN}})


def test_invalid_market_in_config():
    with pytest.raises(MarketConfiguration.Invalid):
        markets_from_config({"markets": [_market(reserve_factor=101)]})


def test_validate_chain_id():
    environment = Environment.from_config(_config())
    validate_chain_id(environment, 1287)
    with pytest.raises(EnvironmentConfigError):
        validate_chain_id(environment, 1284)
    # local networks are exempt
    validate_chain_id(environment, 1337, is_local=True)


def test_load_params(tmp_path):
    config = _config(verification_source="MErc20Delegator.json")
    config["markets"] = [_market()]
    filepath = tmp_path / "moonbase.yml"
    filepath.write_text(yaml.safe_dump(config))

    environment, markets = load_params(filepath)

    assert environment.comptroller == COMPTROLLER
    assert environment.verification_source == tmp_path / "MErc20Delegator.json"
    assert [market.mtoken_symbol for market in markets] == ["mUSDC"]
    assert Environment.from_yaml(filepath) == environment


def test_load_malformed_params(tmp_path):
    filepath = tmp_path / "broken.yml"
    filepath.write_text("- just\n- a list\n")
    with pytest.raises(EnvironmentConfigError):
        load_params(filepath)
