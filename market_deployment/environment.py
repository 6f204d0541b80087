import typing
from pathlib import Path
from typing import List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from market_deployment.constants import (
    DEFAULT_RPC_URLS,
    MOONSCAN_API_URLS,
    NATIVE_TOKEN_SYMBOLS,
)
from market_deployment.models import MarketConfiguration
from market_deployment.utils import _load_yaml

ENVIRONMENT_CONTRACTS = (
    "comptroller",
    "timelock",
    "interest_rate_model",
    "merc20_implementation",
    "oracle",
)


class EnvironmentConfigError(ValueError):
    pass


class Environment(NamedTuple):
    """
    The target chain and the well-known protocol contracts deployed on it.
    Passed explicitly to every component that needs an address.
    """

    name: str
    chain_id: int
    comptroller: ChecksumAddress
    timelock: ChecksumAddress
    interest_rate_model: ChecksumAddress
    merc20_implementation: ChecksumAddress
    oracle: ChecksumAddress
    rpc_url: Optional[str] = None
    moonscan_api_url: Optional[str] = None
    verification_source: Optional[Path] = None

    @property
    def native_token_symbol(self) -> str:
        return NATIVE_TOKEN_SYMBOLS.get(self.name, "ETH")

    @classmethod
    def from_config(cls, config: typing.Dict, base_path: Optional[Path] = None) -> "Environment":
        deployment = config.get("deployment")
        if not deployment:
            raise EnvironmentConfigError("deployment is not set in params file.")

        name = deployment.get("environment")
        if not name:
            raise EnvironmentConfigError("environment is not set in params file.")
        name = str(name).lower()

        chain_id = deployment.get("chain_id")
        if not chain_id:
            raise EnvironmentConfigError("chain_id is not set in params file.")

        contracts = config.get("contracts")
        if not contracts:
            raise EnvironmentConfigError("Params file missing 'contracts' field.")

        addresses = dict()
        for contract in ENVIRONMENT_CONTRACTS:
            address = contracts.get(contract)
            if not address:
                raise EnvironmentConfigError(f"'{contract}' address is not set in params file.")
            if not is_address(address):
                raise EnvironmentConfigError(f"'{contract}' address {address} is not valid.")
            addresses[contract] = to_checksum_address(address)

        # an explicit null disables verification for a known environment
        if "moonscan_api_url" in deployment:
            moonscan_api_url = deployment["moonscan_api_url"]
        else:
            moonscan_api_url = MOONSCAN_API_URLS.get(name)

        verification_source = deployment.get("verification_source")
        if verification_source:
            verification_source = Path(verification_source)
            if base_path and not verification_source.is_absolute():
                verification_source = base_path / verification_source

        return cls(
            name=name,
            chain_id=int(chain_id),
            rpc_url=deployment.get("rpc_url", DEFAULT_RPC_URLS.get(name)),
            moonscan_api_url=moonscan_api_url,
            verification_source=verification_source,
            **addresses,
        )

    @classmethod
    def from_yaml(cls, filepath: Path) -> "Environment":
        config = _load_yaml(filepath)
        return cls.from_config(config, base_path=Path(filepath).parent)


def markets_from_config(config: typing.Dict) -> List[MarketConfiguration]:
    """Returns the market configurations listed in a params file, if any."""
    markets = config.get("markets") or list()
    if not isinstance(markets, list):
        raise EnvironmentConfigError("Malformed 'markets' section in params file.")
    return [MarketConfiguration.from_dict(market) for market in markets]


def validate_chain_id(environment: Environment, chain_id: int, is_local: bool = False) -> None:
    """
    Checks that the connected network is the one the params file was written for.
    Local networks are exempt.
    """
    if environment.chain_id != chain_id and not is_local:
        raise EnvironmentConfigError(
            f"chain_id in params file ({environment.chain_id}) does not match "
            f"chain_id of current network ({chain_id})."
        )


def load_params(filepath: Path) -> typing.Tuple[Environment, List[MarketConfiguration]]:
    """Loads the environment and any pre-configured markets from a params file."""
    print(f"Loading params file {filepath}...")
    config = _load_yaml(filepath)
    if not isinstance(config, dict):
        raise EnvironmentConfigError(f"Malformed params file {filepath}.")
    environment = Environment.from_config(config, base_path=Path(filepath).parent)
    markets = markets_from_config(config)
    return environment, markets
