import logging
import os
from typing import Optional

from market_deployment.chain import ChainClient
from market_deployment.constants import (
    MIN_REQUIRED_BALANCE,
    MOONSCAN_API_KEY_ENVVAR,
    REQUIRED_CONFIRMATIONS,
)
from market_deployment.environment import Environment
from market_deployment.models import DeploymentConfiguration

logger = logging.getLogger(__name__)


class PreflightError(RuntimeError):
    """Raised when the deployer is not able to run a deployment."""


def _format_units(amount: int) -> str:
    return f"{amount / 10**18:,.4f}"


def check_balance(client: ChainClient, environment: Environment) -> None:
    deployer_address = client.deployer_address
    balance = client.get_balance(deployer_address)
    logger.debug("Balance reported as: %s", balance)
    if balance < MIN_REQUIRED_BALANCE:
        symbol = environment.native_token_symbol
        raise PreflightError(
            f"{deployer_address} does not have the minimum required balance. "
            f"Reported Balance: {_format_units(balance)} {symbol}, "
            f"Required Balance: {_format_units(MIN_REQUIRED_BALANCE)} {symbol}"
        )


def check_moonscan_api_key(environment: Environment) -> Optional[str]:
    """Returns the explorer API key; only required when the environment has an explorer."""
    api_key = os.environ.get(MOONSCAN_API_KEY_ENVVAR)
    if environment.moonscan_api_url and not api_key:
        raise PreflightError(
            f"No Moonscan API key exported. Make sure you have {MOONSCAN_API_KEY_ENVVAR} set."
        )
    return api_key


def run_preflight_checks(
    client: ChainClient,
    environment: Environment,
    num_markets: int = 1,
    required_confirmations: int = REQUIRED_CONFIRMATIONS,
) -> DeploymentConfiguration:
    """Validates that a deployment can run and returns its configuration."""
    print("Running Pre Deployment Checks...")
    print(f"Running on Network: {environment.name}")

    print("1. Deployer account is loaded")
    deployer_address = client.deployer_address
    print(f"Loaded Deployer. Address: {deployer_address}")

    print("2. Deployer has sufficient balance")
    check_balance(client, environment)

    print("3. Moonscan API key is exported")
    api_key = check_moonscan_api_key(environment)

    print("All checks passed!")
    return DeploymentConfiguration(
        environment=environment,
        deployer=deployer_address,
        moonscan_api_url=environment.moonscan_api_url,
        moonscan_api_key=api_key,
        required_confirmations=required_confirmations,
        num_markets=num_markets,
    ).validate()
