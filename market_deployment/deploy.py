import logging
from collections import OrderedDict
from typing import Any, List, Optional

from eth_abi import is_encodable
from eth_abi.exceptions import EncodingError
from eth_typing import ChecksumAddress

from market_deployment.chain import ChainClient
from market_deployment.constants import (
    EMPTY_BECOME_IMPLEMENTATION_DATA,
    MTOKEN_CONSTRUCTOR_ABI_TYPES,
    MTOKEN_CONTRACT_NAME,
    MTOKEN_DECIMALS,
)
from market_deployment.models import DeploymentConfiguration, DeployResult, MarketConfiguration
from market_deployment.transactor import wait_for_confirmations
from market_deployment.utils import initial_exchange_rate_mantissa
from market_deployment.verify import MoonscanVerifier, encode_constructor_arguments

logger = logging.getLogger(__name__)


def mtoken_constructor_parameters(
    market_configuration: MarketConfiguration, deployment_configuration: DeploymentConfiguration
) -> OrderedDict:
    """Resolves the MErc20Delegator constructor parameters, in ABI order."""
    environment = deployment_configuration.environment
    return OrderedDict(
        underlying_=market_configuration.token_address,
        comptroller_=environment.comptroller,
        interestRateModel_=environment.interest_rate_model,
        initialExchangeRateMantissa_=initial_exchange_rate_mantissa(
            market_configuration.token_decimals
        ),
        name_=market_configuration.mtoken_name,
        symbol_=market_configuration.mtoken_symbol,
        decimals_=MTOKEN_DECIMALS,
        # the timelock is admin from the start
        admin_=environment.timelock,
        implementation_=environment.merc20_implementation,
        becomeImplementationData=EMPTY_BECOME_IMPLEMENTATION_DATA,
    )


class InvalidConstructorParameters(ValueError):
    pass


def validate_constructor_parameters(parameters: OrderedDict) -> None:
    """Validates the resolved constructor parameters against the constructor ABI types."""
    if len(parameters) != len(MTOKEN_CONSTRUCTOR_ABI_TYPES):
        raise InvalidConstructorParameters(
            f"Constructor parameters length mismatch - "
            f"ABI requires {len(MTOKEN_CONSTRUCTOR_ABI_TYPES)}, Got {len(parameters)}."
        )
    codex = enumerate(zip(MTOKEN_CONSTRUCTOR_ABI_TYPES, parameters.items()))
    for position, (abi_type, (name, value)) in codex:
        if not is_encodable(abi_type, value):
            raise InvalidConstructorParameters(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_type}'"
            )


class ContractDeployer:
    """Deploys mToken markets and, where an explorer is available, verifies their source."""

    def __init__(
        self,
        client: ChainClient,
        deployment_configuration: DeploymentConfiguration,
        verifier: Optional[MoonscanVerifier] = None,
    ):
        self.client = client
        self.deployment_configuration = deployment_configuration
        if verifier is None and deployment_configuration.moonscan_api_url:
            verifier = MoonscanVerifier(
                api_url=deployment_configuration.moonscan_api_url,
                api_key=deployment_configuration.moonscan_api_key,
                source_filepath=deployment_configuration.environment.verification_source,
            )
        self.verifier = verifier

    def deploy(self, market_configuration: MarketConfiguration) -> DeployResult:
        logger.info("Deploying %s contract", MTOKEN_CONTRACT_NAME)

        constructor_parameters = mtoken_constructor_parameters(
            market_configuration, self.deployment_configuration
        )
        for name, value in constructor_parameters.items():
            logger.debug("\t%s=%s", name, value)
        validate_constructor_parameters(constructor_parameters)

        constructor_args = list(constructor_parameters.values())
        address, pending = self.client.deploy(MTOKEN_CONTRACT_NAME, constructor_args)
        logger.info("Deployed the mToken contract at: %s", address)

        wait_for_confirmations(pending, self.deployment_configuration.required_confirmations)

        self._verify(address, constructor_args)
        return DeployResult(contract_address=address, transaction_hash=pending.txn_hash)

    def _verify(self, address: ChecksumAddress, constructor_args: List[Any]) -> None:
        if self.verifier is None:
            logger.info("Skipping contract verification; no explorer API for this network.")
            return

        try:
            constructor_arguments = encode_constructor_arguments(constructor_args)
        except (ValueError, TypeError, EncodingError) as e:
            logger.info(
                "Unable to encode constructor arguments for verification. "
                "You may need to manually verify the contract."
            )
            logger.info("Error: %s", e)
            return

        result = self.verifier.verify(address, constructor_arguments)
        if result.verified:
            logger.info("Contract verified on Moonscan.")
        else:
            logger.info(
                "Caught an error trying to verify the contract. The deploy will continue "
                "but you may need to manually verify the contract."
            )
            logger.info("Error: %s", result.detail)
