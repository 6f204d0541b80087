import logging
from typing import Any

from eth_typing import ChecksumAddress

from market_deployment.chain import ChainClient
from market_deployment.constants import MTOKEN_CONTRACT_NAME
from market_deployment.models import (
    ConfigureMarketResult,
    DeploymentConfiguration,
    MarketConfiguration,
)
from market_deployment.transactor import TransactionSubmitter
from market_deployment.utils import percent_to_mantissa

logger = logging.getLogger(__name__)


class MarketConfigurer:
    """
    Runs the post-deploy configuration of a market: reserve factor, protocol
    seize share, then the timelock as pending admin. The timelock must still
    call `_acceptAdmin` to complete the handover.

    Each step goes through the submitter, which retries until it succeeds.
    """

    def __init__(
        self,
        client: ChainClient,
        submitter: TransactionSubmitter,
        deployment_configuration: DeploymentConfiguration,
    ):
        self.client = client
        self.submitter = submitter
        self.deployment_configuration = deployment_configuration

    def configure(
        self, mtoken_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ConfigureMarketResult:
        logger.info("Configuring the market at %s", mtoken_address)
        mtoken = self.client.at(MTOKEN_CONTRACT_NAME, mtoken_address)

        set_reserve_factor_hash = self.set_reserve_factor(mtoken, market_configuration)
        set_protocol_seize_share_hash = self.set_protocol_seize_share(mtoken, market_configuration)
        set_pending_admin_hash = self.set_pending_admin(mtoken)

        logger.info("Market configured successfully.")
        return ConfigureMarketResult(
            set_reserve_factor_hash=set_reserve_factor_hash,
            set_protocol_seize_share_hash=set_protocol_seize_share_hash,
            set_pending_admin_hash=set_pending_admin_hash,
        )

    def _submit(self, mtoken: Any, operation_name: str, *args) -> str:
        return self.submitter.submit(
            mtoken,
            operation_name,
            args,
            required_confirmations=self.deployment_configuration.required_confirmations,
        )

    def set_reserve_factor(self, mtoken: Any, market_configuration: MarketConfiguration) -> str:
        reserve_factor = percent_to_mantissa(market_configuration.reserve_factor)
        logger.info("Setting reserve factor to %s", reserve_factor)
        txn_hash = self._submit(mtoken, "_setReserveFactor", reserve_factor)
        logger.info("Reserve Factor set successfully.")
        return txn_hash

    def set_protocol_seize_share(
        self, mtoken: Any, market_configuration: MarketConfiguration
    ) -> str:
        protocol_seize_share = percent_to_mantissa(market_configuration.protocol_seize_share)
        logger.info("Setting protocol seize share to %s", protocol_seize_share)
        txn_hash = self._submit(mtoken, "_setProtocolSeizeShare", protocol_seize_share)
        logger.info("Protocol Seize Share set successfully.")
        return txn_hash

    def set_pending_admin(self, mtoken: Any) -> str:
        timelock = self.deployment_configuration.environment.timelock
        logger.info("Setting pending admin to timelock %s", timelock)
        txn_hash = self._submit(mtoken, "_setPendingAdmin", timelock)
        logger.info("Pending Admin set successfully.")
        return txn_hash
