import logging
import typing
from typing import Optional

from market_deployment.chain import ChainClient
from market_deployment.configure import MarketConfigurer
from market_deployment.deploy import ContractDeployer
from market_deployment.models import (
    DeploymentConfiguration,
    MarketConfiguration,
    MarketsDeployResult,
)
from market_deployment.proposal import ProposalBuilder, merge_proposals
from market_deployment.transactor import RetryPolicy, TransactionSubmitter
from market_deployment.verify import MoonscanVerifier

logger = logging.getLogger(__name__)


def deploy_and_wire_markets(
    market_configurations: typing.Sequence[MarketConfiguration],
    deployment_configuration: DeploymentConfiguration,
    client: ChainClient,
    retry_policy: Optional[RetryPolicy] = None,
    verifier: Optional[MoonscanVerifier] = None,
    submitter: Optional[TransactionSubmitter] = None,
) -> MarketsDeployResult:
    """
    Deploys, configures and builds the listing proposal for each market in
    order, then merges the per-market proposals into a single proposal.
    Markets are processed one at a time; nothing is reported until all are done.
    """
    submitter = submitter or TransactionSubmitter(client, retry_policy=retry_policy)
    deployer = ContractDeployer(client, deployment_configuration, verifier=verifier)
    configurer = MarketConfigurer(client, submitter, deployment_configuration)
    builder = ProposalBuilder(deployment_configuration.environment)

    deploy_results, configure_market_results, proposals = [], [], []
    for index, market_configuration in enumerate(market_configurations, start=1):
        logger.info(
            "Market %d of %d: %s",
            index,
            len(market_configurations),
            market_configuration.mtoken_symbol,
        )
        deploy_result = deployer.deploy(market_configuration)
        configure_market_result = configurer.configure(
            deploy_result.contract_address, market_configuration
        )
        proposal = builder.build(deploy_result.contract_address, market_configuration)

        deploy_results.append(deploy_result)
        configure_market_results.append(configure_market_result)
        proposals.append(proposal)

    return MarketsDeployResult(
        proposal=merge_proposals(proposals),
        market_configurations=tuple(market_configurations),
        deploy_results=tuple(deploy_results),
        configure_market_results=tuple(configure_market_results),
    )
