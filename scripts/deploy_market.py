#!/usr/bin/python3

import logging
import os

import click
from ape import accounts, networks
from ape.cli import ConnectedProviderCommand, network_option

from market_deployment.ape_client import ApeChainClient, is_local_network
from market_deployment.confirm import _continue, prompt_market_configuration
from market_deployment.constants import LOGLEVEL_ENVVAR
from market_deployment.environment import EnvironmentConfigError, load_params, validate_chain_id
from market_deployment.options import (
    account_option,
    autosign_option,
    confirmations_option,
    max_attempts_option,
    num_markets_option,
    output_option,
    params_option,
    resolve_num_markets,
)
from market_deployment.orchestrator import deploy_and_wire_markets
from market_deployment.preflight import PreflightError, run_preflight_checks
from market_deployment.report import (
    check_output_filepath,
    print_report,
    resolve_version,
    write_proposal,
)
from market_deployment.transactor import RetryPolicy


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_option
@num_markets_option
@account_option
@autosign_option
@confirmations_option
@max_attempts_option
@output_option
def cli(
    network,
    params_filepath,
    num_markets,
    account,
    autosign,
    required_confirmations,
    max_attempts,
    output_filepath,
):
    """
    Deploys one or more mToken markets, configures them, and prints the
    governance proposal that lists them.

    ape run deploy_market --network moonbeam:mainnet:node --params params/moonbeam.yml
    """
    logging.basicConfig(
        level=os.environ.get(LOGLEVEL_ENVVAR, "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        environment, markets = load_params(params_filepath)
        validate_chain_id(
            environment, networks.provider.network.chain_id, is_local=is_local_network()
        )
    except (EnvironmentConfigError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="--params")

    client = ApeChainClient(
        account=accounts.load(account) if account else None, autosign=autosign
    )
    client.describe()

    num_markets = resolve_num_markets(markets, num_markets)
    try:
        check_output_filepath(output_filepath)
    except FileExistsError as e:
        raise click.BadParameter(str(e), param_hint="--output")

    try:
        deployment_configuration = run_preflight_checks(
            client,
            environment,
            num_markets=num_markets,
            required_confirmations=required_confirmations,
        )
    except PreflightError as e:
        raise click.ClickException(f"Fatal error: {e}")

    # resolved before any transaction so the report cannot fail after deployment
    deployer_version = resolve_version()

    if not markets:
        markets = [prompt_market_configuration(client) for _ in range(num_markets)]
    if not autosign:
        _continue()

    retry_policy = RetryPolicy.bounded(max_attempts) if max_attempts else RetryPolicy()
    result = deploy_and_wire_markets(
        markets, deployment_configuration, client, retry_policy=retry_policy
    )

    print_report(
        result,
        deployer=client.deployer_address,
        version=deployer_version,
    )
    if output_filepath:
        write_proposal(result.proposal, output_filepath)
        print(f"(i) Proposal written to {output_filepath}!")


if __name__ == "__main__":
    cli()
