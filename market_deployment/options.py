import typing
from pathlib import Path

import click

from market_deployment.constants import DEPLOYER_ACCOUNT_ENVVAR, REQUIRED_CONFIRMATIONS
from market_deployment.types import MinInt

params_option = click.option(
    "--params",
    "-p",
    "params_filepath",
    help="YAML params file describing the environment and, optionally, the markets",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

num_markets_option = click.option(
    "--num-markets",
    "-n",
    help="The number of markets to prompt for (default: 1), or to expect in the params file",
    type=MinInt(1),
    default=None,
)

account_option = click.option(
    "--account",
    "-a",
    help="Alias of the ape account that signs the deployment",
    type=click.STRING,
    envvar=DEPLOYER_ACCOUNT_ENVVAR,
    required=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions automatically",
    is_flag=True,
    default=False,
)

confirmations_option = click.option(
    "--confirmations",
    "-c",
    "required_confirmations",
    help="Block confirmations to wait for after every transaction",
    type=MinInt(0),
    default=REQUIRED_CONFIRMATIONS,
)

max_attempts_option = click.option(
    "--max-attempts",
    help="Give up on an operation after this many attempts (default: retry forever)",
    type=MinInt(1),
    default=None,
)

output_option = click.option(
    "--output",
    "-o",
    "output_filepath",
    help="Write the merged governance proposal to this JSON file",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)


def resolve_num_markets(markets: typing.Sequence, num_markets: typing.Optional[int]) -> int:
    """Markets listed in the params file take precedence; an explicit count must not conflict."""
    if not markets:
        return num_markets or 1
    if num_markets is not None and num_markets != len(markets):
        raise click.BadParameter(
            f"the params file lists {len(markets)} market(s), but {num_markets} were requested",
            param_hint="--num-markets",
        )
    return len(markets)
