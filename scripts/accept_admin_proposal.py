from pathlib import Path

import click

from market_deployment.proposal import ProposalBuilder, merge_proposals
from market_deployment.report import proposal_to_json, write_proposal
from market_deployment.types import ChecksumAddress


@click.command()
@click.option(
    "--market",
    "-m",
    "market_addresses",
    help="Address of a market whose pending admin is the timelock",
    type=ChecksumAddress(),
    required=True,
    multiple=True,
)
@click.option(
    "--output",
    "-o",
    "output_filepath",
    help="Write the proposal to this JSON file",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)
def cli(market_addresses, output_filepath):
    """Builds the proposal through which the timelock accepts admin of deployed markets."""
    proposal = merge_proposals(ProposalBuilder.accept_admin(address) for address in market_addresses)
    if output_filepath:
        write_proposal(proposal, output_filepath)
        print(f"(i) Proposal written to {output_filepath}!")
    else:
        print(proposal_to_json(proposal))


if __name__ == "__main__":
    cli()
