import json
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

from market_deployment.confirm import print_market_configuration
from market_deployment.models import MarketsDeployResult, ProposalData

DISTRIBUTION_NAME = "moonwell-market-deployer"

STANDARD_PROPOSAL_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


def _print_header(message: str) -> None:
    print(f"\n[+] {message}\n")


def resolve_version(distribution: str = DISTRIBUTION_NAME) -> Optional[str]:
    """Version of the installed distribution, or None when running from a checkout."""
    try:
        return version(distribution)
    except PackageNotFoundError:
        return None


def check_output_filepath(output_filepath: Optional[Path]) -> None:
    """Refuses an output path that would be overwritten, before anything is deployed."""
    if output_filepath and output_filepath.exists():
        raise FileExistsError(f"Proposal file already exists at {output_filepath}")


def proposal_to_json(proposal: ProposalData) -> str:
    return json.dumps(proposal.to_dict(), **STANDARD_PROPOSAL_JSON_FORMAT)


def write_proposal(proposal: ProposalData, output_filepath: Path) -> Path:
    """Writes the merged governance proposal to a JSON file."""
    check_output_filepath(output_filepath)
    output_filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(output_filepath, "w") as file:
        file.write(proposal_to_json(proposal))
    return output_filepath


def print_report(
    result: MarketsDeployResult, deployer: str, version: Optional[str] = None
) -> None:
    num_markets = len(result.deploy_results)
    plural = "markets are" if num_markets > 1 else "market is"
    _print_header(f"Congratulations! The new {plural} deployed and configured")
    print("You should retain the below output for use when submitting a governance proposal")

    _print_header("Metadata")
    if version:
        print(f"Market Deployer Version: {version}")
    print(f"Deployer: {deployer}")

    artifacts = zip(
        result.market_configurations, result.deploy_results, result.configure_market_results
    )
    for index, (market_configuration, deploy_result, configure_result) in enumerate(
        artifacts, start=1
    ):
        _print_header(f"Market {index} Configuration")
        print_market_configuration(market_configuration)

        _print_header(f"Artifacts of Deploy Operation {index}")
        print(
            f"Market Address: {deploy_result.contract_address} "
            f"(Deployed in hash {deploy_result.transaction_hash})",
            f"Set Reserve Factor Operation: {configure_result.set_reserve_factor_hash}",
            f"Set Protocol Seize Share Operation: {configure_result.set_protocol_seize_share_hash}",
            f"Set Pending Admin Operation: {configure_result.set_pending_admin_hash}",
            sep="\n",
        )

    _print_header("Governance Proposal to Submit")
    print(proposal_to_json(result.proposal))

    _print_header("Next Steps")
    print(
        "Submit the proposal above to governance, including the configuration and "
        "artifacts of the deploy operation in the proposal description.",
        "Once executed, the timelock must accept admin of each market (_acceptAdmin).",
        sep="\n",
    )
