import json

import pytest

from market_deployment.models import (
    ConfigureMarketResult,
    DeployResult,
    MarketsDeployResult,
)
from market_deployment.proposal import ProposalBuilder
from market_deployment.report import (
    check_output_filepath,
    print_report,
    proposal_to_json,
    resolve_version,
    write_proposal,
)
from tests.conftest import DEPLOYER, address

MARKET = address(0x1001)


@pytest.fixture
def result(environment, market_configuration):
    return MarketsDeployResult(
        proposal=ProposalBuilder(environment).build(MARKET, market_configuration),
        market_configurations=(market_configuration,),
        deploy_results=(DeployResult(contract_address=MARKET, transaction_hash="0xd0"),),
        configure_market_results=(ConfigureMarketResult("0xa1", "0xa2", "0xa3"),),
    )


def test_proposal_to_json(result):
    data = json.loads(proposal_to_json(result.proposal))
    assert data == result.proposal.to_dict()
    assert len(data["callDatas"]) == len(data["targets"])


def test_write_proposal(tmp_path, result):
    filepath = tmp_path / "proposals" / "mUSDC.json"
    assert write_proposal(result.proposal, filepath) == filepath
    assert json.loads(filepath.read_text())["signatures"] == list(result.proposal.signatures)


def test_write_proposal_does_not_overwrite(tmp_path, result):
    filepath = tmp_path / "proposal.json"
    filepath.write_text("{}")
    with pytest.raises(FileExistsError):
        write_proposal(result.proposal, filepath)
    assert filepath.read_text() == "{}"


def test_existing_output_is_refused_up_front(tmp_path):
    check_output_filepath(None)
    check_output_filepath(tmp_path / "new.json")

    existing = tmp_path / "existing.json"
    existing.write_text("{}")
    with pytest.raises(FileExistsError):
        check_output_filepath(existing)


def test_version_of_uninstalled_distribution():
    assert resolve_version("moonwell-market-deployer-not-installed") is None


def test_version_of_installed_distribution():
    assert resolve_version("pytest")


def test_print_report_without_version(result, capsys):
    print_report(result, deployer=DEPLOYER, version=None)
    output = capsys.readouterr().out
    assert "Market Deployer Version" not in output
    assert proposal_to_json(result.proposal) in output


def test_print_report(result, capsys):
    print_report(result, deployer=DEPLOYER, version="0.1.0")
    output = capsys.readouterr().out

    assert "The new market is deployed and configured" in output
    assert "Market Deployer Version: 0.1.0" in output
    assert f"Deployer: {DEPLOYER}" in output
    assert f"Market Address: {MARKET} (Deployed in hash 0xd0)" in output
    assert "Set Pending Admin Operation: 0xa3" in output
    assert "Borrow Cap: unlimited" in output
    assert proposal_to_json(result.proposal) in output
