from market_deployment.configure import MarketConfigurer
from market_deployment.transactor import TransactionSubmitter
from tests.conftest import TIMELOCK, FakeChainClient, address

MARKET = address(0x1001)


def _configurer(client, deployment_configuration, sleep):
    submitter = TransactionSubmitter(client, sleep=sleep)
    return MarketConfigurer(client, submitter, deployment_configuration)


def test_configure_market(client, deployment_configuration, market_configuration, no_sleep):
    _, sleep = no_sleep
    configurer = _configurer(client, deployment_configuration, sleep)

    result = configurer.configure(MARKET, market_configuration)

    assert client.transactions == [
        (MARKET, "_setReserveFactor", [150_000_000_000_000_000]),
        (MARKET, "_setProtocolSeizeShare", [30_000_000_000_000_000]),
        (MARKET, "_setPendingAdmin", [TIMELOCK]),
    ]
    assert result.hashes() == [pending.txn_hash for pending in client.pending]
    assert len(set(result.hashes())) == 3


def test_configure_waits_for_confirmations(
    client, deployment_configuration, market_configuration, no_sleep
):
    _, sleep = no_sleep
    configurer = _configurer(
        client, deployment_configuration._replace(required_confirmations=5), sleep
    )

    configurer.configure(MARKET, market_configuration)

    assert [pending.confirmations_awaited for pending in client.pending] == [[5], [5], [5]]


def test_configure_retries_each_step(deployment_configuration, market_configuration, no_sleep):
    pauses, sleep = no_sleep
    client = FakeChainClient(failures={"_setProtocolSeizeShare": 2, "_setPendingAdmin": 1})
    configurer = _configurer(client, deployment_configuration, sleep)

    result = configurer.configure(MARKET, market_configuration)

    operations = [operation for _, operation, _ in client.transactions]
    assert operations == [
        "_setReserveFactor",
        "_setProtocolSeizeShare",
        "_setProtocolSeizeShare",
        "_setProtocolSeizeShare",
        "_setPendingAdmin",
        "_setPendingAdmin",
    ]
    assert len(pauses) == 3
    assert result.set_pending_admin_hash == client.pending[-1].txn_hash
