import typing

import pytest
from eth_utils import to_checksum_address

from market_deployment.chain import ChainClient, PendingTransaction
from market_deployment.constants import UNLIMITED_BORROW_CAP
from market_deployment.environment import Environment
from market_deployment.models import DeploymentConfiguration, MarketConfiguration


def address(n: int) -> str:
    return to_checksum_address(n.to_bytes(20, "big"))


COMPTROLLER = address(0xC0)
TIMELOCK = address(0x71)
INTEREST_RATE_MODEL = address(0x12)
MERC20_IMPLEMENTATION = address(0x1E)
ORACLE = address(0x0A)
DEPLOYER = address(0xDE)
TOKEN = address(0x70)
CHAINLINK_FEED = address(0xFE)


class FakePendingTransaction(PendingTransaction):
    def __init__(self, txn_hash: str, fail_confirmations: bool = False):
        self._txn_hash = txn_hash
        self.fail_confirmations = fail_confirmations
        self.confirmations_awaited = []

    @property
    def txn_hash(self) -> str:
        return self._txn_hash

    def await_confirmations(self, required_confirmations: int) -> None:
        self.confirmations_awaited.append(required_confirmations)
        if self.fail_confirmations:
            raise TimeoutError("transaction dropped")


class FakeContract:
    def __init__(self, name: str, address: str):
        self.name = name
        self.address = address


class FakeChainClient(ChainClient):
    """
    Records every transaction. `failures` maps an operation name to the number
    of times it fails before succeeding.
    """

    def __init__(self, failures: typing.Dict[str, int] = None, balance: int = 10**19):
        self.failures = dict(failures or {})
        self.balance = balance
        self.transactions = []
        self.deployments = []
        self.pending = []
        self._nonce = 0

    def _next_hash(self) -> str:
        self._nonce += 1
        return "0x" + f"{self._nonce:064x}"

    @property
    def deployer_address(self):
        return DEPLOYER

    def at(self, contract_name, address):
        return FakeContract(contract_name, address)

    def transact(self, contract, operation_name, args):
        self.transactions.append((contract.address, operation_name, list(args)))
        if self.failures.get(operation_name, 0) > 0:
            self.failures[operation_name] -= 1
            raise ConnectionError(f"{operation_name} estimation failed")
        pending = FakePendingTransaction(self._next_hash())
        self.pending.append(pending)
        return pending

    def deploy(self, contract_name, args):
        self.deployments.append((contract_name, list(args)))
        contract_address = address(0x1000 + len(self.deployments))
        pending = FakePendingTransaction(self._next_hash())
        self.pending.append(pending)
        return contract_address, pending

    def token_details(self, token_address):
        return "USDC", 6

    def get_balance(self, address):
        return self.balance


@pytest.fixture
def environment():
    return Environment(
        name="moonbase",
        chain_id=1287,
        comptroller=COMPTROLLER,
        timelock=TIMELOCK,
        interest_rate_model=INTEREST_RATE_MODEL,
        merc20_implementation=MERC20_IMPLEMENTATION,
        oracle=ORACLE,
    )


@pytest.fixture
def deployment_configuration(environment):
    return DeploymentConfiguration(
        environment=environment,
        deployer=DEPLOYER,
        moonscan_api_url=None,
        required_confirmations=3,
        num_markets=1,
    )


@pytest.fixture
def market_configuration():
    return MarketConfiguration(
        token_address=TOKEN,
        chainlink_feed_address=CHAINLINK_FEED,
        token_symbol="USDC",
        token_decimals=6,
        mtoken_name="Moonwell USDC",
        mtoken_symbol="mUSDC",
        reserve_factor=15,
        protocol_seize_share=3,
        collateral_factor=0,
        borrow_cap=UNLIMITED_BORROW_CAP,
    )


@pytest.fixture
def client():
    return FakeChainClient()


@pytest.fixture
def no_sleep():
    """Records requested pauses instead of sleeping."""
    pauses = []
    return pauses, pauses.append
