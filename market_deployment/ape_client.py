import logging
import time
import typing
from typing import Any, Sequence

from ape import Contract, chain, networks, project
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts import ContractContainer
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from market_deployment.chain import ChainClient, PendingTransaction
from market_deployment.constants import LOCAL_NETWORKS

logger = logging.getLogger(__name__)

ERC20_METADATA_ABI = [
    {
        "type": "function",
        "name": "symbol",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "decimals",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
]


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_NETWORKS


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


class ApeTransaction(PendingTransaction):
    """Wraps an ape receipt; confirmation depth is observed by polling the chain head."""

    def __init__(self, receipt: ReceiptAPI, poll_interval: typing.Optional[float] = None):
        self._receipt = receipt
        if poll_interval is None:
            poll_interval = networks.provider.network.block_time or 1
        self._poll_interval = poll_interval

    @property
    def txn_hash(self) -> str:
        txn_hash = self._receipt.txn_hash
        return txn_hash if isinstance(txn_hash, str) else txn_hash.hex()

    def await_confirmations(self, required_confirmations: int) -> None:
        if required_confirmations <= 0:
            return
        # a receipt mined at block b has (head - b + 1) confirmations
        target_height = self._receipt.block_number + required_confirmations - 1
        while chain.blocks.height < target_height:
            time.sleep(self._poll_interval)


class ApeChainClient(ChainClient):
    """
    Binds the deployment to an ape account on the connected network.
    """

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            account = select_account()
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        account.set_autosign(autosign)
        self._account = account

    @property
    def account(self) -> AccountAPI:
        return self._account

    @property
    def deployer_address(self) -> ChecksumAddress:
        return to_checksum_address(self._account.address)

    def at(self, contract_name: str, address: ChecksumAddress) -> Any:
        return get_contract_container(contract_name).at(address)

    def transact(
        self, contract: Any, operation_name: str, args: Sequence[Any]
    ) -> PendingTransaction:
        method = getattr(contract, operation_name)
        # confirmation depth is awaited separately
        receipt = method(*args, sender=self._account, required_confirmations=0)
        return ApeTransaction(receipt)

    def deploy(
        self, contract_name: str, args: Sequence[Any]
    ) -> typing.Tuple[ChecksumAddress, PendingTransaction]:
        container = get_contract_container(contract_name)
        instance = self._account.deploy(container, *args, required_confirmations=0)
        return to_checksum_address(instance.address), ApeTransaction(instance.receipt)

    def token_details(self, token_address: ChecksumAddress) -> typing.Tuple[str, int]:
        token = Contract(token_address, abi=ERC20_METADATA_ABI)
        return token.symbol(), int(token.decimals())

    def get_balance(self, address: ChecksumAddress) -> int:
        return networks.provider.get_balance(address)

    def describe(self) -> None:
        print(
            f"Account: {self._account.address}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
