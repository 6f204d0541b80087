"""
The capabilities the deployment needs from a chain, kept abstract so
deployment, configuration and proposal building can run against any client.
"""

import typing
from abc import ABC, abstractmethod
from typing import Any, Sequence

from eth_typing import ChecksumAddress


class PendingTransaction(ABC):
    """A broadcast transaction which may not yet have the required confirmation depth."""

    @property
    @abstractmethod
    def txn_hash(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def await_confirmations(self, required_confirmations: int) -> None:
        """Blocks until the transaction has `required_confirmations` block confirmations."""
        raise NotImplementedError


class ChainClient(ABC):
    """Signs and sends transactions on behalf of the deployer."""

    @property
    @abstractmethod
    def deployer_address(self) -> ChecksumAddress:
        raise NotImplementedError

    @abstractmethod
    def at(self, contract_name: str, address: ChecksumAddress) -> Any:
        """Returns a handle to a deployed contract whose functions can be called by name."""
        raise NotImplementedError

    @abstractmethod
    def transact(
        self, contract: Any, operation_name: str, args: Sequence[Any]
    ) -> PendingTransaction:
        """Sends `contract.<operation_name>(*args)` and returns without waiting for confirmations."""
        raise NotImplementedError

    @abstractmethod
    def deploy(
        self, contract_name: str, args: Sequence[Any]
    ) -> typing.Tuple[ChecksumAddress, PendingTransaction]:
        """Sends a contract creation transaction and returns the new contract's address."""
        raise NotImplementedError

    @abstractmethod
    def token_details(self, token_address: ChecksumAddress) -> typing.Tuple[str, int]:
        """Reads the ERC-20 symbol and decimals of a token."""
        raise NotImplementedError

    @abstractmethod
    def get_balance(self, address: ChecksumAddress) -> int:
        raise NotImplementedError
