import logging
import time
import typing
from typing import Any, Callable, Optional, Sequence

from market_deployment.chain import ChainClient, PendingTransaction
from market_deployment.constants import RETRY_DELAY_SECONDS

logger = logging.getLogger(__name__)


class TransactionFailed(Exception):
    """Raised when a bounded retry policy runs out of attempts."""

    def __init__(self, operation_name: str, attempts: int, error: Exception):
        self.operation_name = operation_name
        self.attempts = attempts
        self.error = error
        super().__init__(f"'{operation_name}' failed after {attempts} attempt(s): {error}")


class RetryPolicy(typing.NamedTuple):
    """
    How a failed operation is retried: a fixed pause between attempts and an
    optional ceiling. Without a ceiling the operation is retried until it succeeds.
    """

    delay: float = RETRY_DELAY_SECONDS
    max_attempts: Optional[int] = None

    @classmethod
    def bounded(cls, max_attempts: int, delay: float = RETRY_DELAY_SECONDS) -> "RetryPolicy":
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        return cls(delay=delay, max_attempts=max_attempts)

    def should_retry(self, attempt: int) -> bool:
        return self.max_attempts is None or attempt < self.max_attempts


def wait_for_confirmations(pending: PendingTransaction, required_confirmations: int) -> None:
    logger.info("Waiting for %d confirmations...", required_confirmations)
    pending.await_confirmations(required_confirmations)
    logger.info("Confirmations received!")


def _describe_call(contract: Any, operation_name: str, args: Sequence[Any]) -> str:
    address = getattr(contract, "address", "?")
    base_message = f"Transacting [{str(address)[:10]}].{operation_name}"
    if args:
        pretty_args = "\n\t".join(str(arg) for arg in args)
        return f"{base_message} with arguments:\n\t{pretty_args}"
    return f"{base_message} with no arguments"


class TransactionSubmitter:
    """
    Sends named contract operations, retrying on any failure and waiting
    for the required confirmation depth before reporting the hash.
    """

    def __init__(
        self,
        client: ChainClient,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def submit(
        self,
        contract: Any,
        operation_name: str,
        args: Sequence[Any],
        required_confirmations: int,
    ) -> str:
        args = list(args)
        logger.debug(_describe_call(contract, operation_name, args))

        attempt = 0
        while True:
            attempt += 1
            try:
                pending = self.client.transact(contract, operation_name, args)
                logger.info("Operation %s sent with hash: %s", operation_name, pending.txn_hash)
                wait_for_confirmations(pending, required_confirmations)
                return pending.txn_hash
            except Exception as e:
                if not self.retry_policy.should_retry(attempt):
                    logger.info(
                        "Error sending operation %s. Giving up after %d attempt(s).",
                        operation_name,
                        attempt,
                    )
                    raise TransactionFailed(operation_name, attempt, e) from e
                logger.info(
                    "Error sending operation %s. Retrying after %ss...",
                    operation_name,
                    self.retry_policy.delay,
                )
                logger.debug("Error: %r", e)
                self._sleep(self.retry_policy.delay)
