import typing
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from market_deployment.constants import (
    DEFAULT_PROTOCOL_SEIZE_SHARE,
    MTOKEN_NAME_PREFIX,
    MTOKEN_SYMBOL_PREFIX,
    REQUIRED_CONFIRMATIONS,
    UNLIMITED_BORROW_CAP,
)

if TYPE_CHECKING:
    from market_deployment.environment import Environment


def _checksum(value: Any, field: str) -> ChecksumAddress:
    if not isinstance(value, str) or not is_address(value):
        raise MarketConfiguration.Invalid(f"'{field}' is not a valid address: {value!r}")
    return to_checksum_address(value)


def _integer(value: Any, field: str) -> int:
    # floats and booleans are rejected rather than truncated
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise MarketConfiguration.Invalid(f"'{field}' must be a whole number, got {value!r}")


def _percentage(value: Any, field: str) -> int:
    percentage = _integer(value, field)
    if not 0 <= percentage <= 100:
        raise MarketConfiguration.Invalid(f"'{field}' must be between 0 and 100, got {percentage}")
    return percentage


class MarketConfiguration(NamedTuple):
    """Configuration of a single market, collected before deployment."""

    class Invalid(ValueError):
        """Raised when a market configuration fails validation"""

    token_address: ChecksumAddress
    chainlink_feed_address: ChecksumAddress
    token_symbol: str
    token_decimals: int
    mtoken_name: str
    mtoken_symbol: str

    # whole-number percentages, e.g. 15 is stored on chain as 150_000_000_000_000_000
    reserve_factor: int
    protocol_seize_share: int
    collateral_factor: int

    # whole token units, or UNLIMITED_BORROW_CAP
    borrow_cap: int = UNLIMITED_BORROW_CAP

    @property
    def has_borrow_cap(self) -> bool:
        return self.borrow_cap != UNLIMITED_BORROW_CAP

    @classmethod
    def from_dict(cls, data: typing.Dict[str, Any]) -> "MarketConfiguration":
        """Builds a validated configuration from a params file entry."""
        missing = [
            field
            for field in (
                "token_address",
                "chainlink_feed_address",
                "token_symbol",
                "token_decimals",
                "mtoken_name",
                "mtoken_symbol",
                "reserve_factor",
                "collateral_factor",
            )
            if field not in data
        ]
        if missing:
            raise cls.Invalid(f"Market configuration is missing: {', '.join(missing)}")

        token_decimals = _integer(data["token_decimals"], "token_decimals")
        if not 0 <= token_decimals <= 255:
            raise cls.Invalid(f"'token_decimals' must fit in a uint8, got {token_decimals}")

        mtoken_name = str(data["mtoken_name"])
        if not mtoken_name.startswith(MTOKEN_NAME_PREFIX):
            raise cls.Invalid(f"mToken name '{mtoken_name}' must start with '{MTOKEN_NAME_PREFIX}'")
        mtoken_symbol = str(data["mtoken_symbol"])
        if not mtoken_symbol.startswith(MTOKEN_SYMBOL_PREFIX):
            raise cls.Invalid(
                f"mToken symbol '{mtoken_symbol}' must start with '{MTOKEN_SYMBOL_PREFIX}'"
            )

        borrow_cap = data.get("borrow_cap")
        if borrow_cap is None:
            borrow_cap = UNLIMITED_BORROW_CAP
        borrow_cap = _integer(borrow_cap, "borrow_cap")
        if borrow_cap < 0 and borrow_cap != UNLIMITED_BORROW_CAP:
            raise cls.Invalid(f"'borrow_cap' must be positive or unlimited, got {borrow_cap}")

        return cls(
            token_address=_checksum(data["token_address"], "token_address"),
            chainlink_feed_address=_checksum(
                data["chainlink_feed_address"], "chainlink_feed_address"
            ),
            token_symbol=str(data["token_symbol"]),
            token_decimals=token_decimals,
            mtoken_name=mtoken_name,
            mtoken_symbol=mtoken_symbol,
            reserve_factor=_percentage(data["reserve_factor"], "reserve_factor"),
            protocol_seize_share=_percentage(
                data.get("protocol_seize_share", DEFAULT_PROTOCOL_SEIZE_SHARE),
                "protocol_seize_share",
            ),
            collateral_factor=_percentage(data["collateral_factor"], "collateral_factor"),
            borrow_cap=borrow_cap,
        )


class DeploymentConfiguration(NamedTuple):
    """Configuration shared by every market deployed in one run."""

    environment: "Environment"
    deployer: Any
    moonscan_api_url: Optional[str] = None
    moonscan_api_key: Optional[str] = None
    required_confirmations: int = REQUIRED_CONFIRMATIONS
    num_markets: int = 1

    def validate(self) -> "DeploymentConfiguration":
        if self.required_confirmations < 0:
            raise ValueError(
                f"required_confirmations must be >= 0, got {self.required_confirmations}"
            )
        if self.num_markets < 1:
            raise ValueError(f"num_markets must be >= 1, got {self.num_markets}")
        return self


class DeployResult(NamedTuple):
    contract_address: ChecksumAddress
    transaction_hash: str


class ConfigureMarketResult(NamedTuple):
    set_reserve_factor_hash: str
    set_protocol_seize_share_hash: str
    set_pending_admin_hash: str

    def hashes(self) -> List[str]:
        return list(self)


class VerificationResult(NamedTuple):
    verified: bool
    status_code: Optional[int] = None
    detail: str = ""


class ProposalEntry(NamedTuple):
    target: ChecksumAddress
    value: int
    signature: str
    calldata: str


class ProposalData(NamedTuple):
    """
    Governance proposal as four parallel sequences, the shape consumed by
    the governor's `propose` call. Call data carries the ABI encoded
    arguments only; the executor derives the selector from the signature.
    """

    targets: Tuple[ChecksumAddress, ...]
    values: Tuple[int, ...]
    signatures: Tuple[str, ...]
    calldatas: Tuple[str, ...]

    @classmethod
    def create(cls, targets, values, signatures, calldatas) -> "ProposalData":
        proposal = cls(tuple(targets), tuple(values), tuple(signatures), tuple(calldatas))
        lengths = {len(field) for field in proposal}
        if len(lengths) != 1:
            raise ValueError(
                "Proposal arrays must have equal length - got "
                f"targets={len(proposal.targets)}, values={len(proposal.values)}, "
                f"signatures={len(proposal.signatures)}, calldatas={len(proposal.calldatas)}"
            )
        return proposal

    @classmethod
    def empty(cls) -> "ProposalData":
        return cls((), (), (), ())

    @classmethod
    def from_entries(cls, entries: typing.Iterable[ProposalEntry]) -> "ProposalData":
        entries = list(entries)
        if not entries:
            return cls.empty()
        targets, values, signatures, calldatas = zip(*entries)
        return cls.create(targets, values, signatures, calldatas)

    def entries(self) -> Iterator[ProposalEntry]:
        for entry in zip(self.targets, self.values, self.signatures, self.calldatas):
            yield ProposalEntry(*entry)

    @property
    def size(self) -> int:
        return len(self.targets)

    def to_dict(self) -> Dict[str, list]:
        return {
            "targets": list(self.targets),
            "values": list(self.values),
            "signatures": list(self.signatures),
            "callDatas": list(self.calldatas),
        }


class MarketsDeployResult(NamedTuple):
    """Everything produced by a run, index aligned per market."""

    proposal: ProposalData
    market_configurations: Tuple[MarketConfiguration, ...]
    deploy_results: Tuple[DeployResult, ...]
    configure_market_results: Tuple[ConfigureMarketResult, ...]
