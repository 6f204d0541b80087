"""
Governance proposal construction.

Every governance action is stored as a (target, value, signature, calldata)
entry. The calldata is the ABI encoded argument tuple *without* the 4-byte
selector: the governor's executor re-derives the selector from the signature
and prepends it at execution time.
"""

import logging
import typing
from typing import Any, List, Sequence

from eth_abi import encode
from eth_typing import ChecksumAddress
from eth_utils import function_signature_to_4byte_selector, to_hex

from market_deployment.constants import (
    ACCEPT_ADMIN_SIGNATURE,
    REWARD_BORROW_SPEED,
    REWARD_SUPPLY_SPEED,
    REWARD_TYPES,
    SET_COLLATERAL_FACTOR_SIGNATURE,
    SET_FEED_SIGNATURE,
    SET_MARKET_BORROW_CAPS_SIGNATURE,
    SET_PROTOCOL_SEIZE_SHARE_SIGNATURE,
    SET_RESERVE_FACTOR_SIGNATURE,
    SET_REWARD_SPEED_SIGNATURE,
    SUPPORT_MARKET_SIGNATURE,
)
from market_deployment.environment import Environment
from market_deployment.models import MarketConfiguration, ProposalData
from market_deployment.utils import percent_to_mantissa, to_token_units

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def _argument_types(signature: str) -> List[str]:
    """Splits 'name(type1,type2)' into its ABI argument types."""
    arguments = signature[signature.index("(") + 1 : signature.rindex(")")]
    if not arguments:
        return []
    # none of the governance signatures take tuple arguments
    return arguments.split(",")


def encode_call(signature: str, args: Sequence[Any]) -> bytes:
    """Returns the full call payload: 4-byte selector followed by the encoded arguments."""
    selector = function_signature_to_4byte_selector(signature)
    return selector + encode(_argument_types(signature), list(args))


def strip_selector(payload: bytes) -> str:
    """Drops the selector from an encoded call, returning the arguments as 0x-prefixed hex."""
    if len(payload) < SELECTOR_SIZE:
        raise ValueError(f"Encoded call is shorter than a selector: {to_hex(payload)}")
    return to_hex(payload[SELECTOR_SIZE:])


def encode_proposal_action(
    target: ChecksumAddress, signature: str, args: Sequence[Any]
) -> ProposalData:
    """Encodes a single governance action as a one-entry proposal."""
    calldata = strip_selector(encode_call(signature, args))
    return ProposalData.create(
        targets=[target], values=[0], signatures=[signature], calldatas=[calldata]
    )


def merge_proposals(proposals: typing.Iterable[ProposalData]) -> ProposalData:
    """Concatenates proposals into one, preserving the order of every entry."""
    targets, values, signatures, calldatas = [], [], [], []
    for proposal in proposals:
        targets.extend(proposal.targets)
        values.extend(proposal.values)
        signatures.extend(proposal.signatures)
        calldatas.extend(proposal.calldatas)
    return ProposalData.create(targets, values, signatures, calldatas)


class ProposalBuilder:
    """Builds the governance proposal that lists a newly deployed market."""

    def __init__(self, environment: Environment):
        self.environment = environment

    def sub_proposals(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> List[ProposalData]:
        """One proposal per listing step, in the order governance executes them."""
        proposals = [
            self.configure_chainlink_feed(market_configuration),
            self.support_market(market_address),
            self.set_reserve_factor(market_address, market_configuration),
            self.set_protocol_seize_share(market_address, market_configuration),
            self.set_collateral_factor(market_address, market_configuration),
            self.set_reward_emissions(market_address),
        ]

        # only add a borrow cap if one was asked for
        if market_configuration.has_borrow_cap:
            proposals.append(self.set_borrow_cap(market_address, market_configuration))
        return proposals

    def build(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ProposalData:
        proposal = merge_proposals(self.sub_proposals(market_address, market_configuration))
        logger.info(
            "Generated governance proposal with %d actions for market %s",
            proposal.size,
            market_address,
        )
        return proposal

    def configure_chainlink_feed(self, market_configuration: MarketConfiguration) -> ProposalData:
        return encode_proposal_action(
            self.environment.oracle,
            SET_FEED_SIGNATURE,
            [market_configuration.token_symbol, market_configuration.chainlink_feed_address],
        )

    def support_market(self, market_address: ChecksumAddress) -> ProposalData:
        return encode_proposal_action(
            self.environment.comptroller, SUPPORT_MARKET_SIGNATURE, [market_address]
        )

    def set_reserve_factor(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ProposalData:
        reserve_factor = percent_to_mantissa(market_configuration.reserve_factor)
        return encode_proposal_action(
            market_address, SET_RESERVE_FACTOR_SIGNATURE, [reserve_factor]
        )

    def set_protocol_seize_share(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ProposalData:
        protocol_seize_share = percent_to_mantissa(market_configuration.protocol_seize_share)
        return encode_proposal_action(
            market_address, SET_PROTOCOL_SEIZE_SHARE_SIGNATURE, [protocol_seize_share]
        )

    def set_collateral_factor(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ProposalData:
        collateral_factor = percent_to_mantissa(market_configuration.collateral_factor)
        return encode_proposal_action(
            self.environment.comptroller,
            SET_COLLATERAL_FACTOR_SIGNATURE,
            [market_address, collateral_factor],
        )

    def set_reward_emissions(self, market_address: ChecksumAddress) -> ProposalData:
        """Starts emissions at supply speed 0 and borrow speed 1 for every reward token."""
        return merge_proposals(
            encode_proposal_action(
                self.environment.comptroller,
                SET_REWARD_SPEED_SIGNATURE,
                [reward_type, market_address, REWARD_SUPPLY_SPEED, REWARD_BORROW_SPEED],
            )
            for reward_type in REWARD_TYPES
        )

    def set_borrow_cap(
        self, market_address: ChecksumAddress, market_configuration: MarketConfiguration
    ) -> ProposalData:
        borrow_cap = to_token_units(
            market_configuration.borrow_cap, market_configuration.token_decimals
        )
        return encode_proposal_action(
            self.environment.comptroller,
            SET_MARKET_BORROW_CAPS_SIGNATURE,
            [[market_address], [borrow_cap]],
        )

    @staticmethod
    def accept_admin(market_address: ChecksumAddress) -> ProposalData:
        """Completes the admin handover to the timelock; not part of the listing proposal."""
        return encode_proposal_action(market_address, ACCEPT_ADMIN_SIGNATURE, [])
