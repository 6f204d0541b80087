import logging
from typing import Optional

import click

from market_deployment.chain import ChainClient
from market_deployment.constants import (
    DEFAULT_PROTOCOL_SEIZE_SHARE,
    MTOKEN_NAME_PREFIX,
    MTOKEN_SYMBOL_PREFIX,
    UNLIMITED_BORROW_CAP,
)
from market_deployment.models import MarketConfiguration
from market_deployment.types import ChecksumAddress, MinInt, Percentage, PrefixedString

logger = logging.getLogger(__name__)


def _continue() -> None:
    """Asks the user to continue."""
    if not click.confirm("Continue?", default=True):
        print("Aborting deployment!")
        exit(-1)


def print_market_configuration(config: MarketConfiguration) -> None:
    print(
        "    Collateral Parameters:",
        f"        Token Address: {config.token_address}",
        f"        Token Symbol: {config.token_symbol}",
        f"        Token Decimals: {config.token_decimals}",
        "    Oracle Parameters:",
        f"        Chainlink Feed Address: {config.chainlink_feed_address}",
        "    Market Parameters:",
        f"        mToken Name: {config.mtoken_name}",
        f"        mToken Symbol: {config.mtoken_symbol}",
        "    Economic Parameters:",
        f"        Reserve Factor: {config.reserve_factor}%",
        f"        Protocol Seize Share: {config.protocol_seize_share}%",
        f"        Collateral Factor: {config.collateral_factor}%",
        f"        Borrow Cap: {config.borrow_cap if config.has_borrow_cap else 'unlimited'}",
        sep="\n",
    )


def _confirm_market_configuration(config: MarketConfiguration) -> bool:
    """Asks the user to confirm the market configuration before it is deployed."""
    print("\nMarket Configuration")
    print_market_configuration(config)
    return click.confirm("Is the above configuration correct?", default=False)


def _read_market_configuration(client: ChainClient) -> Optional[MarketConfiguration]:
    token_address = click.prompt(
        "What is the address of the ERC-20 token to deploy a market for?",
        type=ChecksumAddress(),
    )

    print("Loading additional token details from the blockchain...")
    try:
        token_symbol, token_decimals = client.token_details(token_address)
    except Exception as e:
        print(
            f"Unable to read token details from {token_address}. "
            "Are you sure that you entered a valid ERC-20 token address?"
        )
        logger.debug("Caught error trying to read token details: %r", e)
        return None
    print(f"Loaded token symbol as: {token_symbol}")
    print(f"Loaded token decimals as: {token_decimals}")

    mtoken_name = click.prompt(
        f"What should the name of the market's token be? (e.g. '{MTOKEN_NAME_PREFIX} FRAX')",
        type=PrefixedString(MTOKEN_NAME_PREFIX),
    )
    mtoken_symbol = click.prompt(
        f"What should the symbol of the market's token be? (e.g. '{MTOKEN_SYMBOL_PREFIX}FRAX')",
        type=PrefixedString(MTOKEN_SYMBOL_PREFIX),
    )
    chainlink_feed_address = click.prompt(
        "What is the address of the Chainlink feed for the token?", type=ChecksumAddress()
    )
    reserve_factor = click.prompt(
        "What is the reserve factor of the new market, as a percentage?", type=Percentage()
    )
    collateral_factor = click.prompt(
        "What is the collateral factor of the new market, as a percentage?",
        type=Percentage(),
        default=0,
    )
    borrow_cap = click.prompt(
        "What is the borrow cap of the new market, in whole tokens? (-1 for unlimited)",
        type=MinInt(UNLIMITED_BORROW_CAP),
        default=UNLIMITED_BORROW_CAP,
    )

    return MarketConfiguration(
        token_address=token_address,
        chainlink_feed_address=chainlink_feed_address,
        token_symbol=token_symbol,
        token_decimals=token_decimals,
        mtoken_name=mtoken_name,
        mtoken_symbol=mtoken_symbol,
        reserve_factor=reserve_factor,
        protocol_seize_share=DEFAULT_PROTOCOL_SEIZE_SHARE,
        collateral_factor=collateral_factor,
        borrow_cap=borrow_cap,
    )


def prompt_market_configuration(client: ChainClient) -> MarketConfiguration:
    """Prompts for a market configuration until the user confirms one."""
    while True:
        print("\nWe will now prompt you about market configuration")
        config = _read_market_configuration(client)
        if config is not None and _confirm_market_configuration(config):
            print("Market Configuration Set!")
            return config
        print("Aborting market configuration. Please try again!")
