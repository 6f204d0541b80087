import json
from pathlib import Path

import yaml

from market_deployment.constants import PERCENT_MANTISSA


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def percent_to_mantissa(percentage: int) -> int:
    """Scales a whole-number percentage to an 18 decimal fixed point mantissa."""
    return int(percentage) * PERCENT_MANTISSA


def to_token_units(amount: int, decimals: int) -> int:
    """Scales a whole-token amount by the token's decimals."""
    return int(amount) * 10**decimals


def initial_exchange_rate_mantissa(token_decimals: int) -> int:
    """Initial mToken exchange rate: 0.02 underlying per mToken, scaled for both decimals."""
    return 2 * 10 ** (token_decimals + 8)
