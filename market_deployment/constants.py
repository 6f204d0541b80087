#
# Environment variables
#

DEPLOYER_ACCOUNT_ENVVAR = "MARKET_DEPLOYER_ACCOUNT"
MOONSCAN_API_KEY_ENVVAR = "MOONSCAN_API_KEY"
LOGLEVEL_ENVVAR = "MARKET_DEPLOYER_LOGLEVEL"

#
# Environments
#

MOONBASE = "moonbase"
MOONBEAM = "moonbeam"
MOONRIVER = "moonriver"

DEFAULT_RPC_URLS = {
    MOONBASE: "https://rpc.api.moonbase.moonbeam.network",
    MOONBEAM: "https://rpc.api.moonbeam.network",
    MOONRIVER: "https://rpc.moonriver.moonbeam.network",
}

MOONSCAN_API_URLS = {
    MOONBASE: "https://api-moonbase.moonscan.io/api",
    MOONBEAM: "https://api-moonbeam.moonscan.io/api",
    MOONRIVER: "https://api-moonriver.moonscan.io/api",
}

NATIVE_TOKEN_SYMBOLS = {
    MOONBASE: "DEV",
    MOONBEAM: "GLMR",
    MOONRIVER: "MOVR",
}

LOCAL_NETWORKS = ["local"]

#
# Transactions
#

REQUIRED_CONFIRMATIONS = 3

# seconds to pause between attempts of a failed operation
RETRY_DELAY_SECONDS = 30

# 1 native unit, in wei
MIN_REQUIRED_BALANCE = 10**18

#
# Market parameters
#

MTOKEN_CONTRACT_NAME = "MErc20Delegator"
MTOKEN_DECIMALS = 8
MTOKEN_NAME_PREFIX = "Moonwell"
MTOKEN_SYMBOL_PREFIX = "m"

# whole-number percent -> 18 decimal mantissa
PERCENT_MANTISSA = 10**16

DEFAULT_PROTOCOL_SEIZE_SHARE = 3

UNLIMITED_BORROW_CAP = -1

# empty initialization payload for the delegator's implementation
EMPTY_BECOME_IMPLEMENTATION_DATA = b"\x00"


class RewardType:
    GOVERNANCE = 0
    NATIVE = 1


REWARD_TYPES = (RewardType.GOVERNANCE, RewardType.NATIVE)
REWARD_SUPPLY_SPEED = 0
REWARD_BORROW_SPEED = 1

#
# Source verification
#

VERIFICATION_CODE_FORMAT = "solidity-standard-json-input"
VERIFICATION_CONTRACT_NAME = "MErc20Delegator.sol:MErc20Delegator"
VERIFICATION_COMPILER_VERSION = "v0.5.7+commit.6da8b019"
VERIFICATION_OPTIMIZER_RUNS = 200

MTOKEN_CONSTRUCTOR_ABI_TYPES = [
    "address",  # underlying
    "address",  # comptroller
    "address",  # interestRateModel
    "uint256",  # initialExchangeRateMantissa
    "string",  # name
    "string",  # symbol
    "uint8",  # decimals
    "address",  # admin
    "address",  # implementation
    "bytes",  # becomeImplementationData
]

#
# Governance proposal signatures
#

SET_FEED_SIGNATURE = "setFeed(string,address)"
SUPPORT_MARKET_SIGNATURE = "_supportMarket(address)"
SET_RESERVE_FACTOR_SIGNATURE = "_setReserveFactor(uint256)"
SET_PROTOCOL_SEIZE_SHARE_SIGNATURE = "_setProtocolSeizeShare(uint256)"
SET_COLLATERAL_FACTOR_SIGNATURE = "_setCollateralFactor(address,uint256)"
SET_REWARD_SPEED_SIGNATURE = "_setRewardSpeed(uint8,address,uint256,uint256)"
SET_MARKET_BORROW_CAPS_SIGNATURE = "_setMarketBorrowCaps(address[],uint256[])"
ACCEPT_ADMIN_SIGNATURE = "_acceptAdmin()"
