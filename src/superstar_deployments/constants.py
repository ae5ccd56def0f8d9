"""Configuration constants for superstar-deployments library."""

# Network profiles, keyed by the name selected through $CHAIN.
# Gas prices are kept as strings so they load into Decimal without float noise.
NETWORK_CONFIG = {
    "juno_testnet": {
        "chain_id": "uni-5",
        "chain_name": "junotestnet",
        "pretty_name": "Juno Testnet",
        "bech32_prefix": "juno",
        "coin_type": 118,  # BIP-44
        "rpc_url": "https://rpc.uni.juno.deuslabs.fi:443",
        "rest_url": "https://lcd.uni.juno.deuslabs.fi",
        "default_fee_token": "ujunox",
        "fee_tokens": [
            {"denom": "ujunox", "coin_decimals": 6},
        ],
        "staking_token": "ujunox",
        "default_gas_price": "0.04",
        "gas_price_step": {"low": "0.03", "average": "0.04", "high": "0.05"},
    },
    "osmosis_testnet": {
        "chain_id": "osmo-test-4",
        "chain_name": "osmosistestnet",
        "pretty_name": "Osmosis Testnet",
        "bech32_prefix": "osmo",
        "coin_type": 118,
        "rpc_url": "https://testnet-rpc.osmosis.zone/",
        "rest_url": "https://testnet-rest.osmosis.zone/",
        "default_fee_token": "uosmo",
        "fee_tokens": [
            {"denom": "uosmo", "coin_decimals": 6},
        ],
        "staking_token": "uosmo",
        "default_gas_price": "0.025",
        "gas_price_step": {"low": "0", "average": "0.025", "high": "0.04"},
    },
}

# Nois randomness proxy contract per network, passed to the lottery on instantiate.
# Override with $NOIS_PROXY when the proxy is redeployed. Networks missing here
# need $NOIS_PROXY to instantiate.
NOIS_PROXY_ADDRESSES = {
    "juno_testnet": "juno1pjpntyvkxeuxd709jlupuea3xzxlzsfq574kqefv77fr2kcg4mcqvwqedq",
}

# Default lottery parameters used when instantiating a fresh contract
DEFAULT_INTERVAL_SECONDS = 60 * 60
DEFAULT_UPDATE_INTERVAL_SECONDS = 60 * 30
DEFAULT_MAX_TICKETS_PER_USER = 100
DEFAULT_PERCENTAGE_PER_MATCH = (3, 6, 8, 15, 25, 40)
DEFAULT_TICKET_PRICE = 1_000_000  # smallest unit of the fee token
DEFAULT_TREASURY_FEE = 1_000_000

MATCH_TIERS = 6

CONTRACT_LABEL = "super_star.v1"

DEFAULT_ARTIFACT_PATH = "artifacts/super_star.wasm"

# Fields accepted by the contract's update_config message
UPDATE_CONFIG_FIELDS = (
    "treasury_fee",
    "owner",
    "ticket_price",
    "interval",
    "request_timeout",
    "nois_proxy",
    "max_tickets_per_user",
    "percentage_per_match",
)

# Environment variable names
ENV_MNEMONIC = "MNEMONIC"
ENV_CHAIN = "CHAIN"
ENV_CODE_ID = "CODE_ID"
ENV_CONTRACT_ADDR = "CONTRACT_ADDR"
ENV_GAS_PRICE = "GAS_PRICE"
ENV_NOIS_PROXY = "NOIS_PROXY"
ENV_ARTIFACT_PATH = "ARTIFACT_PATH"
ENV_TRANSPORT = "SUPERSTAR_TRANSPORT"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_JSON = "LOG_JSON"

ENDPOINT_TIMEOUT = 30
