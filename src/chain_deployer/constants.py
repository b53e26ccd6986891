"""Configuration constants for chain-deployer library."""

# Local development networks (Hardhat node defaults)
# Environment variables override the default RPC URL
NETWORK_CONFIG = {
    "localhost": {
        "chain_id": 31337,
        "chain_name": "Hardhat Localhost",
        "default_rpc_url": "http://127.0.0.1:8545",
        "default_rpc_env": "LOCALHOST_RPC_URL",
    },
    "hardhat": {
        "chain_id": 31337,
        "chain_name": "Hardhat Network",
        "default_rpc_url": "http://127.0.0.1:8545",
        "default_rpc_env": "HARDHAT_RPC_URL",
    },
}

# Upper bound on the whole confirmation cascade, in seconds
DEFAULT_CONFIRMATION_TIMEOUT = 120.0

# Upper bound on an asynchronous address accessor, in seconds
DEFAULT_ADDRESS_TIMEOUT = 30.0

# Delay between eth_getTransactionReceipt polls, in seconds
DEFAULT_POLL_INTERVAL = 1.0

# HTTP timeout for a single JSON-RPC request, in seconds
DEFAULT_RPC_TIMEOUT = 30

ARTIFACTS_DIR_ENV = "CHAIN_DEPLOYER_ARTIFACTS"
