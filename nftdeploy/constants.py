from pathlib import Path

from web3 import Web3

import nftdeploy

#
# Filesystem
#

DEPLOYMENT_DIR = Path(nftdeploy.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

IMAGES_DIR = PROJECT_ROOT / "images" / "dynamicNft"
LOW_SVG_FILEPATH = IMAGES_DIR / "frown.svg"
HIGH_SVG_FILEPATH = IMAGES_DIR / "happy.svg"

#
# Networks
#

DEVELOPMENT_NETWORKS = ["local"]
DEFAULT_BLOCK_CONFIRMATIONS = 1

LOCAL_CHAIN_ID = 31337
MAINNET_CHAIN_ID = 1
GOERLI_CHAIN_ID = 5
SEPOLIA_CHAIN_ID = 11155111
POLYGON_CHAIN_ID = 137

NETWORK_CONFIG = {
    LOCAL_CHAIN_ID: {
        "name": "local",
    },
    MAINNET_CHAIN_ID: {
        "name": "mainnet",
        "eth_usd_price_feed": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
        "block_confirmations": 6,
    },
    GOERLI_CHAIN_ID: {
        "name": "goerli",
        "eth_usd_price_feed": "0xD4a33860578De61DBAbDc8BFdb98FD742fA7028e",
        "block_confirmations": 6,
    },
    SEPOLIA_CHAIN_ID: {
        "name": "sepolia",
        "eth_usd_price_feed": "0x694AA1769357215DE4FAC081bf1f309aDC325306",
        "block_confirmations": 6,
    },
    POLYGON_CHAIN_ID: {
        "name": "polygon",
        "eth_usd_price_feed": "0xF9680D99D6C9589e2a93a78A04A279e509205945",
        "block_confirmations": 6,
    },
}

PRICE_FEED_KEY_SUFFIX = "_price_feed"
DEFAULT_PRICE_FEED_PAIR = "eth_usd"

#
# Contracts
#

NFT_CONTRACT = "DynamicSvgNft"

# Chainlink aggregator mock used on development networks
MOCK_PRICE_FEED_CONTRACT = "MockV3Aggregator"
MOCK_DECIMALS = 18
MOCK_INITIAL_ANSWER = Web3.to_wei(2000, "ether")

#
# Block explorer
#

ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"
ALREADY_VERIFIED_MESSAGE = "already verified"
