from typing import Dict, Optional

from ape import accounts, networks
from ape.api import AccountAPI
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from nftdeploy.constants import (
    DEFAULT_BLOCK_CONFIRMATIONS,
    DEFAULT_PRICE_FEED_PAIR,
    DEVELOPMENT_NETWORKS,
    MOCK_PRICE_FEED_CONTRACT,
    NETWORK_CONFIG,
    PRICE_FEED_KEY_SUFFIX,
)


class PriceFeedNotFound(ValueError):
    """Raised when no price feed address can be resolved for the active network."""


def get_network_name() -> str:
    return networks.provider.network.name


def get_chain_id() -> int:
    return networks.provider.network.chain_id


def is_local_network() -> bool:
    """Returns True if the active network is a development network."""
    return get_network_name() in DEVELOPMENT_NETWORKS


def is_fork_network() -> bool:
    return get_network_name().endswith("-fork")


def get_network_config(chain_id: int) -> Dict:
    try:
        return NETWORK_CONFIG[chain_id]
    except KeyError:
        raise ValueError(f"No network configuration found for chain id {chain_id}.")


def get_block_confirmations(chain_id: int) -> int:
    """Returns the number of confirmations to wait for on the given chain."""
    network_config = NETWORK_CONFIG.get(chain_id, {})
    return network_config.get("block_confirmations") or DEFAULT_BLOCK_CONFIRMATIONS


def _get_mock_price_feed_address() -> ChecksumAddress:
    # nftdeploy.utils imports this module
    from nftdeploy.utils import get_contract_container

    container = get_contract_container(MOCK_PRICE_FEED_CONTRACT)
    mocks = container.deployments
    if not mocks:
        raise PriceFeedNotFound(
            f"No {MOCK_PRICE_FEED_CONTRACT} deployment found on {get_network_name()}; "
            "deploy the mocks first."
        )
    if len(mocks) != 1:
        raise PriceFeedNotFound(
            f"{MOCK_PRICE_FEED_CONTRACT} is ambiguous - "
            f"expected exactly one deployment, got {len(mocks)}"
        )
    return to_checksum_address(mocks[0].address)


def _get_live_price_feed_address(pair: str) -> ChecksumAddress:
    chain_id = get_chain_id()
    network_config = NETWORK_CONFIG.get(chain_id, {})
    address = network_config.get(f"{pair}{PRICE_FEED_KEY_SUFFIX}")
    if not address:
        raise PriceFeedNotFound(f"No {pair} price feed configured for chain id {chain_id}.")
    return to_checksum_address(address)


def get_price_feed_address(pair: str = DEFAULT_PRICE_FEED_PAIR) -> ChecksumAddress:
    """
    Returns the price feed address for the active network:
    the deployed mock aggregator on development networks,
    otherwise the address configured for the chain id.
    """
    if is_local_network():
        return _get_mock_price_feed_address()
    return _get_live_price_feed_address(pair)


def get_account(account_id: Optional[str] = None) -> AccountAPI:
    if is_local_network():
        return accounts.test_accounts[0]
    if account_id is None:
        raise ValueError("Must specify account id when deploying to live networks")
    return accounts.load(account_id)


def has_code(address: str) -> bool:
    """Returns True if a contract is deployed at the address on the active network."""
    code = networks.provider.get_code(address)
    return bool(code)
