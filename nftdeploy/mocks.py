from typing import Optional

from ape.api import AccountAPI
from ape.contracts import ContractInstance

from nftdeploy.constants import MOCK_DECIMALS, MOCK_INITIAL_ANSWER, MOCK_PRICE_FEED_CONTRACT
from nftdeploy.networks import get_network_name, is_local_network
from nftdeploy.utils import get_contract_container


def deploy_mocks(deployer: AccountAPI) -> Optional[ContractInstance]:
    """
    Deploys the mock price feed on development networks.
    Reuses the mock if one was already deployed in this session.
    """
    if not is_local_network():
        print(f"(i) {get_network_name()} is a live network; mocks not needed.")
        return None

    container = get_contract_container(MOCK_PRICE_FEED_CONTRACT)
    if container.deployments:
        return container.deployments[-1]

    print("Local network detected! Deploying mocks...")
    mock_price_feed = deployer.deploy(container, MOCK_DECIMALS, MOCK_INITIAL_ANSWER)
    print(f"(i) Mocks deployed! {MOCK_PRICE_FEED_CONTRACT} at {mock_price_feed.address}")
    return mock_price_feed
