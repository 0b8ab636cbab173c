from collections import namedtuple
from types import SimpleNamespace

import pytest
from eth_utils import to_checksum_address

from nftdeploy import params
from nftdeploy.constants import LOCAL_CHAIN_ID, SEPOLIA_CHAIN_ID

# Common constants
DEPLOYER_ADDRESS = to_checksum_address("0x" + "ab" * 20)
MOCK_FEED_ADDRESS = to_checksum_address("0x" + "11" * 20)
NFT_ADDRESS = to_checksum_address("0x" + "22" * 20)

AbiInput = namedtuple("AbiInput", ["name", "type"])

NFT_CONSTRUCTOR_INPUTS = [
    AbiInput("priceFeedAddress", "address"),
    AbiInput("lowSvg", "string"),
    AbiInput("highSvg", "string"),
]


# Fakes standing in for ape objects
class FakeAbiEntry:
    def __init__(self, **data):
        self.data = data

    def model_dump(self, **kwargs):
        return dict(self.data)


class FakeInstance:
    def __init__(self, name, address, chain_id=SEPOLIA_CHAIN_ID, sender=DEPLOYER_ADDRESS):
        self.contract_type = SimpleNamespace(
            name=name,
            abi=[
                FakeAbiEntry(type="constructor", inputs=[]),
                FakeAbiEntry(type="function", name="tokenURI"),
            ],
        )
        self.address = address
        self.receipt = SimpleNamespace(
            chain_id=chain_id,
            txn_hash="0x" + "ee" * 32,
            block_number=42,
            transaction=SimpleNamespace(sender=sender),
        )


class FakeContainer:
    def __init__(self, name, inputs=(), deployments=None):
        self.contract_type = SimpleNamespace(name=name)
        self.constructor = SimpleNamespace(abi=SimpleNamespace(inputs=list(inputs)))
        self.deployments = list(deployments or [])

    def at(self, address):
        return FakeInstance(self.contract_type.name, address)


class FakeAccount:
    def __init__(
        self, address=DEPLOYER_ADDRESS, deploy_address=NFT_ADDRESS, chain_id=SEPOLIA_CHAIN_ID
    ):
        self.address = address
        self.deploy_address = deploy_address
        self.chain_id = chain_id
        self.deploy_calls = []
        self.autosign = False

    def set_autosign(self, enabled, passphrase=None):
        self.autosign = enabled

    def deploy(self, container, *args, **kwargs):
        self.deploy_calls.append((container, args, kwargs))
        instance = FakeInstance(container.contract_type.name, self.deploy_address, self.chain_id)
        container.deployments.append(instance)
        return instance


# Fixtures
@pytest.fixture
def set_network(monkeypatch):
    """Pretends ape is connected to the named network."""

    def _set_network(name, chain_id):
        monkeypatch.setattr("nftdeploy.networks.get_network_name", lambda: name)
        monkeypatch.setattr("nftdeploy.networks.get_chain_id", lambda: chain_id)
        monkeypatch.setattr("nftdeploy.mocks.get_network_name", lambda: name)
        monkeypatch.setattr(params, "get_network_name", lambda: name)
        monkeypatch.setattr(params, "get_chain_id", lambda: chain_id)

    return _set_network


@pytest.fixture
def local_network(set_network):
    set_network("local", LOCAL_CHAIN_ID)


@pytest.fixture
def sepolia_network(set_network):
    set_network("sepolia", SEPOLIA_CHAIN_ID)


@pytest.fixture
def no_plugin_checks(monkeypatch):
    monkeypatch.setattr(params, "check_plugins", lambda: None)


@pytest.fixture
def code_at_address(monkeypatch):
    deployed = set()
    monkeypatch.setattr(params, "has_code", lambda address: address in deployed)
    return deployed


@pytest.fixture
def etherscan_api_key(monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "ABCDEFGHIJKLMNOPQRSTUVWXYZ12345678")


@pytest.fixture
def no_etherscan_api_key(monkeypatch):
    monkeypatch.delenv("ETHERSCAN_API_KEY", raising=False)


@pytest.fixture
def mock_price_feed(monkeypatch):
    """A single in-session MockV3Aggregator deployment."""
    mock = FakeInstance("MockV3Aggregator", MOCK_FEED_ADDRESS)
    container = FakeContainer("MockV3Aggregator", deployments=[mock])
    monkeypatch.setattr("nftdeploy.utils.get_contract_container", lambda name: container)
    return container


@pytest.fixture
def deployer_account():
    return FakeAccount()


@pytest.fixture
def nft_container():
    return FakeContainer("DynamicSvgNft", inputs=NFT_CONSTRUCTOR_INPUTS)


@pytest.fixture
def svg_files(tmp_path):
    low = tmp_path / "low.svg"
    high = tmp_path / "high.svg"
    low.write_text("<svg>low</svg>", encoding="utf-8")
    high.write_text("<svg>high</svg>", encoding="utf-8")
    return low, high


@pytest.fixture
def deployment_config(tmp_path, svg_files):
    low, high = svg_files
    return {
        "deployment": {"name": "dynamic-svg-nft"},
        "artifacts": {"dir": str(tmp_path / "artifacts"), "filename": "registry.json"},
        "contracts": [
            {
                "DynamicSvgNft": {
                    "constructor": {
                        "priceFeedAddress": "$price_feed:eth_usd",
                        "lowSvg": f"$file:{low}",
                        "highSvg": f"$file:{high}",
                    }
                }
            }
        ],
    }
