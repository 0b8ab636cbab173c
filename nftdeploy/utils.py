import json
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from nftdeploy.constants import (
    ALREADY_VERIFIED_MESSAGE,
    ARTIFACTS_DIR,
    ETHERSCAN_API_KEY_ENVVAR,
    PROJECT_ROOT,
)
from nftdeploy.networks import is_fork_network, is_local_network


def _load_yaml(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return json.load(file)


def read_text_asset(filepath: Path) -> str:
    """Reads a UTF-8 text asset; relative paths are resolved against the project root."""
    filepath = Path(filepath)
    if not filepath.is_absolute():
        filepath = PROJECT_ROOT / filepath
    return filepath.read_text(encoding="utf-8")


def get_artifact_filepath(config: Dict) -> Path:
    artifacts = config.get("artifacts") or dict()
    if not artifacts.get("filename"):
        raise ValueError("artifact filename is not set in params file.")
    return Path(artifacts.get("dir", ARTIFACTS_DIR)) / artifacts["filename"]


def validate_config(config: Dict) -> Path:
    """
    Checks that a params file names its deployment, lists its contracts
    and says where to publish them. Returns the registry filepath.
    """
    print("Validating parameters YAML...")
    deployment = config.get("deployment")
    if not deployment:
        raise ValueError("deployment is not set in params file.")
    if not deployment.get("name"):
        raise ValueError("deployment name is not set in params file.")
    if not config.get("contracts"):
        raise ValueError("Constructor parameters file missing 'contracts' field.")
    return get_artifact_filepath(config=config)


def get_etherscan_api_key() -> Optional[str]:
    return os.environ.get(ETHERSCAN_API_KEY_ENVVAR) or None


def should_verify(requested: bool = True) -> bool:
    """
    Verification only happens on live networks and
    when a block explorer API key is configured.
    """
    if not requested or is_local_network() or is_fork_network():
        return False
    return get_etherscan_api_key() is not None


def check_plugins() -> None:
    """Live deployments are verified through ape-etherscan; local ones need nothing."""
    print("Checking plugins...")
    if is_local_network():
        return
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to use this script.")
    if not get_etherscan_api_key():
        print(f"(i) {ETHERSCAN_API_KEY_ENVVAR} is not set; contracts will not be verified.")


def verify_contracts(contracts: List[ContractInstance]) -> None:
    """Publishes contract sources to the active network's explorer."""
    explorer = networks.provider.network.explorer
    if explorer is None:
        raise ValueError(f"No block explorer available for {networks.provider.network.name}.")

    for instance in contracts:
        name = instance.contract_type.name
        print(f"(i) Verifying {name}...")
        try:
            explorer.publish_contract(instance.address)
        except Exception as e:
            if ALREADY_VERIFIED_MESSAGE not in str(e).lower():
                raise
            print(f"(i) {name} at {instance.address} is already verified!")


def get_contract_container(contract: str) -> ContractContainer:
    """Looks the contract up in the project, then in its dependencies (e.g. chainlink mocks)."""
    if hasattr(project, contract):
        return getattr(project, contract)

    for dependency_name, versions in project.dependencies.items():
        if len(versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        for dependency in versions.values():
            if hasattr(dependency, contract):
                return getattr(dependency, contract)
    raise ValueError(f"No contract found with name '{contract}'.")
