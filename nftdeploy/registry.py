import json
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from nftdeploy.utils import _load_json, get_contract_container

# JSON ABI as stored in the registry file
ABI = List[Dict[str, Any]]

REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """A contract published on one chain."""

    chain_id: int
    name: str
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str
    constructor_args: List[Any]

    @property
    def key(self) -> Tuple[int, str]:
        return self.chain_id, self.name

    def to_json(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "abi": sorted(self.abi, key=lambda item: (item["type"], item.get("name", ""))),
            "tx_hash": self.tx_hash,
            "block_number": int(self.block_number),
            "deployer": self.deployer,
            "constructor_args": list(self.constructor_args),
        }


def normalize_constructor_args(constructor_args: List[Any]) -> List[Any]:
    """Returns constructor arguments as they are stored in the registry (bytes as 0x hex)."""

    def _encode(value: Any) -> Any:
        return "0x" + value.hex() if isinstance(value, bytes) else str(value)

    return json.loads(json.dumps(list(constructor_args), default=_encode))


def registry_entry_from_instance(
    contract_instance: ContractInstance, constructor_args: List[Any]
) -> RegistryEntry:
    receipt = contract_instance.receipt
    return RegistryEntry(
        chain_id=receipt.chain_id,
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=[
            item.model_dump(mode="json", by_alias=True)
            for item in contract_instance.contract_type.abi
        ],
        tx_hash=str(receipt.txn_hash),
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
        constructor_args=normalize_constructor_args(constructor_args),
    )


def read_registry(filepath: Path) -> List[RegistryEntry]:
    entries = list()
    for chain_id, contracts in _load_json(filepath).items():
        for name, published in contracts.items():
            entries.append(
                RegistryEntry(
                    chain_id=int(chain_id),
                    name=name,
                    address=published["address"],
                    abi=published["abi"],
                    tx_hash=published["tx_hash"],
                    block_number=published["block_number"],
                    deployer=published["deployer"],
                    constructor_args=published.get("constructor_args", []),
                )
            )
    return entries


def find_entry(filepath: Path, chain_id: int, name: str) -> Optional[RegistryEntry]:
    """Returns the registry entry for a contract on a chain, if one was published."""
    if not filepath.exists():
        return None
    return next(
        (entry for entry in read_registry(filepath) if entry.key == (chain_id, name)), None
    )


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """
    Upserts entries into the registry file: an entry replaces any earlier one
    for the same chain id and contract name, everything else is kept.
    Output is ordered by chain id then name.
    """
    if not entries:
        print("No entries provided.")
        return filepath

    if filepath.exists():
        print(f"Updating existing registry at {filepath}.")
        merged = {entry.key: entry for entry in read_registry(filepath)}
    else:
        print(f"Creating new registry at {filepath}.")
        merged = dict()
    merged.update((entry.key, entry) for entry in entries)

    data: Dict[str, Dict[str, Any]] = dict()
    for entry in sorted(merged.values(), key=lambda e: (str(e.chain_id), e.name)):
        data.setdefault(str(entry.chain_id), dict())[entry.name] = entry.to_json()

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(data, file, **REGISTRY_JSON_FORMAT)
    return filepath


def contracts_from_registry(filepath: Path, chain_id: int) -> Dict[str, ContractInstance]:
    """Contract instances published on one chain, by name."""
    return {
        entry.name: get_contract_container(entry.name).at(entry.address)
        for entry in read_registry(filepath)
        if entry.chain_id == chain_id
    }
