import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Optional

from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance
from web3.auto import w3

from nftdeploy.confirm import confirm_constructor_args, confirm_start
from nftdeploy.networks import (
    get_block_confirmations,
    get_chain_id,
    get_network_name,
    get_price_feed_address,
    has_code,
    is_fork_network,
    is_local_network,
)
from nftdeploy.registry import (
    RegistryEntry,
    find_entry,
    normalize_constructor_args,
    registry_entry_from_instance,
    write_registry,
)
from nftdeploy.utils import (
    _load_yaml,
    check_plugins,
    read_text_asset,
    should_verify,
    validate_config,
    verify_contracts,
)

CONSTRUCTOR_KEY = "constructor"


class Variable(ABC):
    """A constructor value that is only known once connected, written as `$<kind>:<arg>`."""

    PREFIX = "$"
    KIND: str = None

    def __init__(self, argument: str):
        if not argument:
            raise ValueError(f"Missing argument for ${self.KIND}: variable.")
        self.argument = argument

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Returns a Variable for `$kind:arg` strings, lists element-wise, anything else as-is."""
        if isinstance(value, list):
            return [cls.parse(item) for item in value]
        if not (isinstance(value, str) and value.startswith(cls.PREFIX)):
            return value

        kind, _, argument = value[len(cls.PREFIX) :].partition(":")
        for variable_class in (PriceFeed, TextFile):
            if variable_class.KIND == kind:
                return variable_class(argument)
        raise ValueError(f"Unsupported deployment variable '{value}'.")


class PriceFeed(Variable):
    """$price_feed:eth_usd - the mock aggregator locally, the configured feed elsewhere."""

    KIND = "price_feed"

    @property
    def pair(self) -> str:
        return self.argument

    def resolve(self) -> Any:
        return get_price_feed_address(pair=self.pair)


class TextFile(Variable):
    """$file:images/dynamicNft/frown.svg - UTF-8 file contents."""

    KIND = "file"

    @property
    def filepath(self) -> Path:
        return Path(self.argument)

    def resolve(self) -> Any:
        return read_text_asset(self.filepath)


def _resolve(value: Any) -> Any:
    if isinstance(value, list):
        return [_resolve(item) for item in value]
    if isinstance(value, Variable):
        return value.resolve()
    return value


def _check_constructor_inputs(contract_name: str, abi_inputs: List[Any], args: OrderedDict):
    """Raises ConstructorParameters.Invalid unless args line up with the constructor ABI."""
    if len(abi_inputs) != len(args):
        raise ConstructorParameters.Invalid(
            f"{contract_name} constructor takes {len(abi_inputs)} argument(s), "
            f"got {len(args)} - length mismatch."
        )

    for position, (abi_input, (name, value)) in enumerate(zip(abi_inputs, args.items())):
        if abi_input.name != name:
            raise ConstructorParameters.Invalid(
                f"{contract_name} argument '{name}' at position {position}; "
                f"expected ABI name '{abi_input.name}'."
            )
        if not w3.is_encodable(abi_input.type, value):
            raise ConstructorParameters.Invalid(
                f"{contract_name} argument '{name}' at position {position} cannot be encoded; "
                f"expected ABI type '{abi_input.type}'."
            )


class ConstructorParameters:
    """Constructor arguments per contract, as declared in a deployment params file."""

    class Invalid(Exception):
        """Raised when constructor arguments do not match the contract ABI"""

    def __init__(self, parameters: typing.Dict[str, OrderedDict]):
        self.parameters = parameters

    @classmethod
    def from_config(cls, config: typing.Dict) -> "ConstructorParameters":
        print("Processing contract constructor parameters...")
        parameters = dict()
        for contract in config["contracts"]:
            if isinstance(contract, str):
                parameters[contract] = OrderedDict()
                continue
            if not isinstance(contract, dict) or len(contract) != 1:
                raise ValueError("Malformed constructor parameters YAML.")

            ((contract_name, contract_data),) = contract.items()
            raw_values = (contract_data or dict()).get(CONSTRUCTOR_KEY) or dict()
            parameters[contract_name] = OrderedDict(
                (name, Variable.parse(value)) for name, value in raw_values.items()
            )
        return cls(parameters)

    def resolve(self, contract_name: str) -> OrderedDict:
        if contract_name not in self.parameters:
            raise ValueError(f"No constructor parameters found for {contract_name}.")
        return OrderedDict(
            (name, _resolve(value)) for name, value in self.parameters[contract_name].items()
        )


class Deployer:
    """
    Deploys the contracts of a params file from one account and publishes
    them to the registry, reusing deployments that are already published.
    """

    def __init__(
        self,
        config: typing.Dict,
        path: Path,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        confirmations: Optional[int] = None,
    ):
        self.account = account or select_account()
        if autosign and not is_local_network():
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
            self.account.set_autosign(True)
        # development chains are disposable; nothing to confirm there
        self.interactive = not (autosign or is_local_network())

        check_plugins()
        self.path = path
        self.registry_filepath = validate_config(config=config)
        self.constructor_parameters = ConstructorParameters.from_config(config)
        self.verify = verify
        self.chain_id = get_chain_id()
        self.confirmations = confirmations or get_block_confirmations(self.chain_id)
        self.published: typing.Dict[str, RegistryEntry] = dict()

        print(
            f"Account: {self.account.address}",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Network: {get_network_name()} (chain id {self.chain_id})",
            f"Confirmations: {self.confirmations}",
            f"Verify: {self.verify}",
            sep="\n",
        )
        if self.interactive:
            confirm_start()

    @classmethod
    def from_yaml(cls, filepath: Path, **kwargs) -> "Deployer":
        return cls(config=_load_yaml(filepath), path=filepath, **kwargs)

    @property
    def publishes_registry(self) -> bool:
        """Only live chains are recorded; local and forked deployments vanish with the node."""
        return not (is_local_network() or is_fork_network())

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        args = self.constructor_parameters.resolve(contract_name)
        _check_constructor_inputs(contract_name, container.constructor.abi.inputs, args)

        previous = self._published_deployment(container, list(args.values()))
        if previous is not None:
            return previous

        if self.interactive:
            confirm_constructor_args(contract_name, args)
        instance = self.account.deploy(
            container,
            *args.values(),
            publish=False,
            required_confirmations=self.confirmations,
        )
        print(f"(i) Deployed {contract_name} at {instance.address}")
        self.published[contract_name] = registry_entry_from_instance(
            contract_instance=instance, constructor_args=list(args.values())
        )
        return instance

    def _published_deployment(
        self, container: ContractContainer, args: List[Any]
    ) -> Optional[ContractInstance]:
        if not self.publishes_registry:
            return None

        contract_name = container.contract_type.name
        entry = find_entry(self.registry_filepath, chain_id=self.chain_id, name=contract_name)
        if entry is None:
            return None
        if entry.constructor_args != normalize_constructor_args(args):
            print(f"(i) Constructor parameters for {contract_name} changed; redeploying.")
            return None
        if not has_code(entry.address):
            print(f"(i) No code found for {contract_name} at {entry.address}; redeploying.")
            return None

        print(f"(i) Reusing {contract_name} deployed at {entry.address}")
        self.published[contract_name] = entry
        return container.at(entry.address)

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """Records the deployments in the registry and verifies them when possible."""
        if self.publishes_registry:
            names = [instance.contract_type.name for instance in deployments]
            entries = [self.published[name] for name in names if name in self.published]
            output_filepath = write_registry(entries=entries, filepath=self.registry_filepath)
            print(f"(i) Registry written to {output_filepath}!")
        else:
            print(f"(i) {get_network_name()} deployment; registry not written.")

        if should_verify(self.verify):
            print("Verifying...")
            verify_contracts(deployments)
        elif self.verify:
            print("(i) Skipping verification on this network.")
