from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option

from nftdeploy.constants import ARTIFACTS_DIR, NFT_CONTRACT
from nftdeploy.networks import get_chain_id
from nftdeploy.registry import contracts_from_registry
from nftdeploy.utils import check_plugins, verify_contracts


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--contract-name",
    "-c",
    "contract_names",
    multiple=True,
    default=[NFT_CONTRACT],
    help="Name of a published contract to verify; repeatable.",
)
@click.option(
    "--registry-filepath",
    "-f",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=ARTIFACTS_DIR / "dynamic-svg-nft.json",
    help="Registry the contracts were published to.",
)
def cli(network, contract_names, registry_filepath):
    """Verify contracts published to the registry for the active chain."""
    check_plugins()
    chain_id = get_chain_id()
    published = contracts_from_registry(registry_filepath, chain_id=chain_id)

    missing = [name for name in contract_names if name not in published]
    if missing:
        raise click.BadParameter(
            f"{', '.join(missing)} not found in {registry_filepath} for chain {chain_id}"
        )
    verify_contracts([published[name] for name in contract_names])


if __name__ == "__main__":
    cli()
