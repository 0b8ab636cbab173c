#!/usr/bin/python3

from pathlib import Path

import click
from ape import project
from ape.cli import ConnectedProviderCommand, network_option

from nftdeploy.constants import CONSTRUCTOR_PARAMS_DIR
from nftdeploy.mocks import deploy_mocks
from nftdeploy.networks import get_account, is_local_network
from nftdeploy.params import Deployer
from nftdeploy.types import MinInt

CONSTRUCTOR_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "dynamic_svg_nft.yml"


@click.command(cls=ConnectedProviderCommand, name="deploy-dynamic-svg-nft")
@network_option(required=True)
@click.option(
    "--account-id",
    "-a",
    help="Alias of the deployer account; required on live networks.",
    type=click.STRING,
    required=False,
)
@click.option(
    "--params-filepath",
    "-p",
    help="Constructor parameters YAML file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=CONSTRUCTOR_PARAMS_FILEPATH,
)
@click.option(
    "--verify/--no-verify",
    help="Verify the contract source when an explorer API key is set.",
    default=True,
)
@click.option(
    "--confirmations",
    "-c",
    help="Block confirmations to wait for; defaults to the network setting.",
    type=MinInt(1),
    required=False,
)
@click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
def cli(network, account_id, params_filepath, verify, confirmations, auto):
    """Deploy the DynamicSvgNft contract."""
    click.echo(f"Connected to {network.name} network.")
    account = get_account(account_id)

    if is_local_network():
        deploy_mocks(account)

    deployer = Deployer.from_yaml(
        filepath=params_filepath,
        verify=verify,
        account=account,
        autosign=auto,
        confirmations=confirmations,
    )
    click.echo("----------------------------------------------------")
    dynamic_svg_nft = deployer.deploy(project.DynamicSvgNft)
    deployer.finalize(deployments=[dynamic_svg_nft])
    click.secho(f"DynamicSvgNft available at {dynamic_svg_nft.address}", fg="green")


if __name__ == "__main__":
    cli()
