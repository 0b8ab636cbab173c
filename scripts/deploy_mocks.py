#!/usr/bin/python3

from nftdeploy.mocks import deploy_mocks
from nftdeploy.networks import get_account


def main(account_id=None):
    deployer = get_account(account_id)
    return deploy_mocks(deployer)
