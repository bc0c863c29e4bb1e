# chain_utils.py
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3


def get_web3(rpc_url: str) -> Web3:
    # connectivity is not probed here, the first real call reports a dead node
    return Web3(Web3.HTTPProvider(rpc_url))


def get_relayer_account(private_key: str) -> LocalAccount:
    return Account.from_key(private_key)


def is_address(value) -> bool:
    return isinstance(value, str) and Web3.is_address(value)
