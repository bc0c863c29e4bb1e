import json

import pytest
from fastapi.testclient import TestClient

from relay_config import LocalSettings, ProviderSettings

# hardhat default accounts / first two deployments
RELAYER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
RELAYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
USER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
USDT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
STAKING_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"

TX_HASH = "0x" + "ab" * 32

SIG_TAIL_INPUTS = [
    {"name": "v", "type": "uint8"},
    {"name": "r", "type": "bytes32"},
    {"name": "s", "type": "bytes32"},
]

USDT_ABI = [
    {
        "type": "function",
        "name": "transferWithSignature",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
            *SIG_TAIL_INPUTS,
        ],
        "outputs": [],
    }
]

STAKING_ABI = [
    {
        "type": "function",
        "name": "stakeWithSignature",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "amount", "type": "uint256"},
            *SIG_TAIL_INPUTS,
        ],
        "outputs": [],
    }
]


class FakeRelayerClient:
    """Stands in for DefenderRelayerClient and records what it was asked to do."""

    def __init__(self, relayer_error=None, send_error=None, response=None):
        self.relayer_error = relayer_error
        self.send_error = send_error
        self.response = response or {"hash": TX_HASH, "transactionId": "tx-1"}
        self.status_calls = 0
        self.sent = []

    def get_relayer(self):
        self.status_calls += 1
        if self.relayer_error:
            raise self.relayer_error
        return {"address": RELAYER_ADDRESS, "network": "sepolia", "paused": False}

    def send_transaction(self, tx):
        self.sent.append(tx)
        if self.send_error:
            raise self.send_error
        return self.response


@pytest.fixture
def abi_files(tmp_path):
    usdt = tmp_path / "MockUSDT.json"
    staking = tmp_path / "StakingContract.json"
    # hardhat artifact shape for one, bare list for the other
    usdt.write_text(json.dumps({"contractName": "MockUSDT", "abi": USDT_ABI}))
    staking.write_text(json.dumps(STAKING_ABI))
    return usdt, staking


@pytest.fixture
def local_settings(abi_files):
    usdt, staking = abi_files
    return LocalSettings(
        private_key=RELAYER_KEY,
        usdt_address=USDT_ADDRESS,
        staking_address=STAKING_ADDRESS,
        rpc_url="http://127.0.0.1:8545",
        frontend_url="http://localhost:5173",
        usdt_abi_path=str(usdt),
        staking_abi_path=str(staking),
    )


@pytest.fixture
def provider_settings():
    return ProviderSettings(api_key="key", api_secret="secret")


@pytest.fixture
def fake_client():
    return FakeRelayerClient()


@pytest.fixture
def provider_client(provider_settings, fake_client):
    from provider_api import create_provider_app

    app = create_provider_app(provider_settings, client=fake_client)
    with TestClient(app) as client:
        yield client
