# contract_registry.py
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from web3 import Web3

from errors import ConfigError, UnknownContract

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractBinding:
    name: str
    address: str
    abi: list


def load_abi(path: str | Path) -> list:
    """
    Read an ABI from a Hardhat artifact ({"abi": [...], ...}) or a bare ABI list.
    Missing or broken files are a startup error.
    """
    path = Path(path)
    try:
        with open(path) as f:
            artifact = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"ABI file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigError(f"ABI file is not valid JSON: {path} ({e})") from e

    abi = artifact.get("abi") if isinstance(artifact, dict) else artifact
    if not isinstance(abi, list):
        raise ConfigError(f"No ABI found in {path}")
    return abi


class ContractRegistry:
    """Fixed table of the contracts this relayer is willing to call."""

    def __init__(self, bindings: list[ContractBinding]):
        self._by_address = {b.address.lower(): b for b in bindings}

    @classmethod
    def from_settings(cls, settings) -> "ContractRegistry":
        return cls(
            [
                ContractBinding(
                    name="usdt",
                    address=Web3.to_checksum_address(settings.usdt_address),
                    abi=load_abi(settings.usdt_abi_path),
                ),
                ContractBinding(
                    name="staking",
                    address=Web3.to_checksum_address(settings.staking_address),
                    abi=load_abi(settings.staking_abi_path),
                ),
            ]
        )

    @property
    def bindings(self) -> list[ContractBinding]:
        return list(self._by_address.values())

    def lookup(self, contract_address: str) -> ContractBinding:
        binding = self._by_address.get(contract_address.lower())
        if binding is None:
            logger.warning("Unknown contract address: %s", contract_address)
            raise UnknownContract(contract_address)
        return binding
