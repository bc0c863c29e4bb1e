# relay_config.py
"""Startup configuration for both relay variants.

Values come from the process environment, optionally seeded from a dotenv
file. Settings are validated when constructed so a bad deployment fails
before the server starts listening.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv
from web3 import Web3

from errors import ConfigError

logger = logging.getLogger(__name__)

PRIVATE_KEY_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")

DEFAULT_DEFENDER_API_URL = "https://api.defender.openzeppelin.com"
DEFAULT_DEV_ORIGIN = "http://localhost:5173"

_TRUE_VALUES = ("1", "true", "yes", "on")


def load_env_file(path: str | None = None) -> Path:
    """Load a dotenv file into os.environ without overriding real env vars."""
    env_path = Path(path or os.getenv("RELAY_ENV_FILE", ".env"))
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug("Loaded environment from %s", env_path)
    return env_path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Invalid {name}: {raw!r}") from None


def _check_port(port: int) -> None:
    if not 0 < port < 65536:
        raise ConfigError(f"Invalid PORT: {port}")


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    json: bool = False

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json=_env_bool("LOG_JSON", False),
        )


@dataclass(frozen=True)
class ProviderSettings:
    """Settings for the variant that relays through a Defender-style provider.

    Credentials may be empty here: the relayer client reports them as an
    authentication failure on each request instead of refusing to start.
    """

    api_key: str = ""
    api_secret: str = ""
    api_url: str = DEFAULT_DEFENDER_API_URL
    timeout: float = 30.0
    frontend_url: str = DEFAULT_DEV_ORIGIN
    port: int = 3000

    def __post_init__(self) -> None:
        if urlparse(self.api_url).scheme not in ("http", "https"):
            raise ConfigError(f"Invalid DEFENDER_API_URL: {self.api_url}")
        if self.timeout <= 0:
            raise ConfigError("RELAYER_TIMEOUT must be positive")
        _check_port(self.port)

    @classmethod
    def from_env(cls) -> "ProviderSettings":
        return cls(
            api_key=os.getenv("DEFENDER_API_KEY", ""),
            api_secret=os.getenv("DEFENDER_API_SECRET", ""),
            api_url=os.getenv("DEFENDER_API_URL", DEFAULT_DEFENDER_API_URL),
            timeout=_env_number("RELAYER_TIMEOUT", 30.0, float),
            frontend_url=os.getenv("FRONTEND_URL", DEFAULT_DEV_ORIGIN),
            port=_env_number("PORT", 3000),
        )


@dataclass(frozen=True)
class LocalSettings:
    """Settings for the variant that signs with a local relayer key.

    Attributes:
        private_key: 0x-prefixed 32 byte hex key of the relayer account
        usdt_address: address of the MockUSDT contract
        staking_address: address of the StakingContract
        rpc_url: JSON-RPC endpoint of the node
        frontend_url: the only origin CORS lets through
        usdt_abi_path / staking_abi_path: Hardhat artifacts holding the ABIs
        wait_for_confirmation: whether /relay waits for a receipt at all
        confirmation_timeout: upper bound on that wait, in seconds
    """

    private_key: str
    usdt_address: str
    staking_address: str
    rpc_url: str
    frontend_url: str
    port: int = 3001
    usdt_abi_path: str = "abis/MockUSDT.json"
    staking_abi_path: str = "abis/StakingContract.json"
    wait_for_confirmation: bool = True
    confirmation_timeout: float = 120.0

    REQUIRED = ("PRIVATE_KEY", "USDT_ADDRESS", "STAKING_ADDRESS", "RPC_URL", "FRONTEND_URL")

    def __post_init__(self) -> None:
        if not Web3.is_address(self.usdt_address):
            logger.error("Invalid USDT contract address: %s", self.usdt_address)
            raise ConfigError("Invalid USDT contract address")
        if not Web3.is_address(self.staking_address):
            logger.error("Invalid Staking contract address: %s", self.staking_address)
            raise ConfigError("Invalid Staking contract address")
        if not PRIVATE_KEY_RE.match(self.private_key):
            # never log the key itself
            logger.error("Invalid private key")
            raise ConfigError("Invalid private key format")
        if urlparse(self.rpc_url).scheme not in ("http", "https"):
            raise ConfigError(f"Invalid RPC_URL: {self.rpc_url}")
        if self.confirmation_timeout <= 0:
            raise ConfigError("CONFIRMATION_TIMEOUT must be positive")
        _check_port(self.port)

    @classmethod
    def from_env(cls) -> "LocalSettings":
        missing = [name for name in cls.REQUIRED if not os.getenv(name)]
        if missing:
            logger.error("Missing environment variables: %s", missing)
            raise ConfigError(
                f"Missing environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        return cls(
            private_key=os.environ["PRIVATE_KEY"],
            usdt_address=os.environ["USDT_ADDRESS"],
            staking_address=os.environ["STAKING_ADDRESS"],
            rpc_url=os.environ["RPC_URL"],
            frontend_url=os.environ["FRONTEND_URL"],
            port=_env_number("PORT", 3001),
            usdt_abi_path=os.getenv("USDT_ABI_PATH", "abis/MockUSDT.json"),
            staking_abi_path=os.getenv("STAKING_ABI_PATH", "abis/StakingContract.json"),
            wait_for_confirmation=_env_bool("WAIT_FOR_CONFIRMATION", True),
            confirmation_timeout=_env_number("CONFIRMATION_TIMEOUT", 120.0, float),
        )
