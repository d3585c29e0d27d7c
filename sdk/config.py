import json
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from dotenv import load_dotenv
from web3 import Web3


MAX_DOMAIN = 2 ** 32 - 1
ROOT_LENGTH = 32  # bytes32
TX_CONFIRMATION_TIMEOUT = 900  # 15 minutes
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_BLOCK_CHUNK_SIZE = 1000

ENV_PREFIX = "OPTICS_"


## [SDK Error Class]

class SDKError(Exception):
    pass


## [Base Config Class]

@dataclass
class Config:
    """Configuration for talking to a home contract and its replicas."""
    dial_uri: str
    private_key: str
    home_address: str
    replicas: Dict[str, str] = field(default_factory=dict)
    poa: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    tx_timeout: int = TX_CONFIRMATION_TIMEOUT
    from_block: int = 0
    block_chunk_size: int = DEFAULT_BLOCK_CHUNK_SIZE

    @staticmethod
    def default():
        return Config(dial_uri="", private_key="", home_address="")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'Config':
        """Build a config from OPTICS_* environment variables.

        Values from `env_file` (a .env file) are loaded first but never
        override variables already set in the process environment.
        """
        load_dotenv(dotenv_path=env_file)

        def env(name: str, default: str = "") -> str:
            return os.getenv(ENV_PREFIX + name, default)

        try:
            return cls(
                dial_uri=env("DIAL_URI"),
                private_key=env("PRIVATE_KEY"),
                home_address=env("HOME_ADDRESS"),
                replicas=parse_replicas(env("REPLICAS")),
                poa=env("POA", "false").lower() in ("1", "true", "yes"),
                poll_interval=float(env("POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
                tx_timeout=int(env("TX_TIMEOUT", str(TX_CONFIRMATION_TIMEOUT))),
                from_block=int(env("FROM_BLOCK", "0")),
                block_chunk_size=int(env("BLOCK_CHUNK_SIZE", str(DEFAULT_BLOCK_CHUNK_SIZE))),
            )
        except ValueError as e:
            raise SDKError(f"invalid environment configuration: {e}") from e

    @classmethod
    def from_file(cls, path: str) -> 'Config':
        """Load a config from a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SDKError(f"failed to read config file {path}: {e}") from e

        try:
            return cls(**data)
        except TypeError as e:
            raise SDKError(f"invalid config file {path}: {e}") from e

    def validate(self) -> None:
        if not self.dial_uri:
            raise SDKError("dial_uri is required")
        if not self.private_key:
            raise SDKError("private_key is required")
        if not Web3.is_address(self.home_address):
            raise SDKError(f"home_address is not a valid address: {self.home_address!r}")
        for name, address in self.replicas.items():
            if not Web3.is_address(address):
                raise SDKError(f"replica {name!r} has an invalid address: {address!r}")
        if self.poll_interval <= 0:
            raise SDKError("poll_interval must be positive")
        if self.tx_timeout <= 0:
            raise SDKError("tx_timeout must be positive")
        if self.from_block < 0:
            raise SDKError("from_block must not be negative")
        if self.block_chunk_size <= 0:
            raise SDKError("block_chunk_size must be positive")


def parse_replicas(value: str) -> Dict[str, str]:
    """Parse `name=0xaddr,name=0xaddr` into a mapping."""
    replicas: Dict[str, str] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, address = item.partition("=")
        if not sep or not name.strip() or not address.strip():
            raise ValueError(f"malformed replica entry {item!r}, expected name=address")
        replicas[name.strip()] = address.strip()
    return replicas


## [Validation Functions]

# Basic validation: expect hex string like '0x' + 8 hex chars (4 bytes) minimum
def validate_hex_string(hex_string: str) -> bool:
    if not hex_string.startswith("0x"):
        return False
    if len(hex_string) < 10:
        return False
    return True


def validate_domain(domain: int) -> int:
    """Check that `domain` fits in a uint32."""
    if isinstance(domain, bool) or not isinstance(domain, int):
        raise ValueError(f"domain must be an integer, got {type(domain).__name__}")
    if domain < 0 or domain > MAX_DOMAIN:
        raise ValueError(f"domain {domain} does not fit in uint32")
    return domain


def validate_bytes32(value: Union[bytes, str], name: str = "value") -> bytes:
    """Normalize a bytes32 argument given as raw bytes or 0x-prefixed hex."""
    if isinstance(value, str):
        if not value.startswith("0x"):
            raise ValueError(f"{name} must be 0x-prefixed hex")
        try:
            value = bytes.fromhex(value[2:])
        except ValueError as e:
            raise ValueError(f"{name} is not valid hex: {e}") from e
    if not isinstance(value, (bytes, bytearray)):
        raise ValueError(f"{name} must be bytes or hex string, got {type(value).__name__}")
    if len(value) != ROOT_LENGTH:
        raise ValueError(f"{name} must be {ROOT_LENGTH} bytes, got {len(value)}")
    return bytes(value)
