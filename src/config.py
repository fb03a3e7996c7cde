"""Application configuration, read once from the environment at start-up and passed into every component."""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, field_validator

from src.core.exceptions import ConfigError
from src.core.shared_types import Network

DEFAULT_CONTRACT_ADDRESS = "ST3P49R8XXQWG69S66MZASYPTTGNDKK0WW32RRJDN"
DEFAULT_CONTRACT_NAME = "tic-tac-toe"
DEFAULT_API_URLS = {
    Network.TESTNET: "https://api.testnet.hiro.so",
    Network.MAINNET: "https://api.hiro.so",
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppDetails(BaseModel):
    """Shown by the wallet when it asks the user to approve a call."""

    name: str
    icon: str


class Settings(BaseModel):
    network: Network = Network.TESTNET
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    contract_name: str = DEFAULT_CONTRACT_NAME
    stacks_api_url: str = DEFAULT_API_URLS[Network.TESTNET]
    explorer_url: str = "https://explorer.hiro.so"
    app_name: str = "Tic Tac Toe"
    app_icon: str = "https://cryptologos.cc/logos/stacks-stx-logo.png"
    session_database_url: str = "sqlite:///session.db"
    request_timeout: float = 10.0
    log_level: str = "INFO"

    @field_validator("network", mode="before")
    @classmethod
    def validate_network(cls, value: object) -> object:
        if isinstance(value, str) and value.lower() not in {n.value for n in Network}:
            raise ConfigError(
                f"Unknown network {value!r}. Pick one from {','.join(n.value for n in Network)}"
            )
        return value.lower() if isinstance(value, str) else value

    @field_validator("contract_address", "contract_name")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ConfigError("Contract address and name cannot be empty.")
        return value.strip()

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ConfigError(f"Request timeout must be positive, got {value}.")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}")
        return value.upper()

    @property
    def app_details(self) -> AppDetails:
        return AppDetails(name=self.app_name, icon=self.app_icon)

    @property
    def contract_id(self) -> str:
        return f"{self.contract_address}.{self.contract_name}"

    def explorer_tx_url(self, txid: str) -> str:
        """Explorer page of a transaction (or of a contract, given its contract id)."""
        return f"{self.explorer_url.rstrip('/')}/txid/{txid}?chain={self.network.value}"

    def explorer_address_url(self, address: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/address/{address}?chain={self.network.value}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Build settings from environment variables. Unset variables fall back to the defaults above."""
        env = os.environ if environ is None else environ

        network = env.get("STACKS_NETWORK", Network.TESTNET.value)
        values: dict[str, object] = {"network": network}

        # The API url follows the network unless explicitly overridden
        if network.lower() in DEFAULT_API_URLS:
            values["stacks_api_url"] = DEFAULT_API_URLS[Network(network.lower())]

        env_names = {
            "contract_address": "CONTRACT_ADDRESS",
            "contract_name": "CONTRACT_NAME",
            "stacks_api_url": "STACKS_API_URL",
            "explorer_url": "EXPLORER_URL",
            "app_name": "APP_NAME",
            "app_icon": "APP_ICON",
            "session_database_url": "SESSION_DATABASE_URL",
            "log_level": "LOG_LEVEL",
        }
        for field_name, env_name in env_names.items():
            if env_name in env:
                values[field_name] = env[env_name]

        if "REQUEST_TIMEOUT" in env:
            try:
                values["request_timeout"] = float(env["REQUEST_TIMEOUT"])
            except ValueError as exc:
                raise ConfigError(
                    f"REQUEST_TIMEOUT must be a number, got {env['REQUEST_TIMEOUT']!r}."
                ) from exc

        return cls(**values)
