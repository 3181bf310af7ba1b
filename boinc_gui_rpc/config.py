"""Client configuration loading.

Configuration files are YAML mappings, for example::

    host: localhost
    port: 31416
    password_file: /var/lib/boinc-client/gui_rpc_auth.cfg
    polling_interval: 0.25
    connect_timeout: 15
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .client import DEFAULT_POLLING_INTERVAL
from .stream import DEFAULT_PORT


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for an RpcClient.

    Attributes:
        host: Daemon hostname or IP.
        port: GUI RPC port.
        password: GUI RPC password, if authorization is wanted.
        polling_interval: Delay between poll attempts in seconds.
        connect_timeout: Timeout for opening the connection in seconds.
    """

    host: str = "localhost"
    port: int = DEFAULT_PORT
    password: str | None = None
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    connect_timeout: float = 15.0


class ConfigLoadError(Exception):
    """Error loading a client configuration file."""

    pass


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML mapping with error handling."""
    if not path.exists():
        raise ConfigLoadError(f"File not found: {path}")
    with path.open() as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as err:
            raise ConfigLoadError(f"Invalid YAML in {path}: {err}") from err
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")
    return data


def read_password_file(path: Path) -> str:
    """Read the password from a gui_rpc_auth.cfg style file (first line)."""
    if not path.exists():
        raise ConfigLoadError(f"Password file not found: {path}")
    lines = path.read_text().splitlines()
    return lines[0].strip() if lines else ""


def load_config(path: Path) -> ClientConfig:
    """Load a client configuration from a YAML file.

    A relative ``password_file`` is resolved against the config file's
    directory. An explicit ``password`` takes precedence over it.

    Raises:
        ConfigLoadError: If the file is missing or invalid.
    """
    data = _load_yaml(path)

    password = data.get("password")
    if password is None and (password_file := data.get("password_file")):
        password = read_password_file(path.parent / Path(password_file))

    try:
        return ClientConfig(
            host=str(data.get("host", "localhost")),
            port=int(data.get("port", DEFAULT_PORT)),
            password=None if password is None else str(password),
            polling_interval=float(
                data.get("polling_interval", DEFAULT_POLLING_INTERVAL)
            ),
            connect_timeout=float(data.get("connect_timeout", 15.0)),
        )
    except (TypeError, ValueError) as err:
        raise ConfigLoadError(f"Invalid value in {path}: {err}") from err
