"""keysync configuration and settings.

Configuration is resolved from three layers, lowest priority first:

1. Built-in defaults
2. ``[keysync]`` table of ~/.config/keysync/config.toml
3. Environment variables (``KEYSYNC_KEYDIR``, ``KEYSYNC_SERVER_URL``,
   ``KEYSYNC_TOKEN``, ``KEYSYNC_TIMEOUT``). A variable set to an empty
   string discards the file value, so ``KEYSYNC_TOKEN=""`` clears a token.
"""

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from keysync.core.paths import DEFAULT_KEYDIR, get_config_path
from keysync.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "keysync"

# Environment variable -> config field
ENV_OVERRIDES: dict[str, str] = {
    "KEYSYNC_KEYDIR": "keydir",
    "KEYSYNC_SERVER_URL": "server_url",
    "KEYSYNC_TOKEN": "token",
    "KEYSYNC_TIMEOUT": "timeout_seconds",
}


class KeysyncConfig(BaseModel):
    """Settings for a keysync reconciliation cycle.

    Attributes:
        keydir: Directory holding one key file per user.
        server_url: GraphQL endpoint of the user directory.
        token: Optional bearer token for the user directory.
        timeout_seconds: Upper bound for fetching the desired state.
    """

    model_config = ConfigDict(extra="forbid")

    keydir: Annotated[Path, Field(description="Key file directory")] = DEFAULT_KEYDIR
    server_url: Annotated[
        str,
        Field(min_length=1, description="User directory GraphQL endpoint"),
    ] = "http://localhost:4000/graphql"
    token: Annotated[str | None, Field(description="Bearer token for the user directory")] = None
    timeout_seconds: Annotated[
        int,
        Field(ge=1, le=3600, description="Timeout in seconds (1-3600)"),
    ] = 60


def _read_config_file(path: Path) -> dict[str, object]:
    """Read the keysync table from a TOML file.

    A missing file yields an empty mapping.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{CONFIG_SECTION}] in {path} must be a table")
    return dict(section)


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> KeysyncConfig:
    """Resolve the effective configuration.

    Args:
        path: Config file path. If None, uses the default config path.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        Validated KeysyncConfig.

    Raises:
        ConfigError: If the file is malformed or a value is invalid.
    """
    config_path = path or get_config_path()
    env = os.environ if environ is None else environ

    data = _read_config_file(config_path)
    for env_var, field in ENV_OVERRIDES.items():
        value = env.get(env_var)
        if value is None:
            continue
        if value:
            data[field] = value
        else:
            # Empty value falls back to the default
            data.pop(field, None)

    try:
        return KeysyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _config_to_dict(config: KeysyncConfig) -> dict[str, object]:
    """Convert KeysyncConfig to a dictionary for TOML serialization.

    None values are dropped since TOML cannot represent them.
    """
    section: dict[str, object] = {
        "keydir": str(config.keydir),
        "server_url": config.server_url,
        "timeout_seconds": config.timeout_seconds,
    }
    if config.token is not None:
        section["token"] = config.token
    return {CONFIG_SECTION: section}


def save_config(config: KeysyncConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The configuration to save.
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    from tempfile import NamedTemporaryFile

    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(_config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
