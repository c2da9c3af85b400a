"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for tryout:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.tryout/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~tryout.models.GlobalConfig`
  JSON file storing defaults (host, timeout, SSL verification, output
  format).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the global config into the effective
  configuration.
* **Host selection** -- :func:`select_host` decides which server a request
  is addressed to.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tryout.exceptions import ConfigError
from tryout.models import GlobalConfig, ParsedSpec

_APP_NAME = "tryout"
_CONFIG_FILENAME = "config.json"

ENV_HOST = "TRYOUT_HOST"
ENV_TIMEOUT = "TRYOUT_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/tryout/`` (default ``~/.config/tryout/``).
    On macOS/Windows: ``~/.tryout/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/tryout/`` (default ``~/.local/share/tryout/``).
    On macOS/Windows: ``~/.tryout/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives next to *path* so that ``os.replace`` is an
    atomic rename on POSIX systems. On failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~tryout.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    Keys mirror the JSON layout: ``default_host``, ``request.timeout``,
    ``request.verify_ssl``, ``output.format``. The value is validated by
    the model, so ``request.timeout=abc`` is rejected.

    Raises:
        ConfigError: If the key is unknown or the value does not validate.
    """
    data: dict[str, Any] = config.model_dump(mode="json")
    *parents, leaf = key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            raise ConfigError(f"Unknown config key '{key}'")
        node = child
    if leaf not in node or isinstance(node[leaf], dict):
        raise ConfigError(f"Unknown config key '{key}'")

    node[leaf] = None if value == "" and leaf == "default_host" else value
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {value}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_host: Optional[str] = None,
    cli_timeout: Optional[float] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_host``, ``cli_timeout``)
        2. Environment variables (``TRYOUT_HOST``, ``TRYOUT_TIMEOUT``)
        3. User config (``~/.config/tryout/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or ``TRYOUT_TIMEOUT`` is
            not a number.
    """
    cfg = load_global_config()

    env_host = os.environ.get(ENV_HOST)
    if env_host:
        cfg.default_host = env_host
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        try:
            cfg.request.timeout = float(env_timeout)
        except ValueError:
            raise ConfigError(
                f"{ENV_TIMEOUT} must be a number of seconds, got '{env_timeout}'"
            ) from None

    if cli_host is not None:
        cfg.default_host = cli_host
    if cli_timeout is not None:
        cfg.request.timeout = cli_timeout

    return cfg


def select_host(
    spec: ParsedSpec,
    explicit_host: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> str:
    """Pick the base URL requests are sent to.

    An explicit host wins, then the configured ``default_host``, then the
    first server declared by the document with its variables substituted.

    Raises:
        ConfigError: If none of those is available.
    """
    if explicit_host:
        return explicit_host.rstrip("/")
    if config is not None and config.default_host:
        return config.default_host.rstrip("/")
    if spec.servers:
        return spec.servers[0].resolved_url().rstrip("/")
    raise ConfigError(
        "No host to send the request to: the document declares no servers. "
        f"Pass --host or set {ENV_HOST}."
    )
