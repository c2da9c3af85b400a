"""Config commands -- view and modify global configuration.

Provides the ``tryout config`` sub-command group for reading and updating
the user's global configuration file (:class:`~tryout.models.GlobalConfig`).
Settings are persisted in the tryout config directory and provide the
defaults for host, timeout, SSL verification and output format.
"""

from __future__ import annotations

import typer

from tryout.commands.common import reported_errors
from tryout.output import format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False, "--effective", help="Apply TRYOUT_* environment overrides."
    ),
) -> None:
    """Show current configuration.

    Example::

        tryout config show
        tryout --json config show --effective
    """
    from tryout.config import get_config_dir, load_global_config, resolve_config

    with reported_errors():
        config = resolve_config() if effective else load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set. An empty default_host clears it."),
) -> None:
    """Set a configuration value.

    The updated config is validated against
    :class:`~tryout.models.GlobalConfig` before saving.

    Example::

        tryout config set default_host https://api.example.com
        tryout config set request.timeout 10
        tryout config set request.verify_ssl false
    """
    from tryout.config import load_global_config, save_global_config, set_config_value

    with reported_errors():
        config = set_config_value(load_global_config(), key, value)
        save_global_config(config)
    success(f"Set {key} = {value}")
