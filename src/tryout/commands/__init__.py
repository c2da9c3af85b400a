"""Built-in CLI sub-commands for tryout.

This package groups the Typer command modules that form the CLI's
command tree:

* :mod:`~tryout.commands.inspect` -- ``info``, ``operations`` and
  ``example``: read-only views of an OpenAPI document.
* :mod:`~tryout.commands.request` -- ``curl`` and ``call``: build a request
  from command-line values, then print or send it.
* :mod:`~tryout.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or plain callback functions
registered directly on the root app.  Shared helpers live in
:mod:`~tryout.commands.common`.
"""
