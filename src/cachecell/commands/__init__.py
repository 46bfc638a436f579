"""Built-in sub-commands for the ``cachecell`` CLI.

Each module exposes plain command functions that
:mod:`cachecell.app` registers on the root Typer application.
"""
