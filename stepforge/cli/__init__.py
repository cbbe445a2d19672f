"""stepforge CLI — Typer-based command-line interface.

Provides the ``stepforge`` command with subcommands for listing step
lifecycles, running a step, resetting a step's state and inspecting the
request cache.

All output uses Rich for formatted terminal display.
"""
