from lcovgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
)
from lcovgate.cli.root import cli, create_app, main

__all__ = [
    "EXIT_CONFIG",
    "EXIT_DATAERR",
    "EXIT_GENERIC",
    "EXIT_NOINPUT",
    "EXIT_OK",
    "EXIT_THRESHOLD",
    "cli",
    "create_app",
    "main",
]
