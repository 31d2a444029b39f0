"""Shared rich consoles for user output and stderr diagnostics."""

from rich.console import Console


console = Console()

# Diagnostics stay off stdout so piped review output is not polluted
err_console = Console(stderr=True, highlight=False)


def log(message: str, style: str = "dim"):
    """Write a diagnostic line to stderr.

    Markup is disabled so model output and exception text are printed verbatim.
    """
    err_console.print(message, style=style, markup=False)


def warn(message: str):
    """Write a warning line to stderr."""
    log(f"Warning: {message}", style="yellow")
