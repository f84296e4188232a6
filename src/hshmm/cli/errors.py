"""
Error handling for CLI commands.

Defines CLI exceptions with suggestions and a single error display path.
"""

import traceback
from typing import Optional
import logging

import typer
from rich.console import Console

from ..exceptions import HSHMMError, InvalidDimensionsError, StaleTableError

console = Console()
logger = logging.getLogger(__name__)


class HSHMMCLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


class ConfigurationError(HSHMMCLIError):
    """Configuration errors."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["config_error"], suggestions)


def suggestions_for(error: Exception) -> list:
    """Suggestions for library errors raised while running a command."""
    if hasattr(error, 'suggestions'):
        return error.suggestions
    if isinstance(error, InvalidDimensionsError):
        return ["--states, --dims and --horizon must all be positive integers"]
    if isinstance(error, StaleTableError):
        return ["Recompute derived tables (finalize) after changing parameters"]
    return []


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    error_type = type(error).__name__

    message_parts = [
        f"[red]Error during {operation}:[/red]",
        f"[red]{error_type}: {error}[/red]"
    ]

    suggestions = suggestions_for(error)
    if suggestions:
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in suggestions:
            message_parts.append(f"  • {suggestion}")

    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{traceback.format_exc()}[/dim]")

    return "\n".join(message_parts)


def exit_code_for(error: Exception) -> int:
    """Map an exception to a process exit code."""
    if isinstance(error, HSHMMCLIError):
        return error.exit_code
    if isinstance(error, HSHMMError):
        return EXIT_CODES["model_error"]
    return EXIT_CODES["general_error"]


def handle_cli_error(error: Exception, operation: str, debug: bool = False) -> None:
    """Display an error with rich formatting and exit with its code."""
    console.print(format_error_message(error, operation, debug))
    console.print(f"\n[dim]For more help, run: hshmm {operation.split()[0]} --help[/dim]")

    logger.error(f"CLI error in {operation}: {error}", exc_info=debug)

    raise typer.Exit(exit_code_for(error))


# Exit codes for different error types
EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "invalid_usage": 2,
    "model_error": 11,
    "config_error": 13
}
