"""
CLI Error Handling

Maps resolver failures to exit codes and short messages on stderr.

Exit codes:
    1  unexpected error or abort
    2  invalid configuration (components, tags, depth, env settings)
    3  a message failed to resolve in strict mode
"""

import logging
import sys
import traceback
from functools import wraps

import click

from message_resolver.config.settings import config
from message_resolver.lib.exceptions import (
    ConfigurationException,
    MessageResolverException,
    ResolutionException,
    format_exception_details,
)

EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_RESOLUTION = 3

DEBUG_HINT = "   Set DEBUG=true to see the traceback"


def exit_code_for(exc: MessageResolverException) -> int:
    """Pick the exit code for a resolver exception"""
    if isinstance(exc, ConfigurationException):
        return EXIT_CONFIGURATION
    if isinstance(exc, ResolutionException):
        return EXIT_RESOLUTION
    return EXIT_UNEXPECTED


def handle_exception(exc_type, exc_value, exc_traceback):
    """
    sys.excepthook replacement for errors raised outside a command

    Args:
        exc_type: Exception type
        exc_value: Exception value
        exc_traceback: Exception traceback
    """
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logging.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    if config.debug_mode:
        traceback.print_exception(exc_type, exc_value, exc_traceback)
    elif isinstance(exc_value, MessageResolverException):
        click.echo(format_exception_details(exc_value), err=True)
    else:
        click.echo(f"message-resolver failed: {exc_value}", err=True)
        click.echo(DEBUG_HINT, err=True)


def install_exception_handler():
    """Route uncaught exceptions through handle_exception"""
    sys.excepthook = handle_exception


class CLIError(Exception):
    """Error reported to the user with a specific exit code"""
    def __init__(self, message: str, exit_code: int = EXIT_UNEXPECTED):
        self.message = message
        self.exit_code = exit_code
        super().__init__(self.message)


class ResolveError(CLIError):
    """A message could not be resolved in strict mode"""

    def __init__(self, message: str, exit_code: int = EXIT_RESOLUTION):
        super().__init__(message, exit_code)


class ConfigError(CLIError):
    """Resolver settings are unusable"""

    def __init__(self, message: str, exit_code: int = EXIT_CONFIGURATION):
        super().__init__(message, exit_code)


def handle_cli_error(error: CLIError):
    """
    Log a CLI error, print it to stderr and exit

    Args:
        error: CLI error instance
    """
    logging.error(f"{error.__class__.__name__} (exit {error.exit_code}): {error.message}")
    click.echo(f"Error: {error.message}", err=True)
    sys.exit(error.exit_code)


def safe_execute(func):
    """
    Decorator that turns command failures into exit codes

    CLIError keeps its own code, resolver exceptions are mapped with
    exit_code_for. Anything else is logged with its traceback and, unless
    DEBUG is set, reported in one line.

    Args:
        func: Command callback to wrap

    Returns:
        Wrapped callback
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CLIError as e:
            handle_cli_error(e)
        except MessageResolverException as e:
            handle_cli_error(CLIError(format_exception_details(e), exit_code=exit_code_for(e)))
        except click.Abort:
            click.echo("Aborted", err=True)
            sys.exit(EXIT_UNEXPECTED)
        except Exception as e:
            logging.exception(f"Unexpected error in '{func.__name__}' command")
            if config.debug_mode:
                raise
            click.echo(f"An unexpected error occurred: {e}", err=True)
            click.echo(DEBUG_HINT, err=True)
            sys.exit(EXIT_UNEXPECTED)

    return wrapper
