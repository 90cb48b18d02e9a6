"""Command-line interface for structuring log messages."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import click
from tqdm import tqdm

from message_resolver.cli.error_handler import (
    ConfigError,
    ResolveError,
    install_exception_handler,
    safe_execute,
)
from message_resolver.config.settings import Config, parse_list
from message_resolver.factory import create_resolver
from message_resolver.lib.exceptions import ResolutionException, format_exception_details
from message_resolver.lib.type_converter import dumps

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]

logger = logging.getLogger(__name__)


def _configure_logging(verbose: int, quiet: bool) -> None:
    level_index = min(verbose, len(LOG_LEVELS) - 1)
    level = LOG_LEVELS[level_index]
    if quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        force=True,
    )


def _build_resolver(ctx: click.Context, components: Optional[str], extra_tags: Optional[str], max_depth: Optional[int]):
    return create_resolver(
        components=parse_list(components) if components is not None else None,
        extra_tags=parse_list(extra_tags) if extra_tags is not None else None,
        max_depth=max_depth,
        config=ctx.obj["config"],
    )


def _read_messages(input_path: Optional[Path], progress: bool) -> Iterable[str]:
    if input_path is None:
        for line in click.get_text_stream("stdin"):
            yield line.rstrip("\r\n")
        return

    lines = input_path.read_text(encoding="utf-8").splitlines()
    if progress:
        yield from tqdm(lines, desc="Resolving", unit="msg", file=sys.stderr)
    else:
        yield from lines


resolver_options = [
    click.option("--components", default=None, help="Comma-separated target components (default: MESSAGE_RESOLVER_COMPONENTS)"),
    click.option("--extra-tags", default=None, help="Comma-separated tag names extracted after api and proxy"),
    click.option("--max-depth", type=int, default=None, help="Nested JSON unpack limit"),
]


def with_resolver_options(func):
    for option in reversed(resolver_options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", count=True, help="Increase verbosity (use up to -vv)")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors")
@click.option("--env-file", type=click.Path(path_type=Path, dir_okay=False), default=None, help="Load settings from this .env file")
@click.pass_context
def cli(ctx: click.Context, verbose: int, quiet: bool, env_file: Optional[Path]) -> None:
    """Turn free-form log messages into JSON documents."""
    _configure_logging(verbose, quiet)
    ctx.obj = {
        "verbose": verbose,
        "quiet": quiet,
        "config": Config(str(env_file) if env_file else None),
    }


@cli.command()
@click.option("--component", "-c", required=True, help="Logger name the messages come from")
@with_resolver_options
@click.option(
    "--input",
    "input_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="File with one message per line (default: stdin)",
)
@click.option("--progress", is_flag=True, help="Show a progress bar when reading a file")
@click.option("--strict", is_flag=True, help="Stop at the first message that fails to resolve")
@click.pass_context
@safe_execute
def resolve(
    ctx: click.Context,
    component: str,
    components: Optional[str],
    extra_tags: Optional[str],
    max_depth: Optional[int],
    input_path: Optional[Path],
    progress: bool,
    strict: bool,
) -> None:
    """Print one JSON document per input message."""
    resolver = _build_resolver(ctx, components, extra_tags, max_depth)
    handle = resolver.resolve_strict if strict else resolver.resolve

    count = 0
    for line_number, message in enumerate(_read_messages(input_path, progress), start=1):
        try:
            result = handle(message, component)
        except ResolutionException as e:
            raise ResolveError(f"line {line_number}: {format_exception_details(e)}") from e
        click.echo(dumps(result))
        count += 1

    logger.info(f"Resolved {count} messages from component '{component}'")


@cli.command()
@click.argument("component")
@with_resolver_options
@click.pass_context
@safe_execute
def check(
    ctx: click.Context,
    component: str,
    components: Optional[str],
    extra_tags: Optional[str],
    max_depth: Optional[int],
) -> None:
    """Report whether messages from COMPONENT would be structured."""
    resolver = _build_resolver(ctx, components, extra_tags, max_depth)
    status = "eligible" if resolver.is_eligible(component) else "not eligible"
    click.echo(f"{component}: {status}")


@cli.command()
@with_resolver_options
@click.pass_context
@safe_execute
def patterns(
    ctx: click.Context,
    components: Optional[str],
    extra_tags: Optional[str],
    max_depth: Optional[int],
) -> None:
    """List bracket tags in extraction order."""
    resolver = _build_resolver(ctx, components, extra_tags, max_depth)
    for name, pattern in resolver.patterns:
        click.echo(f"{name}\t{pattern.pattern}")


@cli.command(name="show-config")
@click.pass_context
@safe_execute
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration and validate it."""
    config = ctx.obj["config"]
    errors = config.validate()

    click.echo(f"components: {', '.join(config.components) or '(none)'}")
    click.echo(f"tags: {', '.join(config.tag_names)}")
    click.echo(f"log level: {config.log_level}")
    if errors:
        raise ConfigError("; ".join(errors))
    click.echo(f"max depth: {config.max_depth}")
    click.echo(f"truncate length: {config.truncate_length}")


def main() -> None:  # pragma: no cover - console entry point
    install_exception_handler()
    cli(prog_name="message-resolver")


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    main()
