"""CLI interface for UniverseAPI"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import click

from universeapi.application.universe_service import UniverseService
from universeapi.domain.errors import UniverseAPIError
from universeapi.domain.models.request_spec import HttpMethod
from universeapi.infrastructure.config.config_manager import ConfigManager, ConfigurationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    for logger_name in logging.Logger.manager.loggerDict:
        logging.getLogger(logger_name).setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_header_options(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated ``Name: value`` options into a dict (later ones win)

    Raises:
        click.BadParameter: If an option has no colon or an empty name
    """
    headers: Dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected 'Name: value', got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _create_service(ctx: click.Context) -> UniverseService:
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    return UniverseService.from_config(config_manager)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .universeapi.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """UniverseAPI - query Minecraft server status APIs"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.pass_context
def servers(ctx):
    """List registered servers."""
    service = _create_service(ctx)
    for server in sorted(service.servers(), key=lambda s: s.name.lower()):
        version = f" ({server.version})" if server.version else ""
        click.echo(f"{server.name}: {server.base_url}{version}")


@cli.command()
@click.argument("server", type=str)
@click.pass_context
def endpoints(ctx, server: str):
    """List logical endpoints of SERVER."""
    service = _create_service(ctx)
    try:
        config = service.registry.lookup(server)
    except UniverseAPIError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)

    if not config.endpoints:
        click.echo(f"{config.name} defines no named endpoints")
        return
    for name, path in config.endpoints.items():
        click.echo(f"{name}: {path}")


@cli.command()
@click.argument("server", type=str)
@click.argument("endpoint", type=str)
@click.option("--suffix", "-s", type=str, help="Extra path segment, e.g. a player name")
@click.option("--header", "-H", "header", multiple=True, help="Extra header 'Name: value' (repeatable)")
@click.option(
    "--method",
    "-X",
    type=click.Choice([m.value for m in HttpMethod], case_sensitive=False),
    default="GET",
    show_default=True,
)
@click.option("--data", "-d", type=str, help="Request body")
@click.option("--timeout", type=click.IntRange(min=1), help="Per-attempt timeout in seconds. Overrides config.")
@click.option("--max-attempts", type=click.IntRange(min=1, max=10), help="Maximum attempts. Overrides config.")
@click.pass_context
def get(
    ctx,
    server: str,
    endpoint: str,
    suffix: Optional[str],
    header: Tuple[str, ...],
    method: str,
    data: Optional[str],
    timeout: Optional[int],
    max_attempts: Optional[int],
):
    """Fetch ENDPOINT from SERVER and print the JSON result.

    SERVER: Registered server name or a base URL (https://...)
    ENDPOINT: Logical endpoint name or raw path
    """
    verbose = ctx.obj.get("verbose", False)
    headers = parse_header_options(header)
    service = _create_service(ctx)
    if max_attempts is not None:
        service.executor.configure(max_attempts=max_attempts)

    try:
        result = service.fetch_from_server(
            server,
            endpoint,
            headers=headers,
            suffix=suffix,
            method=method.upper(),
            body=data,
            timeout=timeout,
        )
    except UniverseAPIError as e:
        _die(str(e), verbose=verbose, exc=e)

    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
