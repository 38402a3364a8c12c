"""CLI main entry point."""

import asyncio
import json
import sys

import click

from . import __version__
from .client import ContentClient
from .config import CONFIG_KEYS, load_config, save_config, unset_config
from .errors import MergeError
from .formatters import counts_to_dict, print_config_yaml, print_status_summary
from .gateway import ConsoleNotifier, HttpHostChannel, SaveGateway
from .merge import merge_fragments
from .render.console import print_tree
from .session import CaseMapSession
from .shared.logging import configure_logging, verbosity_to_level
from .status import DEFAULT_USER


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--log-file", type=click.Path(), help="Write JSON logs to this file")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def cli(ctx: click.Context, verbose: int, log_file: str | None, json_output: bool) -> None:
    """Test plan mind map viewer."""
    ctx.ensure_object(dict)
    configure_logging(verbosity_to_level(verbose), log_file=log_file)
    ctx.obj["config"] = load_config()
    ctx.obj["json_output"] = json_output


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"casemap version {__version__}")


@cli.command()
@click.argument("version")
@click.option("--cases-dir", type=click.Path(file_okay=False), help="Root of version directories")
@click.pass_context
def merge(ctx: click.Context, version: str, cases_dir: str | None) -> None:
    """Merge a version's markdown fragments into its _index.md."""
    cases_dir = cases_dir or ctx.obj["config"].cases_dir
    try:
        output = merge_fragments(cases_dir, version)
    except MergeError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    click.echo(f"Successfully created {output}")


@cli.command()
@click.argument("version")
@click.option("-u", "--user", default=DEFAULT_USER, show_default=True, help="Tester name")
@click.option("--server", help="Content store URL (overrides config)")
@click.pass_context
def show(ctx: click.Context, version: str, user: str, server: str | None) -> None:
    """Show a version's test plan with a tester's statuses."""
    config = ctx.obj["config"]

    async def _show() -> CaseMapSession:
        async with ContentClient(server or config.server, timeout=config.timeout) as client:
            gateway = SaveGateway(None, ConsoleNotifier(), ack_delay=config.ack_delay)
            session = CaseMapSession(client, gateway, version=version, user=user)
            await session.load()
            return session

    session = asyncio.run(_show())

    if ctx.obj["json_output"]:
        data = {
            "version": version,
            "user": user,
            "statuses": session.store.to_json(),
            "counts": counts_to_dict(session.counts()),
        }
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if session.tree is not None:
        print_tree(session.tree)
    print_status_summary(session.counts())


@cli.command()
@click.argument("version")
@click.option("-u", "--user", required=True, help="Tester name")
@click.option("--server", help="Content store URL (overrides config)")
@click.option("--host-url", help="Host save endpoint (overrides config)")
@click.pass_context
def edit(
    ctx: click.Context,
    version: str,
    user: str,
    server: str | None,
    host_url: str | None,
) -> None:
    """Mark test case statuses interactively.

    Enter a case id (e.g. TC-001) to cycle its status, 'save' to send the
    results to the host, 'quit' to leave.
    """
    if user == DEFAULT_USER:
        raise click.BadParameter("Please select a tester first", param_hint="--user")

    config = ctx.obj["config"]
    host_url = host_url or config.host_url

    async def _edit() -> None:
        channel = HttpHostChannel(host_url) if host_url else None
        gateway = SaveGateway(channel, ConsoleNotifier(), ack_delay=config.ack_delay)
        async with ContentClient(server or config.server, timeout=config.timeout) as client:
            session = CaseMapSession(client, gateway, version=version, user=user)
            await session.load()
            session.set_edit_mode(True)
            try:
                while True:
                    if session.tree is not None:
                        print_tree(session.tree)
                    reply = await asyncio.to_thread(click.prompt, "Case id, 'save' or 'quit'")
                    command = reply.strip()
                    if command.lower() in ("quit", "q", "exit"):
                        break
                    if command.lower() == "save":
                        result = await session.save()
                        click.echo(f"Save: {result.value}")
                        continue
                    status = session.click(command.upper())
                    if status is None:
                        click.echo(f"Unknown case: {command}", err=True)
                    else:
                        click.echo(f"{command.upper()} -> {status.value} {status.name.title()}")
            finally:
                if channel is not None:
                    await channel.drain()

    asyncio.run(_edit())


@cli.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    loaded = ctx.obj["config"]
    data = loaded.values()
    sources = {key: loaded.get_source(key) for key in data}

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"values": data, "sources": sources}, indent=2))
    else:
        click.echo("casemap Configuration\n")
        print_config_yaml(data, sources)


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set a configuration value."""
    try:
        save_config(key, value)
    except ValueError:
        click.echo(f"Error: Invalid value for {key}: {value}", err=True)
        sys.exit(1)
    click.echo(f"Set {key} = {value}")


@config.command("unset")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
def config_unset(key: str) -> None:
    """Remove a configuration value."""
    if unset_config(key):
        click.echo(f"Unset {key}")
    else:
        click.echo(f"{key} is not set in the config file")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
