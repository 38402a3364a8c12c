"""CLI output formatting helpers."""

from typing import Any

import click
import yaml

from .status import STATUS_CYCLE, StatusValue


def print_config_yaml(data: dict[str, Any], sources: dict[str, str] | None = None) -> None:
    """Print config as YAML, optionally followed by value sources.

    Args:
        data: Configuration data
        sources: Optional mapping of key to source (default, config file, environment)
    """
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())
    if sources:
        click.echo("\nSources:")
        for key in data:
            click.echo(f"  {key}: {sources.get(key, 'default')}")


def counts_to_dict(counts: dict[StatusValue, int]) -> dict[str, int]:
    """Status tally keyed by lowercase status name."""
    return {status.name.lower(): counts.get(status, 0) for status in STATUS_CYCLE}


def print_status_summary(counts: dict[StatusValue, int]) -> None:
    """Print a one-line tally, e.g. "4 cases  ⚪️ Untested: 1  ✅ Pass: 3 ..."."""
    total = sum(counts.values())
    parts = [
        f"{status.value} {status.name.title()}: {counts.get(status, 0)}" for status in STATUS_CYCLE
    ]
    click.echo(f"{total} cases  " + "  ".join(parts))
