"""
Policy commands for harborrp.

Shows the retention policy as it will be applied.
"""

import json
from typing import Optional

import click

from ..config import load_config
from ..exit_codes import CommandError, exit_with_code
from ..policy import get_policy_path, load_policy


@click.group('policy')
def policy_cmd():
    """Inspect the retention policy."""
    pass


@policy_cmd.command('show')
@click.option('--path', 'policy_path', type=click.Path(dir_okay=False),
              help='Policy file (default: policy.path from config, ./rp.yaml)')
def show_policy(policy_path: Optional[str]):
    """Print the parsed retention policy as JSON.

    Examples:
        harborrp policy show
        harborrp policy show --path /etc/harborrp/rp.yaml
    """
    path = policy_path or get_policy_path(load_config())
    try:
        policy = load_policy(path)
    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")
    click.echo(json.dumps(policy.to_dict(), indent=2))
