"""
Repository retention command for harborrp.

Scores every public repository against the retention policy, lists them
lowest score first, asks how many to delete and soft-deletes them.
"""

import sys
from typing import Optional

import click

from ..config import load_config, configure_logging
from ..exit_codes import INTERRUPTED, CommandError, exit_with_code
from ..infra import HarborClient, SessionStore
from ..policy import get_policy_path, load_policy
from ..render import console, render_eviction_result, render_gc_hint, render_ranking
from ..services import EvictionController, analyse_repositories


def read_line(prompt: str) -> Optional[str]:
    """Show ``prompt`` and read one line from stdin; None at end of input."""
    click.echo(prompt, nl=False)
    line = sys.stdin.readline()
    if not line:
        click.echo()
        return None
    return line.rstrip('\r\n')


@click.command('repos-retention')
def repos_retention_handler():
    """Delete the lowest-scored repositories by retention policy.

    Scores all public repositories using the policy file, shows them ranked
    from lowest to highest score, then asks how many of the lowest ones to
    delete (at most 50). Deletion is a soft delete: run registry garbage
    collection afterwards to reclaim storage.

    Examples:
        harborrp repos-retention
        HARBORRP_POLICY_PATH=/etc/harborrp/rp.yaml harborrp repos-retention
    """
    config = load_config()
    configure_logging(config)

    try:
        policy = load_policy(get_policy_path(config))
        session_id = SessionStore(config['session']['path']).load()
        client = HarborClient.from_config(config, session_id=session_id)

        analysis = analyse_repositories(client, policy)
        console.print(
            f"Current number of public repositories: {analysis.statistics.public_repo_count}"
        )
        render_ranking(analysis.ranking.listing)

        controller = EvictionController(read_line=read_line, echo=click.echo)
        count = controller.select()
        if count is None:
            console.print("[yellow]Nothing selected, no repository deleted.[/yellow]")
            return

        console.print("\n=== Start soft deletion ===\n")
        result = controller.execute(analysis.ranking.heap, count, client.delete_repository)
        render_eviction_result(result)
        console.print("\n=== Finish soft deletion ===\n")

        render_gc_hint()
    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")
    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "\nInterrupted, remaining repositories were not deleted")
