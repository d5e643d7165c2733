"""
Tag retention command for harborrp.

Keeps every tag younger than ``--day`` days and at most ``--max`` older
tags per repository; the oldest excess tags are deleted.
"""

import click

from ..config import load_config, configure_logging
from ..exit_codes import INTERRUPTED, CommandError, exit_with_code
from ..infra import HarborClient, SessionStore
from ..render import console, render_tag_outcome, render_tag_report
from ..services import TagRetentionOptions, TagRetentionService


@click.command('tags-retention')
@click.option('--day', '-d', type=click.IntRange(min=0), required=True,
              help='Tags created less than N days ago are never deleted')
@click.option('--max', '-m', 'max_keep', type=click.IntRange(min=0), required=True,
              help='How many tags older than N days to keep per repository')
@click.option('--repo-name', '-n', default='',
              help='Only process repositories matching this name (default: all)')
@click.option('--dry-run', is_flag=True, help='Analyse only, do not delete anything')
def tags_retention_handler(day: int, max_keep: int, repo_name: str, dry_run: bool):
    """Delete old tags of repositories by retention policy.

    For each repository, tags created within the last DAY days are kept.
    Of the older tags, the newest MAX are kept and the rest are deleted,
    oldest first.

    Examples:
        harborrp tags-retention --day 30 --max 5
        harborrp tags-retention -d 30 -m 5 --repo-name library/nginx
        harborrp tags-retention -d 30 -m 5 --dry-run
    """
    config = load_config()
    configure_logging(config)

    options = TagRetentionOptions(day=day, max_keep=max_keep, repo_name=repo_name, dry_run=dry_run)
    scope = f"only on repositories matching [{repo_name}]" if repo_name else "on all repositories"
    console.print(
        f"==> {scope}, max-days-untouched: {day}   max-keep-num-after-Ndays: {max_keep}",
        markup=False,
    )
    if dry_run:
        console.print("[yellow]dry run: analysing only, nothing will be deleted[/yellow]")

    service = None
    try:
        session_id = SessionStore(config['session']['path']).load()
        client = HarborClient.from_config(config, session_id=session_id)
        service = TagRetentionService(client)

        for outcome in service.run(options):
            console.print()
            render_tag_outcome(outcome, day, max_keep)
    except CommandError as e:
        failed = service.last_report.failed_repository if service and service.last_report else None
        if failed:
            exit_with_code(e.exit_code, f"Error in repository {failed}: {e}")
        exit_with_code(e.exit_code, f"Error: {e}")
    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "\nInterrupted, remaining repositories were not processed")

    render_tag_report(service.last_report)
