#!/usr/bin/env python3

import click

from harborrp.commands.repos_retention import repos_retention_handler
from harborrp.commands.tags_retention import tags_retention_handler
from harborrp.commands.policy import policy_cmd
from harborrp.commands.session import session_cmd


@click.group()
@click.version_option(package_name='harborrp')
def cli():
    """harborrp - Retention policies for Harbor registries.

    Ranks repositories by a weighted retention policy and deletes the least
    valuable ones, and prunes old tags per repository.
    """
    pass


# Retention commands
cli.add_command(repos_retention_handler, name='repos-retention')
cli.add_command(tags_retention_handler, name='tags-retention')

# Command groups
cli.add_command(policy_cmd)
cli.add_command(session_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
