"""
Session commands for harborrp.

Stores the Harbor ``beegosessionID`` cookie used by authenticated calls.
Obtain it by logging in to the Harbor UI.
"""

import click

from ..config import load_config
from ..exit_codes import CommandError, exit_with_code
from ..infra import SessionStore


@click.group('session')
def session_cmd():
    """Manage the stored Harbor session."""
    pass


@session_cmd.command('set')
@click.argument('session_id')
def set_session(session_id: str):
    """Store SESSION_ID as the Harbor beegosessionID cookie."""
    store = SessionStore(load_config()['session']['path'])
    store.save(session_id.strip())
    click.echo(f"Session saved to {store.path}")


@session_cmd.command('show')
def show_session():
    """Show where the session is stored and a masked session id."""
    store = SessionStore(load_config()['session']['path'])
    try:
        session_id = store.load()
    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")
    masked = session_id[:4] + '*' * max(0, len(session_id) - 4)
    click.echo(f"{store.path}: {masked}")
