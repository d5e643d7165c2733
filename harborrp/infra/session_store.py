"""
Session store infrastructure for harborrp.

Keeps the Harbor ``beegosessionID`` cookie in a small JSON file with:
- Atomic writes (write to temp, then rename)
- Automatic parent directory creation
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict
import logging

from ..exit_codes import ConfigLoadError

logger = logging.getLogger(__name__)

SESSION_KEY = 'beegosessionID'


class SessionStore:
    """
    JSON-backed holder for the Harbor session cookie.

    Example:
        store = SessionStore(Path("~/.harborrp/session.json"))
        store.save("3f2a...")
        session_id = store.load()
    """

    def __init__(self, path: Path):
        """
        Initialize SessionStore.

        Args:
            path: Path to JSON file
        """
        self.path = Path(path).expanduser()

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
                f.write('\n')

            os.replace(temp_path, self.path)

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def read(self) -> Dict[str, Any]:
        """
        Read the session file.

        Raises:
            ConfigLoadError: If the file is missing or not valid JSON
        """
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigLoadError(
                f"No Harbor session at {self.path}; run 'harborrp session set <id>' first"
            ) from e
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigLoadError(f"Cannot read session file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigLoadError(f"Session file {self.path} must contain a JSON object")
        return data

    def load(self) -> str:
        """
        Return the stored session id.

        Raises:
            ConfigLoadError: If no usable session id is stored
        """
        session_id = self.read().get(SESSION_KEY)
        if not session_id:
            raise ConfigLoadError(f"Session file {self.path} has no {SESSION_KEY}")
        return str(session_id)

    def save(self, session_id: str) -> None:
        """Store a session id, replacing any previous one."""
        self._write_atomic({SESSION_KEY: session_id})
        logger.info(f"Session saved to {self.path}")
