"""
Retention policy file loading.

The policy lives at a fixed relative path (``./rp.yaml`` by default) with
three sections, each ``{base, factors: [{weight, range: {low, high}}]}``:

    update_time:
      base: 10
      factors:
        - weight: 1.0
          range: {low: 0, high: 30}
    pull_count:
      base: 5
      factors: []
    tags_count:
      base: 2
      factors: []
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .domain.policy import RetentionPolicy
from .exit_codes import ConfigLoadError

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = './rp.yaml'


def get_policy_path(config: Optional[Dict[str, Any]] = None) -> Path:
    """Resolve the policy file path from config, falling back to ./rp.yaml."""
    path = (config or {}).get('policy', {}).get('path') or DEFAULT_POLICY_PATH
    return Path(path).expanduser()


def load_policy(path: Path) -> RetentionPolicy:
    """
    Load and validate a retention policy file.

    YAML is the native format; files ending in ``.json`` are read as JSON.

    Args:
        path: Policy file path

    Returns:
        Parsed RetentionPolicy

    Raises:
        ConfigLoadError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigLoadError(f"Policy file not found: {path}") from e
    except OSError as e:
        raise ConfigLoadError(f"Cannot read policy file {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigLoadError(f"Cannot parse policy file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Policy file {path} must contain a mapping, got {type(data).__name__}")

    try:
        policy = RetentionPolicy.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigLoadError(f"Malformed policy in {path}: {e}") from e

    logger.debug(f"Loaded retention policy from {path}")
    return policy
