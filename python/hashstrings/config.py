'''Defaults for the command line tool.

Loaded from hashstrings.json in the working directory (or its parent), with
hardcoded fallbacks.
'''

import json
import logging
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

CONFIG_NAME = 'hashstrings.json'

# Hardcoded fallback defaults
FALLBACK_DEFAULTS = {
    'extension': '.h',
    'prefix': None,
    'reproducible': False,
    'check': False,
    'verbose': False,
}

_config: dict[str, Any] | None = None


def _find_config() -> Path | None:
    '''Find hashstrings.json next to where the tool is run.'''
    for path in (Path.cwd() / CONFIG_NAME, Path.cwd().parent / CONFIG_NAME):
        if path.exists():
            return path
    return None


def load(reload: bool = False) -> dict[str, Any]:
    '''Load configuration from hashstrings.json or use fallbacks.'''
    global _config
    if _config is not None and not reload:
        return _config

    _config = {'defaults': dict(FALLBACK_DEFAULTS)}
    config_path = _find_config()
    if config_path:
        try:
            with open(config_path) as f:
                _config['defaults'].update(json.load(f).get('defaults', {}))
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            log.warning('ignoring %s: %s', config_path, e)
    return _config


def get_default(key: str, fallback: Any = None) -> Any:
    '''Get a default value from config.'''
    return load()['defaults'].get(key, fallback)
