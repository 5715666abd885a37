"""Utility functions for application configuration management.

Configuration is stored in a YAML document, one per environment (`APP_ENV`),
under the project's `config/` directory:

    config/
    ├── local.yaml
    └── dev.yaml

The document follows this structure:

    active_backend: redis
    backends:
      redis:
        host: localhost
        port: 6379
        db: 0
      file:
        path: data/records.json
    engine:
      default_validity_minutes: 30
      shortcode_length: 6
      max_generation_attempts: 1000
      base_url: http://localhost:3000

Every section is optional. A missing document yields the defaults below,
i.e. an in-memory record store.

Environment variables used:
    APP_ENV            : Application environment, 'local' by default.
    APP_NAME           : Application name, used to namespace store keys.
    PROJECT_ROOT       : Directory containing `config/`, current directory by default.
    SHORTLINK_CONFIG   : Explicit path to the YAML document (takes precedence).
    SHORTLINK_BACKEND  : Overrides `active_backend`.

Example:
    >>> from shortlink.utils.config import load_config
    >>> config = load_config()
    >>> config['active_backend']
    'memory'
"""

import os
import logging
from pathlib import Path

import yaml

from shortlink.constants import ENV, Backend
from shortlink.exceptions import BadConfigurationError
from shortlink.types import Configuration


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Configuration = {
    'active_backend': Backend.MEMORY.value,
    'backends': {},
    'engine': {},
}


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for store keys

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlink'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlink:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_path() -> Path:
    explicit = os.environ.get(ENV.ShortLink.CONFIG)
    if explicit:
        return Path(explicit)
    return project_root() / 'config' / f'{app_env()}.yaml'


def _read_document(path: Path, required: bool) -> dict:
    if not path.exists():
        if required:
            raise BadConfigurationError(f'Configuration file {path} does not exist.')
        logger.debug('No configuration file found, using defaults.', extra={'configPath': str(path)})
        return {}

    try:
        with path.open(encoding='utf-8') as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping (given type: {type(document)}).')
    return document


def load_config(path: str | os.PathLike | None = None) -> Configuration:
    """Load the application configuration

    Args:
        path (str | os.PathLike | None):
            Explicit path to the YAML document. Defaults to `SHORTLINK_CONFIG`,
            then `<PROJECT_ROOT>/config/<APP_ENV>.yaml`.

    Returns:
        dict: configuration with `active_backend`, `backends` and `engine` keys.

    Raises:
        BadConfigurationError:
            If an explicitly requested file is missing, isn't valid YAML,
            or names an unsupported backend.
    """
    required = path is not None or bool(os.environ.get(ENV.ShortLink.CONFIG))
    resolved = Path(path) if path is not None else config_path()
    document = _read_document(resolved, required=required)

    config = {
        'active_backend': document.get('active_backend', DEFAULT_CONFIG['active_backend']),
        'backends': dict(document.get('backends') or {}),
        'engine': dict(document.get('engine') or {}),
    }

    override = os.environ.get(ENV.ShortLink.BACKEND)
    if override:
        config['active_backend'] = override.lower()

    supported = {backend.value for backend in Backend}
    if config['active_backend'] not in supported:
        raise BadConfigurationError(
            f"Unsupported backend '{config['active_backend']}' (supported: {', '.join(sorted(supported))})."
        )

    logger.debug('Loaded configuration.', extra={'configPath': str(resolved), 'backend': config['active_backend']})
    return config
