from shortlink.utils.config import app_env, app_name, app_prefix, project_root, load_config
from shortlink.utils.helpers import base_url, get_short_url, format_timestamp, parse_timestamp
from shortlink.utils.shortener import validate_url, validate_shortcode_format, is_shortcode_available, generate_shortcode
from shortlink.utils.expiry import parse_validity, compute_expiry, is_expired
from shortlink.utils.logging import initialize_logging
from shortlink.utils.runtime import running_locally


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'format_timestamp',
    'parse_timestamp',
    'validate_url',
    'validate_shortcode_format',
    'is_shortcode_available',
    'generate_shortcode',
    'parse_validity',
    'compute_expiry',
    'is_expired',
    'initialize_logging',
    'running_locally',
]
