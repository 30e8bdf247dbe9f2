from linkshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config
from linkshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from linkshortener.utils.runtime import running_locally, get_user_id
from linkshortener.utils.shortener import encode_shortcode, decode_shortcode
from linkshortener.utils.validators import validate_url
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'encode_shortcode',
    'decode_shortcode',
    'validate_url',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'get_user_id',
    'initialize_logging',
]
