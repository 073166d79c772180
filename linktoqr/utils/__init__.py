from linktoqr.utils.config import app_env, app_name, project_root, app_prefix, load_config, redis_config
from linktoqr.utils.helpers import base_url, get_short_url, parse_datetime, require_environment, guarantee_500_response
from linktoqr.utils.shortener import generate_shortcode
from linktoqr.utils.credentials import hash_password, verify_password, dummy_hash
from linktoqr.utils.quota import limit_for, format_limit, resolve_plan
from linktoqr.utils.validators import validate_destination
from linktoqr.utils.runtime import running_locally, get_user_id
from linktoqr.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'hash_password',
    'verify_password',
    'dummy_hash',
    'limit_for',
    'format_limit',
    'resolve_plan',
    'validate_destination',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'redis_config',
    'base_url',
    'get_short_url',
    'parse_datetime',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'get_user_id',
    'initialize_logging',
]
