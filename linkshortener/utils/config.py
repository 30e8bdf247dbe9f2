"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`).

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "redirect_url": {
                "redis": { ... }
            },
            "list_urls": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document, determined by the current application environment.

When running locally (SAM or plain `APP_ENV=local`), configuration may instead
come from a local AppConfig agent or from a YAML file holding the Lambda's
section directly:

    config/
    ├── shorten_url/
    │   └── local.yaml
    ├── redirect_url/
    │   └── local.yaml
    └── list_urls/
        └── local.yaml

    # config/redirect_url/local.yaml
    redis:
      host: localhost
      port: 6379
      db: 0

Typical usage inside a Lambda handler:
    >>> from linkshortener.utils.config import load_config
    >>> config = load_config('shorten_url')
    >>> print(config['redis']['host'])
    localhost
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from pathlib import Path
from collections.abc import Callable

import boto3
import yaml

from linkshortener.types import AppConfig, LambdaConfiguration
from linkshortener.constants import ENV
from linkshortener.exceptions import BadConfigurationError
from linkshortener.utils.helpers import require_environment
from linkshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = frozenset({'redis'})


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def select_backend_config(document: AppConfig, function_name: str) -> LambdaConfiguration:
    """Extract the active backend's section for one Lambda from an AppConfig document

    Raises:
        BadConfigurationError:
            If the active backend is unsupported or the Lambda has no section for it.
    """
    backend = document.get('active_backend')
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f"Unsupported active backend '{backend}' (supported: {sorted(SUPPORTED_BACKENDS)}).")

    try:
        section = document['configs'][function_name][backend]
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"Missing '{backend}' configuration for '{function_name}'.") from e

    return {backend: section}


def _sam_load_local_appconfig(func: Callable) -> Callable:
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local agent.
        - Else, call the wrapped function.

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> LambdaConfiguration:
        if not running_locally():
            return func(function_name, *args, **kwargs)
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not agent_url:
            return func(function_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'functionName': function_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = select_backend_config(document, function_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'functionName': function_name, 'build': document.get('build')})
        return data

    return wrapper


def _load_local_yaml_config(func: Callable) -> Callable:
    """Decorator: load configuration from `config/<function>/<env>.yaml` when running locally.

    Falls through to the wrapped function when not running locally or when
    no YAML file exists for the function and environment.
    """

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> LambdaConfiguration:
        path = project_root() / 'config' / function_name / f'{app_env()}.yaml'
        if not running_locally() or not path.is_file():
            return func(function_name, *args, **kwargs)

        logger.debug('Trying to load configuration from local YAML file.', extra={'path': str(path), 'functionName': function_name})
        with path.open(encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        backends = [key for key in data if key in SUPPORTED_BACKENDS] if isinstance(data, dict) else []
        if len(backends) != 1:
            raise BadConfigurationError(f'Expected exactly one supported backend section in {path} (supported: {sorted(SUPPORTED_BACKENDS)}).')

        backend = backends[0]
        return {backend: data[backend]}

    return wrapper


@_sam_load_local_appconfig
@_load_local_yaml_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(function_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        function_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The Lambda's active backend config section, e.g. {'redis': {...}}.

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is not set.
        BadConfigurationError:
            If the document has no usable section for this Lambda.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'functionName': function_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = select_backend_config(document, function_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'functionName': function_name, 'build': document.get('build')})
    return data
