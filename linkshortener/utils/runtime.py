"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.

    get_user_id(event) -> str | None:
        Cognito user id of the caller, None for anonymous requests.

Example:
    >>> from linkshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from linkshortener.types import LambdaEvent
from linkshortener.constants import ENV


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_user_id(event: LambdaEvent) -> str | None:
    """Extract the caller's identity from the Cognito authorizer claims.

    The API allows anonymous link creation, so a missing claim is not an error
    here. Handlers which need an identity decide how to respond.

    Args:
        event (LambdaEvent): API Gateway event passed to the Lambda handler.

    Returns:
        str | None: value of the 'sub' claim, or None if absent or empty.
    """
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub') or None
