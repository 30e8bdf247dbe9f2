import json
import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.registry import URLRegistry
from linkshortener.dao.redis import ShortURLRedisDAO
from linkshortener.exceptions import ConfigurationError
from linkshortener.utils import load_config, get_short_url, app_prefix, get_user_id
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.list_urls.constants import MISSING_USER_ID, LIST_SUCCESS


logger = logging.getLogger(__name__)


def response_500(message: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_401(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Unauthorized'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 401,
        'body': json.dumps(body),
    }


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to list the caller's short URLs

    Steps:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Fetch the user's short URLs (oldest first)
    - Step 3: Respond with 200 and the list

    HTTP responses:
        200: Success
            urls: [{shortcode, short_url, target_url}, ...]
            count: number of URLs
        401: Unauthorized
            message: missing Cognito user id
        500: Internal server error

    Example:
        >>> event = {'requestContext': {'authorizer': {'claims': {'sub': 'user123'}}}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['urls'][0]['shortcode']
        '1C'
    """
    # 0- Get application's config
    try:
        app_config = load_config('list_urls')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for list URLs function. Responding with 500.')
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract user id from Cognito
    user_id = get_user_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_USER_ID)

    # 2- Fetch the user's short URLs
    registry = URLRegistry(ShortURLRedisDAO(**redis_config, prefix=app_prefix()))
    short_urls = registry.list_by_owner(user_id)

    # 3- Respond with the list
    logger.info(
        'Listed short URLs of user. Responding with 200.',
        extra={'owner': user_id, 'count': len(short_urls), 'event': LIST_SUCCESS},
    )
    return response_200(
        {
            'urls': [
                {
                    'shortcode': short_url.shortcode,
                    'short_url': get_short_url(short_url.shortcode, event),
                    'target_url': short_url.target,
                }
                for short_url in short_urls
            ],
            'count': len(short_urls),
        }
    )
