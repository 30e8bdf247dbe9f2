import json
import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.registry import URLRegistry
from linkshortener.dao.redis import ShortURLRedisDAO
from linkshortener.exceptions import ConfigurationError, URLValidationError
from linkshortener.utils import load_config, get_short_url, app_prefix, get_user_id
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    INVALID_URL,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
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
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract the optional Amazon Cognito user id from Lambda event
    - Step 2: Extract original URL from request body
    - Step 3: Validate and store the URL (via the URL registry)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: original url (provided in request)
            short_url: newly generated short url
            shortcode: newly generated shortcode
        400: Bad client request
            message: indicate cause of bad request (invalid JSON, missing or invalid target_url)
            errorCode: INVALID_JSON_BODY | MISSING_TARGET_URL | INVALID_URL
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['message']
        'Successfully shortened https://example.com to http://localhost:3000/1C'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for short URLs')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract user id from Cognito (anonymous links are allowed)
    owner = get_user_id(event)

    # 2- Extract original URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Request body is not valid JSON. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    target_url = request_body.get('target_url') if isinstance(request_body, dict) else None
    if not target_url:
        logger.info('Missing "target_url" in request body. Responding with 400.', extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    # 3- Validate and store the URL
    registry = URLRegistry(ShortURLRedisDAO(**redis_config, prefix=app_prefix()))
    try:
        short_url = registry.create(target_url, owner=owner)
    except URLValidationError as e:
        logger.info(
            'Target URL failed validation. Responding with 400.',
            extra={'event': INVALID_URL, 'reason': e.reason},
        )
        return response_400(message=f"invalid 'target_url': {e.reason}", error_code=INVALID_URL)

    # 4- Return successful response to user
    short_url_string = get_short_url(short_url.shortcode, event)
    logger.info(
        'Shortened URL. Responding with 200.',
        extra={'shortcode': short_url.shortcode, 'owner': owner, 'event': SHORTEN_SUCCESS},
    )
    return response_200(
        {
            'message': f'Successfully shortened {short_url.target} to {short_url_string}',
            'target_url': short_url.target,
            'short_url': short_url_string,
            'shortcode': short_url.shortcode,
        }
    )
