import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from linkshortener.types import LambdaEvent, LambdaContext, LambdaConfiguration
from linkshortener.lambdas.list_urls import app
from linkshortener.models import ShortURLModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.exceptions import MissingEnvironmentVariableError


def make_event(claims: dict | None) -> LambdaEvent:
    request_context = {'resourcePath': '/v1/urls', 'httpMethod': 'GET', 'domainName': 'sho.rt', 'stage': 'Prod'}
    if claims is not None:
        request_context['authorizer'] = {'claims': claims}
    return cast(
        LambdaEvent,
        {
            'resource': '/v1/urls',
            'httpMethod': 'GET',
            'path': '/v1/urls',
            'requestContext': request_context,
        },
    )


@pytest.fixture
def successful_event_200() -> LambdaEvent:
    return make_event({'sub': 'user123'})


class TestListUrlsHandler:
    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'list_urls'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})

    @pytest.fixture
    def short_url_dao(self) -> ShortURLBaseDAO:
        dao = MagicMock(spec=ShortURLBaseDAO)
        dao.list_by_owner.return_value = [
            ShortURLModel(id=3, target='https://example.com/first', owner='user123'),
            ShortURLModel(id=100, target='https://www.google.com', owner='user123'),
        ]
        return dao

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        short_url_dao: ShortURLBaseDAO,
    ) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'ShortURLRedisDAO', lambda *a, **kw: short_url_dao)

        self.context = context
        self.config = config
        self.short_url_dao = short_url_dao

    def test_lambda_handler(self, successful_event_200: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert response['headers']['Content-Type'] == 'application/json'
        assert body == {
            'urls': [
                {'shortcode': '3', 'short_url': 'https://sho.rt/3', 'target_url': 'https://example.com/first'},
                {'shortcode': '1C', 'short_url': 'https://sho.rt/1C', 'target_url': 'https://www.google.com'},
            ],
            'count': 2,
        }
        self.short_url_dao.list_by_owner.assert_called_once_with('user123')

    def test_lambda_handler_without_links(self, successful_event_200: LambdaEvent) -> None:
        self.short_url_dao.list_by_owner.return_value = []

        response = app.lambda_handler(successful_event_200, self.context)

        assert response['statusCode'] == 200
        assert json.loads(response['body']) == {'urls': [], 'count': 0}

    @pytest.mark.parametrize('claims', [None, {}, {'sub': ''}])
    def test_lambda_handler_without_user(self, claims: dict | None) -> None:
        response = app.lambda_handler(make_event(claims), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 401
        assert body['message'] == "Unauthorized (missing 'sub' in JWT claims)"
        assert body['errorCode'] == 'MISSING_USER_ID'
        self.short_url_dao.list_by_owner.assert_not_called()

    def test_lambda_handler_with_null_authorizer(self) -> None:
        event = make_event(None)
        event['requestContext']['authorizer'] = None

        response = app.lambda_handler(event, self.context)

        assert response['statusCode'] == 401
        assert json.loads(response['body'])['errorCode'] == 'MISSING_USER_ID'

    def test_lambda_handler_with_missing_environment(self, monkeypatch: MonkeyPatch, successful_event_200: LambdaEvent) -> None:
        def load_config(*args, **kwargs):
            raise MissingEnvironmentVariableError("Missing required environment variables: 'APPCONFIG_APP_ID'")

        monkeypatch.setattr(app, 'load_config', load_config)

        response = app.lambda_handler(successful_event_200, self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body']) == {'message': 'Internal Server Error'}
