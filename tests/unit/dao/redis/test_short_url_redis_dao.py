"""Unit tests for the ShortURLRedisDAO

Test coverage includes:

1. Insertion behavior
   - Validates inserting anonymous short URLs stores only the URL.
   - Validates inserting owned short URLs stores the owner and indexes the id.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms duplicate ids raise ShortURLAlreadyExistsError.
   - Confirms Redis connection errors raise DataStoreError.

2. Retrieval behavior
   - Ensures fetching existing ids returns a populated ShortURLModel.
   - Validates invalid parameter types raise type errors.
   - Confirms missing keys raise ShortURLNotFoundError.
   - Confirms Redis connection errors raise DataStoreError.

3. Listing by owner
   - Ensures links are returned oldest first.
   - Ensures owners without links get an empty list.
   - Ensures dangling index entries are skipped.

4. Id allocation
   - Ensures ids are allocated by incrementing the global counter.
   - Confirms Redis connectivity issues raise DataStoreError.
"""

import re
from unittest.mock import MagicMock, call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from linkshortener.models import ShortURLModel
from linkshortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from linkshortener.dao.redis import ShortURLRedisDAO


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def app_prefix():
    """Provide a consistent Redis key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def redis_client():
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.exists.return_value = False
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    return _redis_client


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a ShortURLRedisDAO instance with a mocked Redis client."""
    return ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_insert_anonymous_short_url(dao, redis_client):
    """Ensure anonymous links store only the URL key."""
    short_url = ShortURLModel(id=100, target='https://www.google.com')

    result = dao.insert(short_url)

    assert result is dao
    redis_client.exists.assert_called_once_with('testapp:test:links:100:url')
    redis_client.set.assert_called_once_with('testapp:test:links:100:url', 'https://www.google.com')
    redis_client.rpush.assert_not_called()
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.execute.assert_called_once()


def test_insert_owned_short_url(dao, redis_client):
    """Ensure owned links store the owner and are appended to the owner's index."""
    short_url = ShortURLModel(id=100, target='https://www.google.com', owner='user123')

    dao.insert(short_url)

    redis_client.set.assert_has_calls(
        [
            call('testapp:test:links:100:url', 'https://www.google.com'),
            call('testapp:test:links:100:owner', 'user123'),
        ],
        any_order=False,
    )
    redis_client.rpush.assert_called_once_with('testapp:test:users:user123:links', 100)
    redis_client.execute.assert_called_once()


def test_insert_short_url_with_invalid_type(dao):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert('https://example.com/notamodel')


def test_insert_short_url_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert(ShortURLModel(id=1, target='https://example.com/failure'))


def test_insert_short_url_with_redis_timeout(dao, redis_client):
    redis_client.exists.side_effect = redis.exceptions.TimeoutError('Timeout')

    with pytest.raises(DataStoreError):
        dao.insert(ShortURLModel(id=1, target='https://example.com/failure'))


def test_insert_short_url_which_already_exists(dao, redis_client):
    """Ensure duplicate ids raise ShortURLAlreadyExistsError."""
    redis_client.exists.return_value = True

    with pytest.raises(ShortURLAlreadyExistsError, match=re.escape("Short URL with id 100 (code '1C') already exists.")):
        dao.insert(ShortURLModel(id=100, target='https://example.com/duplicate'))

    redis_client.set.assert_not_called()


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_anonymous_short_url(dao, redis_client):
    redis_client.execute.return_value = ['https://www.google.com', None]

    short_url = dao.get(100)

    assert short_url == ShortURLModel(id=100, target='https://www.google.com', owner=None)
    assert short_url.shortcode == '1C'
    redis_client.get.assert_has_calls(
        [call('testapp:test:links:100:url'), call('testapp:test:links:100:owner')],
        any_order=False,
    )


def test_get_owned_short_url(dao, redis_client):
    redis_client.execute.return_value = ['https://www.google.com', 'user123']

    short_url = dao.get(100)

    assert short_url.owner == 'user123'


def test_get_short_url_with_invalid_type(dao):
    """Ensure shortcodes must be decoded before lookup."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get('1C')


def test_get_short_url_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during get raise DataStoreError."""
    redis_client.get.side_effect = redis.exceptions.ConnectionError('Connection Error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.get(100)


def test_get_short_url_which_does_not_exist(dao, redis_client):
    """Ensure missing ids raise ShortURLNotFoundError."""
    redis_client.execute.return_value = [None, None]

    with pytest.raises(ShortURLNotFoundError, match='Short URL with id 100 not found'):
        dao.get(100)


# -------------------------------
# 3. Listing by owner
# -------------------------------


def test_list_by_owner(dao, redis_client):
    """Ensure an owner's links are returned oldest first."""
    redis_client.lrange.return_value = ['3', '7', '12']
    redis_client.execute.return_value = ['https://example.com/3', 'https://example.com/7', 'https://example.com/12']

    short_urls = dao.list_by_owner('user123')

    assert short_urls == [
        ShortURLModel(id=3, target='https://example.com/3', owner='user123'),
        ShortURLModel(id=7, target='https://example.com/7', owner='user123'),
        ShortURLModel(id=12, target='https://example.com/12', owner='user123'),
    ]
    redis_client.lrange.assert_called_once_with('testapp:test:users:user123:links', 0, -1)
    redis_client.get.assert_has_calls(
        [
            call('testapp:test:links:3:url'),
            call('testapp:test:links:7:url'),
            call('testapp:test:links:12:url'),
        ],
        any_order=False,
    )


def test_list_by_owner_without_links(dao, redis_client):
    redis_client.lrange.return_value = []

    assert dao.list_by_owner('user123') == []
    redis_client.execute.assert_not_called()


def test_list_by_owner_skips_missing_links(dao, redis_client):
    redis_client.lrange.return_value = ['3', '7']
    redis_client.execute.return_value = [None, 'https://example.com/7']

    short_urls = dao.list_by_owner('user123')

    assert [short_url.id for short_url in short_urls] == [7]


def test_list_by_owner_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.list_by_owner(None)


def test_list_by_owner_with_redis_connection_error(dao, redis_client):
    redis_client.lrange.side_effect = redis.exceptions.ConnectionError('Connection Error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.list_by_owner('user123')


# -------------------------------
# 4. Id allocation
# -------------------------------


def test_next_id(dao, redis_client):
    """Ensure next_id() increments the global counter."""
    redis_client.incr.return_value = 43
    assert dao.next_id() == 43
    redis_client.incr.assert_called_once_with('testapp:test:links:counter')
    redis_client.get.assert_not_called()


def test_next_id_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during id allocation raise DataStoreError."""
    redis_client.incr.side_effect = redis.exceptions.ConnectionError('Connection Error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.next_id()
