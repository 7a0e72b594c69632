"""Unit tests for the ShortURLRedisDAO

Test coverage includes:

1. Existence checks
   - Ensures exists() checks the link key.

2. Insertion behavior
   - Validates inserting stores the JSON document with SET NX.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms taken shortcodes raise ShortURLAlreadyExistsError.
   - Confirms Redis connection errors raise DataStoreError.

3. Retrieval behavior
   - Ensures fetching valid shortcodes returns a populated ShortURLModel.
   - Confirms missing keys return None.
   - Confirms documents without deep links load with deep_links=None.

4. Analytics operations
   - Ensures hit() increments the counter and sets the timestamp in one transaction.
   - Ensures analytics() reads the hash (zero-valued when missing).
"""

import re
import json
from datetime import datetime, UTC
from unittest.mock import MagicMock, call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from urlshortener.models import DeepLinkTargets, ShortURLModel, ShortURLAnalytics
from urlshortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError
from urlshortener.dao.redis import RedisKeySchema, ShortURLRedisDAO


CREATED_AT = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


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
    _redis_client.exists.return_value = 0
    _redis_client.set.return_value = True
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    return _redis_client


@pytest.fixture
def key_schema():
    """Mock RedisKeySchema to return predictable key values."""
    mock = MagicMock(spec=RedisKeySchema)
    mock.link_key.return_value = 'testapp:test:links:abc12345'
    mock.link_analytics_key.return_value = 'testapp:test:links:abc12345:analytics'
    return mock


@pytest.fixture
def dao(redis_client, key_schema, app_prefix):
    """Create a ShortURLRedisDAO instance with mocked dependencies."""
    _dao = ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)
    _dao.keys = key_schema
    return _dao


@pytest.fixture
def short_url():
    return ShortURLModel.create(
        'abc12345',
        'https://example.com/test',
        deep_links=DeepLinkTargets(ios_url='myapp://item/42', fallback_url='https://example.com/test'),
        created_at=CREATED_AT,
        id='6f1c3c36-0b4e-4a53-9a4f-3a9a4c4f1d11',
    )


# -------------------------------
# 1. Existence checks
# -------------------------------


@pytest.mark.parametrize('count, expected', [(0, False), (1, True)])
def test_exists(dao, redis_client, count, expected):
    redis_client.exists.return_value = count
    assert dao.exists('abc12345') is expected
    redis_client.exists.assert_called_once_with('testapp:test:links:abc12345')


# -------------------------------
# 2. Insertion behavior
# -------------------------------


def test_insert_short_url(dao, redis_client, short_url):
    """Ensure insertion writes the JSON document with SET NX and no TTL."""
    assert dao.insert(short_url) is dao

    redis_client.set.assert_called_once()
    key, document = redis_client.set.call_args.args
    assert key == 'testapp:test:links:abc12345'
    assert redis_client.set.call_args.kwargs == {'nx': True}
    assert json.loads(document) == {
        'id': '6f1c3c36-0b4e-4a53-9a4f-3a9a4c4f1d11',
        'code': 'abc12345',
        'original_url': 'https://example.com/test',
        'created_at_utc': '2025-10-15T12:00:00+00:00',
        'deep_link_ios': 'myapp://item/42',
        'deep_link_fallback': 'https://example.com/test',
    }


def test_insert_short_url_with_invalid_type(dao):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert('https://example.com/notamodel')


def test_insert_short_url_with_redis_connection_error(dao, redis_client, short_url):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert(short_url)


def test_insert_short_url_which_already_exists(dao, redis_client, short_url):
    """Ensure taken shortcodes (SET NX returns None) raise ShortURLAlreadyExistsError."""
    redis_client.set.return_value = None

    with pytest.raises(ShortURLAlreadyExistsError, match=re.escape("Short URL with code 'abc12345' already exists.")):
        dao.insert(short_url)


# -------------------------------
# 3. Retrieval behavior
# -------------------------------


def test_get_short_url(dao, redis_client):
    """Ensure valid shortcode retrieval returns a complete ShortURLModel."""
    redis_client.get.return_value = json.dumps(
        {
            'id': 'id-1',
            'code': 'abc12345',
            'original_url': 'https://example.com/test',
            'created_at_utc': '2025-10-15T12:00:00+00:00',
            'expires_at_utc': '2026-10-15T12:00:00+00:00',
            'deep_link_android': 'myapp://item/42',
        }
    )

    short_url = dao.get('abc12345')

    redis_client.get.assert_called_once_with('testapp:test:links:abc12345')
    assert short_url == ShortURLModel(
        shortcode='abc12345',
        original_url='https://example.com/test',
        created_at=CREATED_AT,
        expires_at=datetime(2026, 10, 15, 12, 0, tzinfo=UTC),
        deep_links=DeepLinkTargets(android_url='myapp://item/42'),
        id='id-1',
    )


def test_get_short_url_without_deep_links(dao, redis_client):
    """Ensure legacy documents without deep-link fields load with deep_links=None."""
    redis_client.get.return_value = json.dumps(
        {'code': 'abc12345', 'original_url': 'https://example.com/test', 'created_at_utc': '2025-10-15T12:00:00+00:00'}
    )

    short_url = dao.get('abc12345')
    assert short_url.deep_links is None
    assert short_url.expires_at is None


def test_get_short_url_with_invalid_type(dao):
    """Ensure invalid shortcode types raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(12345)


def test_get_short_url_which_does_not_exist(dao, redis_client):
    """Ensure missing shortcodes return None."""
    redis_client.get.return_value = None
    assert dao.get('abc12345') is None


def test_get_short_url_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during get raise DataStoreError."""
    redis_client.get.side_effect = redis.exceptions.ConnectionError('Connection Error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.get('abc12345')


# -------------------------------
# 4. Analytics operations
# -------------------------------


def test_hit(dao, redis_client):
    """Ensure hit() runs HINCRBY and HSET in one MULTI/EXEC transaction."""
    dao.hit('abc12345', datetime(2025, 10, 15, 14, 30, tzinfo=UTC))

    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.hincrby.assert_called_once_with('testapp:test:links:abc12345:analytics', 'total_resolutions', 1)
    redis_client.hset.assert_called_once_with(
        'testapp:test:links:abc12345:analytics', 'last_resolved_at_utc', '2025-10-15T14:30:00+00:00'
    )
    redis_client.execute.assert_called_once()


def test_hit_with_redis_connection_error(dao, redis_client):
    redis_client.execute.side_effect = redis.exceptions.TimeoutError('Timeout')

    with pytest.raises(DataStoreError):
        dao.hit('abc12345', datetime(2025, 10, 15, tzinfo=UTC))


def test_analytics(dao, redis_client):
    redis_client.hgetall.return_value = {'total_resolutions': '7', 'last_resolved_at_utc': '2025-10-15T14:30:00+00:00'}

    assert dao.analytics('abc12345') == ShortURLAnalytics(
        shortcode='abc12345',
        total_resolutions=7,
        last_resolved_at=datetime(2025, 10, 15, 14, 30, tzinfo=UTC),
    )
    redis_client.hgetall.assert_has_calls([call('testapp:test:links:abc12345:analytics')])


def test_analytics_without_resolutions(dao, redis_client):
    """Ensure missing analytics hashes yield a zero-valued record."""
    redis_client.hgetall.return_value = {}
    assert dao.analytics('abc12345') == ShortURLAnalytics.empty('abc12345')
