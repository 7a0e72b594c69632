"""Unit tests for get_analytics() in analytics.py."""

from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.models import ShortURLAnalytics
from urlshortener.services.analytics import get_analytics


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def test_never_resolved_shortcode_is_zero_valued():
    assert get_analytics(ShortURLMemoryDAO(), 'abc12345') == ShortURLAnalytics.empty('abc12345')


def test_analytics_after_hits():
    dao = ShortURLMemoryDAO()
    dao.hit('abc12345', NOW)
    dao.hit('abc12345', NOW)

    assert get_analytics(dao, 'abc12345') == ShortURLAnalytics('abc12345', 2, NOW)


def test_data_store_error_propagates():
    dao = MagicMock()
    dao.analytics.side_effect = DataStoreError("DynamoDB table 'urlshortener-short-url-analytics' doesn't exist.")

    with pytest.raises(DataStoreError):
        get_analytics(dao, 'abc12345')
