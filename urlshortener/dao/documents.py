"""Conversion between ShortURLModel/ShortURLAnalytics and flat data store documents.

Document-family and key-value backends (MongoDB, Redis, DynamoDB, memory) all
store the same flat document shape:

    {
        "id": "6f1c...",
        "code": "q7XrJmNa",
        "original_url": "https://example.com",
        "created_at_utc": <datetime | ISO-8601 string>,
        "expires_at_utc": <datetime | ISO-8601 string | null>,
        "deep_link_ios": "myapp://item/42",
        "deep_link_android": null,
        "deep_link_desktop": null,
        "deep_link_fallback": "https://example.com"
    }

Fields that are None are omitted when dumping. Deep-link fields are always
optional, so documents written before deep links existed load with
`deep_links=None`.
"""

from datetime import datetime
from typing import Any

from urlshortener.models import DeepLinkTargets, ShortURLModel, ShortURLAnalytics
from urlshortener.types import Document
from urlshortener.utils.helpers import parse_datetime


DEEP_LINK_FIELDS = {
    'ios_url': 'deep_link_ios',
    'android_url': 'deep_link_android',
    'desktop_url': 'deep_link_desktop',
    'fallback_url': 'deep_link_fallback',
}


def _dump_datetime(value: datetime | None, iso: bool) -> Any:
    if value is None or not iso:
        return value
    return value.isoformat()


def dump_short_url(short_url: ShortURLModel, *, iso: bool = False) -> Document:
    """Convert a ShortURLModel into a flat document

    Args:
        short_url (ShortURLModel): the model to convert.
        iso (bool): render datetimes as ISO-8601 strings (for JSON-only stores).
    """
    document = {
        'id': short_url.id,
        'code': short_url.shortcode,
        'original_url': short_url.original_url,
        'created_at_utc': _dump_datetime(short_url.created_at, iso),
        'expires_at_utc': _dump_datetime(short_url.expires_at, iso),
    }
    if short_url.deep_links is not None:
        for attr, key in DEEP_LINK_FIELDS.items():
            document[key] = getattr(short_url.deep_links, attr)
    return {key: value for key, value in document.items() if value is not None}


def load_short_url(document: Document) -> ShortURLModel:
    deep_links = DeepLinkTargets.from_fields(**{attr: document.get(key) for attr, key in DEEP_LINK_FIELDS.items()})
    return ShortURLModel.create(
        shortcode=document['code'],
        original_url=document['original_url'],
        expires_at=parse_datetime(document.get('expires_at_utc')),
        deep_links=deep_links,
        created_at=parse_datetime(document.get('created_at_utc')),
        id=None if document.get('id') is None else str(document['id']),
    )


def load_analytics(shortcode: str, document: Document | None) -> ShortURLAnalytics:
    if not document:
        return ShortURLAnalytics.empty(shortcode)
    return ShortURLAnalytics(
        shortcode=shortcode,
        total_resolutions=int(document.get('total_resolutions') or 0),
        last_resolved_at=parse_datetime(document.get('last_resolved_at_utc')),
    )
