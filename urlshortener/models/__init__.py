from urlshortener.models.short_url_model import DeepLinkTargets, ShortURLModel
from urlshortener.models.analytics_model import ShortURLAnalytics


__all__ = [
    'DeepLinkTargets',
    'ShortURLModel',
    'ShortURLAnalytics',
]
