from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ShortURLAnalytics:
    """Aggregated resolution statistics of a short URL.

    Rows are created implicitly by the first recorded resolution. A shortcode
    without any resolution is represented by the zero-valued record returned
    from `ShortURLAnalytics.empty()`.

    Attributes:
        shortcode (str):
            Shortcode the statistics belong to (logical join with ShortURLModel).
        total_resolutions (int):
            Number of recorded resolutions. Never decreases.
        last_resolved_at (Optional[datetime]):
            UTC timestamp of the latest resolution, None before the first one.

    Example:
        >>> ShortURLAnalytics.empty('abc123')
        ShortURLAnalytics(shortcode='abc123', total_resolutions=0, last_resolved_at=None)
    """

    shortcode: str
    total_resolutions: int = 0
    last_resolved_at: Optional[datetime] = None

    @classmethod
    def empty(cls, shortcode: str) -> 'ShortURLAnalytics':
        return cls(shortcode=shortcode, total_resolutions=0, last_resolved_at=None)

    def to_dict(self) -> dict:
        return {
            'shortcode': self.shortcode,
            'total_resolutions': self.total_resolutions,
            'last_resolved_at': self.last_resolved_at.isoformat() if self.last_resolved_at else None,
        }
