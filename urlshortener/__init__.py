"""urlshortener: short URL lifecycle engine with pluggable storage backends."""

__version__ = '1.0.0'
