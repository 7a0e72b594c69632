"""Command line interface of the URL shortener.

Usage:
    urlshortener [--config FILE] [--backend NAME] [--log-level LEVEL] [--log-format json|text] <command> ...

Commands:
    shorten URL [--expires-at ISO] [--ios URL] [--android URL] [--desktop URL] [--fallback URL]
    resolve CODE [--user-agent UA]
    analytics CODE
    init-db

Every command prints one JSON document to stdout. Errors are printed as
{"error": ..., "errorCode": ...} to stderr with exit status 1. An unresolvable
shortcode (missing or expired) also exits with status 1.

Example:
    $ URLSHORTENER_CONFIG_FILE=config/local.yml urlshortener shorten https://example.com --ios myapp://home
    {"shortcode": "q7XrJmNa", "short_url": "http://localhost:8000/q7XrJmNa", ...}
"""

import os
import sys
import json
import logging
import argparse
from typing import Any

from urlshortener.constants import ENV
from urlshortener.exceptions import URLShortenerError
from urlshortener.models import DeepLinkTargets
from urlshortener.services import URLShortener
from urlshortener.utils.helpers import parse_datetime
from urlshortener.utils.logging import initialize_logging


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='urlshortener',
        description='Shorten URLs, resolve shortcodes and inspect resolution statistics',
    )
    parser.add_argument(
        '--config',
        default=None,
        help=f'Path to a YAML/JSON configuration document (default: ${ENV.App.CONFIG_FILE})',
    )
    parser.add_argument(
        '--backend',
        default=None,
        help=f'Override the active backend of the configuration document (default: ${ENV.App.BACKEND})',
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help=f'Log level (default: ${ENV.App.LOG_LEVEL} or INFO)',
    )
    parser.add_argument(
        '--log-format',
        default=None,
        choices=('json', 'text'),
        help=f'Log record format (default: ${ENV.App.LOG_FORMAT} or json)',
    )
    commands = parser.add_subparsers(dest='command', required=True)

    shorten = commands.add_parser('shorten', help='Create a short URL')
    shorten.add_argument('url', help='Absolute HTTP/HTTPS URL to shorten')
    shorten.add_argument('--expires-at', default=None, help='Expiry as ISO-8601 timestamp (naive values are UTC)')
    shorten.add_argument('--ios', default=None, help='Deep link for iPhone/iPad/iPod clients')
    shorten.add_argument('--android', default=None, help='Deep link for Android clients')
    shorten.add_argument('--desktop', default=None, help='Target for other clients')
    shorten.add_argument('--fallback', default=None, help='Target when no platform target applies (default: URL)')

    resolve = commands.add_parser('resolve', help='Resolve a shortcode to its destination URL')
    resolve.add_argument('shortcode')
    resolve.add_argument('--user-agent', default=None, help='Client platform hint (User-Agent header)')

    analytics = commands.add_parser('analytics', help='Show resolution statistics of a shortcode')
    analytics.add_argument('shortcode')

    commands.add_parser('init-db', help='Create the tables/indexes of the active backend')

    return parser


def _print(document: dict[str, Any], stream=None) -> None:
    print(json.dumps(document), file=stream or sys.stdout)


def _run(args: argparse.Namespace) -> int:
    shortener = URLShortener.from_config()

    if args.command == 'shorten':
        try:
            expires_at = parse_datetime(args.expires_at)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f'invalid --expires-at value: {args.expires_at!r}') from e

        deep_links = DeepLinkTargets.from_fields(args.ios, args.android, args.desktop, args.fallback)
        _print(shortener.shorten(args.url, expires_at=expires_at, deep_links=deep_links).to_dict())
        return 0

    if args.command == 'resolve':
        target = shortener.resolve(args.shortcode, args.user_agent)
        _print({'shortcode': args.shortcode, 'target_url': target})
        return 0 if target is not None else 1

    if args.command == 'analytics':
        _print(shortener.analytics(args.shortcode).to_dict())
        return 0

    # init-db
    shortener.dao.provision()
    _print({'message': f'Provisioned {type(shortener.dao).__name__} data store.'})
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Steps:
        - Parse CLI arguments
        - Apply --config/--backend overrides to the environment
        - Initialize logging
        - Build the URL shortener from configuration and run the command

    Returns:
        int: process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        os.environ[ENV.App.CONFIG_FILE] = args.config
    if args.backend:
        os.environ[ENV.App.BACKEND] = args.backend

    initialize_logging(args.log_level, args.log_format)

    try:
        return _run(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except URLShortenerError as e:
        logger.debug('Command failed.', exc_info=True, extra={'command': args.command})
        _print({'error': str(e), 'errorCode': e.error_code}, stream=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
