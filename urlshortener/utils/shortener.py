"""Shortcode generation utility

This module generates short, uniformly distributed, unpredictable shortcodes
from a cryptographically secure random source and retries on collision.

Functions:
    generate_shortcode(length=8, alphabet=Shortcode.ALPHABET):
        Generate a random shortcode suitable for use as a URL slug.

    generate_unique_shortcode(dao, length=8, max_attempts=8, alphabet=Shortcode.ALPHABET):
        Generate shortcodes until one is not taken in the data store.

    validate_alphabet(alphabet):
        Raise TypeError/ValueError for alphabets shortcodes can't be drawn from.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode(8)
    'q7XrJmNa'
"""

import logging
import secrets
from typing import TYPE_CHECKING

from urlshortener.constants import Shortcode, SHORTCODE_COLLISION, SHORTCODE_GENERATION_EXHAUSTED
from urlshortener.exceptions import ShortcodeGenerationExhaustedError

if TYPE_CHECKING:
    from urlshortener.dao.base import ShortURLBaseDAO


logger = logging.getLogger(__name__)


def validate_alphabet(alphabet: str) -> None:
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if len(alphabet) < 2:
        raise ValueError(f'Alphabet must contain at least 2 characters (given value: {alphabet!r}).')
    if len(set(alphabet)) != len(alphabet):
        raise ValueError(f'Alphabet must not contain duplicate characters (given value: {alphabet!r}).')
    if len(alphabet) > 256:
        raise ValueError(f'Alphabet must contain at most 256 characters (given length: {len(alphabet)}).')


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = Shortcode.ALPHABET) -> str:
    """Generate a random shortcode.

    Random bytes are drawn from `secrets` (OS CSPRNG) and mapped onto the
    alphabet by modulo. Bytes that fall into the incomplete last "lap" of the
    alphabet (>= 256 - 256 % len(alphabet)) are discarded and redrawn, so every
    character of the alphabet is equally likely at every position.

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 8.

        alphabet (str, optional):
            Characters to draw from. Defaults to an alphabet without visually
            ambiguous characters (0/O, 1/l/I).

    Returns:
        str: A random shortcode of exactly `length` characters.

    Raises:
        TypeError: If length is not an integer or alphabet is not a string.
        ValueError: If length < 1 or the alphabet is too short/long or has duplicates.

    NOTE:
        - Shortcode unpredictability is a security property: it keeps other
          users' links from being enumerated or guessed.
        - With the default 57-character alphabet, 256 % 57 = 28 so bytes >= 228
          are rejected (~11% of draws).
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    validate_alphabet(alphabet)

    base = len(alphabet)
    limit = 256 - (256 % base)

    chars: list[str] = []
    while len(chars) < length:
        for byte in secrets.token_bytes(length - len(chars)):
            if byte < limit:
                chars.append(alphabet[byte % base])
    return ''.join(chars)


def generate_unique_shortcode(
    dao: 'ShortURLBaseDAO',
    length: int = Shortcode.LENGTH,
    max_attempts: int = Shortcode.MAX_ATTEMPTS,
    alphabet: str = Shortcode.ALPHABET,
) -> str:
    """Generate a shortcode that is not taken in the data store.

    Performs one (read-only) existence check per attempt.

    Args:
        dao (ShortURLBaseDAO):
            Data store used to check for collisions.
        length (int, optional):
            Shortcode length. Defaults to 8.
        max_attempts (int, optional):
            Maximum number of generated candidates. Defaults to 8.
        alphabet (str, optional):
            Shortcode alphabet.

    Returns:
        str: A shortcode which did not exist at the time of the check.

    Raises:
        ShortcodeGenerationExhaustedError:
            If every candidate collided with an existing shortcode.
        DataStoreError:
            If the data store is unreachable (propagated unmodified).

    NOTE:
        The existence check and the later insert are not atomic. A concurrent
        writer may still take the shortcode in between; the data store's own
        uniqueness constraint reports that case as ShortURLAlreadyExistsError.
    """
    if max_attempts < 1:
        raise ValueError(f'Max attempts must be a positive integer (given value: {max_attempts}).')

    for attempt in range(1, max_attempts + 1):
        candidate = generate_shortcode(length, alphabet)
        if not dao.exists(candidate):
            return candidate
        logger.debug(
            'Shortcode collision, retrying.',
            extra={'shortcode': candidate, 'attempt': attempt, 'event': SHORTCODE_COLLISION},
        )

    logger.error(
        'Unable to generate a unique shortcode.',
        extra={'attempts': max_attempts, 'length': length, 'event': SHORTCODE_GENERATION_EXHAUSTED},
    )
    raise ShortcodeGenerationExhaustedError(f'Unable to generate a unique short code after {max_attempts} attempts.')
