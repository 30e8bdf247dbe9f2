"""Shortcode encoding utility

This module converts the sequential integer id of a stored link into its
public shortcode and back. The mapping is a plain positional base62
conversion over a fixed alphabet, so every id has exactly one shortcode and
the shortcode never needs to be stored.

Functions:
    encode_shortcode(counter) -> str:
        Encode a non-negative integer as a base62 shortcode.

    decode_shortcode(shortcode) -> int:
        Decode a base62 shortcode back into its integer id.

Example:
    >>> from linkshortener.utils import encode_shortcode, decode_shortcode
    >>> encode_shortcode(100)
    '1C'
    >>> decode_shortcode('1C')
    100
"""

import string

from linkshortener.exceptions import InvalidArgumentError


# NOTE: The alphabet order is part of the public contract. Existing shortcodes
#       were minted with digits first, then lowercase, then uppercase letters.
ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)
DIGIT_VALUES = {char: value for value, char in enumerate(ALPHABET)}


def encode_shortcode(counter: int) -> str:
    """Encode a link id as a base62 shortcode.

    The result is the shortest base62 representation of `counter`, most
    significant digit first. Zero encodes to a single '0' character and no
    other value ever gets a leading '0'.

    Args:
        counter (int):
            Non-negative integer id assigned to the link by the data store.

    Returns:
        str: Base62 shortcode over [0-9a-zA-Z].

    Raises:
        TypeError:
            If counter is not an integer.
        InvalidArgumentError:
            If counter is negative.

    Example:
        >>> encode_shortcode(0)
        '0'
        >>> encode_shortcode(61)
        'Z'
        >>> encode_shortcode(62)
        '10'
    """
    # bool is an int subclass, but True/False are never valid link ids
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise InvalidArgumentError(f'Counter must be a non-negative integer (given value: {counter}).')

    if counter == 0:
        return ALPHABET[0]

    digits = []
    while counter:
        counter, remainder = divmod(counter, BASE)
        digits.append(ALPHABET[remainder])
    return ''.join(reversed(digits))


def decode_shortcode(shortcode: str) -> int:
    """Decode a base62 shortcode into the link id it represents.

    Leading '0' characters are accepted and contribute nothing, so '001C'
    decodes to the same id as '1C'.

    Args:
        shortcode (str):
            Non-empty string over the base62 alphabet.

    Returns:
        int: The decoded link id.

    Raises:
        TypeError:
            If shortcode is not a string.
        InvalidArgumentError:
            If shortcode is empty or contains a character outside the alphabet.

    Example:
        >>> decode_shortcode('Z')
        61
        >>> decode_shortcode('10')
        62
    """
    if not isinstance(shortcode, str):
        raise TypeError(f'Shortcode must be of type string (given type: {type(shortcode)}).')
    if not shortcode:
        raise InvalidArgumentError('Shortcode must be a non-empty string.')

    value = 0
    for position, char in enumerate(shortcode):
        digit = DIGIT_VALUES.get(char)
        if digit is None:
            raise InvalidArgumentError(f'Invalid character {char!r} at position {position} in shortcode {shortcode!r}.')
        value = value * BASE + digit
    return value
