"""Target URL validation

Syntax checks are delegated to pydantic's `AnyUrl` so that only absolute,
parseable URLs are accepted. The validated value returned to callers is the
original string, not pydantic's normalized form, so a stored link redirects
to exactly what the user submitted. Input pydantic would only accept after
repairing it is therefore rejected.

Example:
    >>> from linkshortener.utils.validators import validate_url
    >>> validate_url('https://www.google.com')
    'https://www.google.com'
    >>> validate_url('google')
    Traceback (most recent call last):
        ...
    linkshortener.exceptions.URLValidationError: Invalid URL 'google': ...
"""

from pydantic import AnyUrl, TypeAdapter, ValidationError

from linkshortener.constants import MAX_URL_LENGTH
from linkshortener.exceptions import URLValidationError


_url_adapter = TypeAdapter(AnyUrl)


def validate_url(raw_url: object) -> str:
    """Validate a target URL submitted for shortening.

    Args:
        raw_url (object):
            Untrusted input, usually straight from a request body.

    Returns:
        str: raw_url unchanged, once it passed validation.

    Raises:
        URLValidationError:
            If raw_url is not a string, is empty or exceeds MAX_URL_LENGTH
            characters. Also if it is not an absolute URL exactly as written:
            whitespace, control characters and a missing `//` after the
            scheme are rejected rather than repaired.
    """
    if not isinstance(raw_url, str):
        raise URLValidationError(raw_url, 'URL must be a string')
    if not raw_url.strip():
        raise URLValidationError(raw_url, 'URL is required')
    if len(raw_url) > MAX_URL_LENGTH:
        raise URLValidationError(raw_url, f'URL is too long (max {MAX_URL_LENGTH} characters)')
    if any(ch.isspace() or not ch.isprintable() for ch in raw_url):
        raise URLValidationError(raw_url, 'URL must not contain whitespace or control characters')

    try:
        parsed = _url_adapter.validate_python(raw_url)
    except ValidationError as e:
        reason = e.errors()[0]['msg'] if e.errors() else 'malformed URL'
        raise URLValidationError(raw_url, reason) from e

    # pydantic silently turns `https:host` into `https://host`
    separator = f'{parsed.scheme}://'
    if str(parsed).startswith(separator) and not raw_url.lower().startswith(separator):
        raise URLValidationError(raw_url, "URL scheme must be followed by '//'")

    return raw_url
