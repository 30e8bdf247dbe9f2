"""URL registry: create, resolve and list shortened URLs

The registry is the only entry point the Lambda handlers use to work with
short URL records. It validates input, lets the data store assign ids and
binds those ids to public shortcodes via the base62 codec.

Example:
    >>> from linkshortener.dao.redis import ShortURLRedisDAO
    >>> from linkshortener.registry import URLRegistry

    >>> registry = URLRegistry(ShortURLRedisDAO(prefix='linkshortener:dev'))
    >>> short_url = registry.create('https://www.google.com')  # 100th link
    >>> short_url.id, short_url.shortcode
    (100, '1C')
    >>> registry.resolve('1C').target
    'https://www.google.com'
    >>> registry.resolve('#@!') is None
    True
"""

import logging

from linkshortener.models import ShortURLModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.exceptions import ShortURLNotFoundError
from linkshortener.constants import MAX_SHORTCODE_LENGTH
from linkshortener.exceptions import InvalidArgumentError
from linkshortener.utils.shortener import decode_shortcode
from linkshortener.utils.validators import validate_url


logger = logging.getLogger(__name__)


class URLRegistry:
    """Mediate all creation and resolution of short URL records.

    Methods:
        create(raw_url: str, owner: str | None = None) -> ShortURLModel:
            Validate and persist a new link.
            Raises URLValidationError for malformed or oversized URLs.
            Raises DataStoreError on storage failures.

        resolve(shortcode: str) -> ShortURLModel | None:
            Look up the link behind a shortcode. None if it doesn't exist.
            Raises DataStoreError on storage failures.

        list_by_owner(owner: str) -> list[ShortURLModel]:
            All links created by owner, oldest first.
            Raises DataStoreError on storage failures.

    NOTE:
        Storage failures are never retried here. Retry policy, if any,
        belongs to the data store client or the caller.
    """

    def __init__(self, dao: ShortURLBaseDAO):
        self.dao = dao

    def create(self, raw_url: str, owner: str | None = None) -> ShortURLModel:
        """Shorten a URL, optionally on behalf of a user.

        Validation happens before the data store is touched, so a rejected
        URL consumes no id and leaves no record behind.

        Args:
            raw_url (str):
                The long URL to shorten.
            owner (str | None):
                Identity of the creating user, None for anonymous links.

        Returns:
            ShortURLModel: The persisted record. Its shortcode is derived from the new id.

        Raises:
            URLValidationError:
                If raw_url is not an absolute URL or is longer than 255 characters.
            DataStoreError:
                If the data store is unreachable.
        """
        target = validate_url(raw_url)

        link_id = self.dao.next_id()
        short_url = ShortURLModel(id=link_id, target=target, owner=owner)
        self.dao.insert(short_url)

        logger.debug('Created short URL.', extra={'linkId': link_id, 'shortcode': short_url.shortcode, 'owner': owner})
        return short_url

    def resolve(self, shortcode: str) -> ShortURLModel | None:
        """Find the record a shortcode points to.

        Shortcodes that no issued id can encode to (foreign characters, or
        longer than MAX_SHORTCODE_LENGTH) resolve to None, as do well-formed
        shortcodes with no record behind them. Callers only ever see found or
        not found.

        Args:
            shortcode (str):
                Public shortcode taken from the request path.

        Returns:
            ShortURLModel | None: The record, or None if not found.

        Raises:
            DataStoreError:
                If the data store is unreachable.
        """
        if isinstance(shortcode, str) and len(shortcode) > MAX_SHORTCODE_LENGTH:
            logger.debug('Shortcode is longer than any issued id.', extra={'shortcodeLength': len(shortcode)})
            return None

        try:
            link_id = decode_shortcode(shortcode)
        except (InvalidArgumentError, TypeError):
            logger.debug('Shortcode is not valid base62.', extra={'shortcode': shortcode})
            return None

        try:
            return self.dao.get(link_id)
        except ShortURLNotFoundError:
            logger.debug('No short URL record for shortcode.', extra={'shortcode': shortcode, 'linkId': link_id})
            return None

    def list_by_owner(self, owner: str) -> list[ShortURLModel]:
        """Return every link created by owner, oldest first.

        The full set is returned in one call. This is fine for the number of
        links a single user creates, but there is no pagination.
        """
        return self.dao.list_by_owner(owner)
