"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
create/read operations with ShortURLModel instances.

Responsibilities:
    - Hand out link ids from an atomic global counter;
    - Insert and retrieve short URLs from Redis by id;
    - Maintain a per-owner index of link ids in creation order;
    - Raise appropriate DAO exceptions on missing, duplicate or unreachable data.

Redis layout (keys optionally namespaced by prefix):
    links:counter          STRING  last assigned link id
    links:<id>:url         STRING  original URL
    links:<id>:owner       STRING  owner identity (absent for anonymous links)
    users:<owner>:links    LIST    ids of the owner's links, oldest first

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from linkshortener.models import ShortURLModel
    >>> from linkshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> link_id = dao.next_id()
    >>> dao.insert(ShortURLModel(id=link_id, target="https://example.com/page", owner="user123"))
    <ShortURLRedisDAO>

    >>> retrieved = dao.get(link_id)
    >>> retrieved.target
    'https://example.com/page'

    >>> [link.id for link in dao.list_by_owner("user123")]
    [1]
"""

from beartype import beartype

from linkshortener.models import ShortURLModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL records

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Insert a short URL record and index it under its owner.
            Raises ShortURLAlreadyExistsError when a URL with the same id exists.
            Raises DataStoreError on connectivity issues with Redis.

        get(link_id: int, **kwargs) -> ShortURLModel:
            Retrieve a short URL record by id.
            Raises ShortURLNotFoundError when the id doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        list_by_owner(owner: str, **kwargs) -> list[ShortURLModel]:
            Retrieve all short URL records of an owner, oldest first.
            Raises DataStoreError on connectivity issues with Redis.

        next_id(**kwargs) -> int:
            Atomically allocate the next link id from the global counter.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL record into Redis

        The insertion is performed via a Redis transaction so that a link and
        its owner index entry become visible together.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance with an id obtained from next_id().
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same id already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_url_key = self.keys.link_url_key(short_url.id)
        if self.redis.exists(link_url_key):
            raise ShortURLAlreadyExistsError(f"Short URL with id {short_url.id} (code '{short_url.shortcode}') already exists.")

        # NOTE: Without MULTI/EXEC, a concurrent list_by_owner() could read the
        #       owner's index entry before the link's url key exists and silently
        #       drop the link from the listing.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(link_url_key, short_url.target)
            if short_url.owner is not None:
                pipe.set(self.keys.link_owner_key(short_url.id), short_url.owner)
                pipe.rpush(self.keys.user_links_key(short_url.owner), short_url.id)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, link_id: int, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL record by id

        Args:
            link_id (int):
                The id of the short URL record, usually decoded from a shortcode.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel:
                The retrieved ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get(100)
            ShortURLModel(id=100, target='https://example.com', owner=None)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(self.keys.link_url_key(link_id))
            pipe.get(self.keys.link_owner_key(link_id))
            target, owner = pipe.execute()

        if target is None:
            raise ShortURLNotFoundError(f'Short URL with id {link_id} not found.')

        return ShortURLModel(id=link_id, target=target, owner=owner)

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner: str, **kwargs) -> list[ShortURLModel]:
        """Retrieve all short URL records created by owner, oldest first

        Args:
            owner (str):
                Opaque identity of the user who created the links.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            list[ShortURLModel]: The owner's links. Empty if the owner has none.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_ids = [int(link_id) for link_id in self.redis.lrange(self.keys.user_links_key(owner), 0, -1)]
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.get(self.keys.link_url_key(link_id))
            targets = pipe.execute()

        return [
            ShortURLModel(id=link_id, target=target, owner=owner)
            for link_id, target in zip(link_ids, targets)
            if target is not None
        ]

    @handle_redis_connection_error
    def next_id(self, **kwargs) -> int:
        """Allocate the next link id

        INCR on the global counter key, so concurrent Lambdas never receive the
        same id. The first id handed out is 1.

        Example:
            >>> dao.next_id()
            124
        """
        return int(self.redis.incr(self.keys.counter_key()))
