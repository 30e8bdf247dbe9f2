"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Hand out unique, monotonically increasing link ids.
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - List the links created by a given owner.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.models import ShortURLModel
        >>> from linkshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> link_id = dao.next_id()
        >>> dao.insert(ShortURLModel(id=link_id, target="https://example.com/blog/article-123"))

        >>> retrieved = dao.get(link_id)
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> print(link_id, retrieved.shortcode)
        1 1
"""

from abc import ABC, abstractmethod

from linkshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new ShortURLModel into the data store.
            Raises ShortURLAlreadyExistsError if the id is already taken.
            Raises DataStoreError on connection or write failure.

        get(link_id: int, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel from the data store by id.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        list_by_owner(owner: str, **kwargs) -> list[ShortURLModel]:
            Retrieve every ShortURLModel created by owner, oldest first.
            Raises DataStoreError on connection or read failure.

        next_id(**kwargs) -> int:
            Allocate a new, never before returned link id.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLDynamoDBDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records are immutable once inserted. The DAO does not provide an
          interface to update or delete entries.
        - The shortcode is never persisted; it is derived from the id.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted. Its id must come
                from next_id().

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same id already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, link_id: int, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its id.

        Args:
            link_id (int):
                The id of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The stored ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_by_owner(self, owner: str, **kwargs) -> list[ShortURLModel]:
        """Retrieve every ShortURLModel created by an owner.

        Args:
            owner (str):
                Opaque identity of the user who created the links.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            list[ShortURLModel]: The owner's links in insertion order. Empty if none.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def next_id(self, **kwargs) -> int:
        """Allocate the next link id.

        Ids are positive and strictly increasing; no id is returned twice,
        even to concurrent callers.

        Args:
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The newly allocated id.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
