"""
Abstract Storage Interface

DESIGN DECISION: The tracker persists everything through a tiny
key-value interface, the same shape as browser local storage.
This allows us to:
1. Use in-memory storage for tests and throwaway sessions
2. Use one JSON file per key for durable sessions
3. Keep the record store decoupled from where bytes end up

Absence of a key always means "use defaults", never an error.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for string key-value storage.

    Values are opaque strings (the record store writes JSON).
    Every write replaces the whole value; readers never see a partial write.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Raises:
            StorageError: If the removal fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored, sorted."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to store two records with the same id."""
    pass


class CorruptDataError(StorageError):
    """A stored value could not be decoded into the expected schema."""
    pass
