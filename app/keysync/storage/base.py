"""Abstract base class for key stores.

This module defines the KeyStore interface through which the collectors
and the reconciler touch persisted key files. Keeping the filesystem
behind this seam lets tests substitute an in-memory store.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class KeyStore(ABC):
    """Abstract base class for key file storage.

    All methods raise KeyStoreError on failure.

    Example:
        >>> store = LocalKeyStore(Path("/tmp/keysync"))
        >>> store.ensure_root()
        >>> store.write("alice", "-----BEGIN PGP PUBLIC KEY BLOCK-----...")
        >>> store.list_entries()
        ['alice']
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Return the directory this store manages."""

    @abstractmethod
    def list_entries(self) -> list[str]:
        """List the names of all entries in the store (non-recursive).

        Returns:
            Sorted list of entry names.
        """

    @abstractmethod
    def read(self, name: str) -> str:
        """Read the full content of an entry.

        Args:
            name: Entry name.

        Returns:
            The entry content.
        """

    @abstractmethod
    def write(self, name: str, content: str) -> None:
        """Create or overwrite an entry.

        Args:
            name: Entry name.
            content: Content to store verbatim.
        """

    @abstractmethod
    def remove(self, name: str) -> None:
        """Remove an entry.

        Args:
            name: Entry name.
        """

    @abstractmethod
    def ensure_root(self) -> Path:
        """Create the store directory if it doesn't exist.

        Returns:
            The store directory.
        """
