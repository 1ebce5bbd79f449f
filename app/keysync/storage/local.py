"""Local filesystem key store."""

import logging
from pathlib import Path

from keysync.errors import KeyStoreError
from keysync.storage.base import KeyStore

logger = logging.getLogger(__name__)

FILE_MODE = 0o644
ENCODING = "utf-8"


class LocalKeyStore(KeyStore):
    """Key store backed by a flat directory of files.

    Each entry is a regular file named after the user, holding the key
    as UTF-8 text. Files are read and written as bytes so line endings
    survive untouched. Bytes that are not valid UTF-8 are carried as
    surrogate escapes and written back unchanged.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Directory holding the key files.
        """
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, name: str) -> Path:
        if not name or "/" in name or name in (".", ".."):
            msg = f"Invalid key file name: {name!r}"
            raise KeyStoreError(msg)
        return self._root / name

    def list_entries(self) -> list[str]:
        try:
            return sorted(entry.name for entry in self._root.iterdir())
        except OSError as e:
            raise KeyStoreError(f"Error while reading key directory {self._root}: {e}") from e

    def read(self, name: str) -> str:
        path = self._path(name)
        try:
            return path.read_bytes().decode(ENCODING, errors="surrogateescape")
        except OSError as e:
            raise KeyStoreError(f"Error while reading file {path}: {e}") from e

    def write(self, name: str, content: str) -> None:
        path = self._path(name)
        try:
            path.write_bytes(content.encode(ENCODING, errors="surrogateescape"))
            path.chmod(FILE_MODE)
        except (OSError, UnicodeEncodeError) as e:
            raise KeyStoreError(f"Error while writing file {path}: {e}") from e

    def remove(self, name: str) -> None:
        path = self._path(name)
        try:
            path.unlink()
        except OSError as e:
            raise KeyStoreError(f"Error while deleting file {path}: {e}") from e

    def ensure_root(self) -> Path:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise KeyStoreError(f"Error while creating key directory {self._root}: {e}") from e
        logger.debug("Key directory ready: %s", self._root)
        return self._root
