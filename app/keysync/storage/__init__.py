"""Key file storage backends."""

from keysync.storage.base import KeyStore
from keysync.storage.local import LocalKeyStore

__all__ = ["KeyStore", "LocalKeyStore"]
