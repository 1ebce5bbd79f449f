"""Exception hierarchy for keysync.

Every error raised by the reconciliation core derives from KeysyncError
so the CLI can report failures of any phase uniformly.
"""


class KeysyncError(Exception):
    """Base exception for keysync errors."""


class KeyStoreError(KeysyncError):
    """Raised when the key directory cannot be listed, read, or written."""


class RemoteFetchError(KeysyncError):
    """Raised when the remote user directory cannot be queried."""


class ConfigError(KeysyncError):
    """Raised when the configuration is malformed."""


class CycleError(KeysyncError):
    """Raised when a reconciliation cycle aborts.

    Attributes:
        phase: Cycle phase that failed ("current", "desired", "reconcile").
    """

    def __init__(self, phase: str, cause: KeysyncError) -> None:
        super().__init__(f"Cycle aborted in {phase} phase: {cause}")
        self.phase = phase
