"""Key file payload model.

A KeyFile is the single resource type keysync reconciles: one file in the
key directory, named after a user, holding that user's public key.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KeyFile:
    """A named public-key artifact.

    The name doubles as the inventory key, so reconciliation only ever
    compares the content of two KeyFiles.

    Attributes:
        name: File name, equal to the user's identity.
        content: The public-key string, stored verbatim.
    """

    name: str
    content: str

    def __post_init__(self) -> None:
        """Validate key file data after initialization."""
        if not self.name:
            msg = "Key file name cannot be empty"
            raise ValueError(msg)

    def same_content(self, other: "KeyFile") -> bool:
        """Check whether two key files hold the same key.

        The comparison is exact; no whitespace or encoding normalization
        is applied.

        Args:
            other: The key file to compare against.

        Returns:
            True if both contents are identical.
        """
        return self.content == other.content
