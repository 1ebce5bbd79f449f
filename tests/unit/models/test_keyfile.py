"""Unit tests for the KeyFile payload model."""

import pytest
from keysync.models.keyfile import KeyFile


class TestKeyFile:
    """Tests for KeyFile dataclass."""

    def test_create_key_file(self) -> None:
        """KeyFile stores name and content."""
        key_file = KeyFile(name="alice", content="keyA")

        assert key_file.name == "alice"
        assert key_file.content == "keyA"

    def test_empty_name_rejected(self) -> None:
        """KeyFile rejects an empty name."""
        with pytest.raises(ValueError, match="cannot be empty"):
            KeyFile(name="", content="keyA")

    def test_key_file_is_immutable(self) -> None:
        """KeyFile is frozen (immutable)."""
        key_file = KeyFile(name="alice", content="keyA")

        with pytest.raises(AttributeError):
            key_file.content = "keyB"  # type: ignore[misc]

    def test_same_content_ignores_name(self) -> None:
        """Only the content takes part in the comparison."""
        assert KeyFile("alice", "key").same_content(KeyFile("other", "key"))

    def test_same_content_is_exact(self) -> None:
        """No whitespace normalization is applied."""
        assert not KeyFile("alice", "key").same_content(KeyFile("alice", "key\n"))
        assert not KeyFile("alice", "key\r\n").same_content(KeyFile("alice", "key\n"))
