"""Action models for key file operations.

This module defines data structures for representing reconciliation
actions (upsert, delete) and their execution results.
"""

from dataclasses import dataclass
from enum import Enum


class ActionType(Enum):
    """Type of reconciliation action.

    Attributes:
        NOOP: Current and desired content match; nothing to do.
        UPSERT: Write the desired content, creating or overwriting the file.
        DELETE: Remove a file that has no desired counterpart.
    """

    NOOP = "noop"
    UPSERT = "upsert"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Action:
    """A single side effect to perform on the key directory.

    Attributes:
        action_type: The type of action.
        name: Name of the key file to operate on.
        content: Content to write (upsert only).
        reason: Optional explanation for why this action is being taken.
    """

    action_type: ActionType
    name: str
    content: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.name:
            msg = "Key file name cannot be empty"
            raise ValueError(msg)
        if self.action_type == ActionType.UPSERT and self.content is None:
            msg = f"Upsert action for {self.name} requires content"
            raise ValueError(msg)

    @property
    def is_upsert(self) -> bool:
        """Check if this is an upsert action."""
        return self.action_type == ActionType.UPSERT

    @property
    def is_delete(self) -> bool:
        """Check if this is a delete action."""
        return self.action_type == ActionType.DELETE


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a reconciliation action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
