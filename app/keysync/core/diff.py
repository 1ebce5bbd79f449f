"""Diff engine for comparing current and desired key files.

This module holds the single classification rule used by both the diff
report and the reconciler, so a dry run never disagrees with what an
actual cycle would do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from keysync.models.action import ActionType

if TYPE_CHECKING:
    from keysync.models.inventory import ResourceInventory, ResourceState

logger = logging.getLogger(__name__)


def classify(state: ResourceState) -> ActionType:
    """Decide what to do with one inventory entry.

    First match wins:
    - current present, desired absent -> DELETE
    - current absent, or contents differ -> UPSERT
    - otherwise -> NOOP

    Args:
        state: Populated inventory entry.

    Returns:
        The action type for the entry.
    """
    current, desired = state.current, state.desired

    if current is not None and desired is None:
        return ActionType.DELETE
    if current is None or (desired is not None and not current.same_content(desired)):
        return ActionType.UPSERT
    return ActionType.NOOP


class DiffType(Enum):
    """Type of difference between key directory and user directory.

    Attributes:
        CREATE: User has no key file yet.
        UPDATE: Key file content differs from the user's key.
        DELETE: Key file has no matching user.
    """

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """A single difference for one key file.

    Attributes:
        name: Key file name.
        diff_type: Type of difference.
    """

    name: str
    diff_type: DiffType


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Result of comparing current with desired state.

    Attributes:
        create: Key files to be created.
        update: Key files to be overwritten.
        delete: Key files to be removed.
    """

    create: tuple[DiffEntry, ...] = ()
    update: tuple[DiffEntry, ...] = ()
    delete: tuple[DiffEntry, ...] = ()

    @property
    def is_in_sync(self) -> bool:
        """Check if the key directory matches the user directory."""
        return not (self.create or self.update or self.delete)

    @property
    def total_changes(self) -> int:
        """Total number of differences found."""
        return len(self.create) + len(self.update) + len(self.delete)

    @property
    def upsert_names(self) -> set[str]:
        """Names classified as create or update."""
        return {e.name for e in (*self.create, *self.update)}

    @property
    def delete_names(self) -> set[str]:
        """Names classified as delete."""
        return {e.name for e in self.delete}

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Key contents are never included.
        """
        return {
            "in_sync": self.is_in_sync,
            "summary": {
                "create": len(self.create),
                "update": len(self.update),
                "delete": len(self.delete),
                "total": self.total_changes,
            },
            "create": [e.name for e in self.create],
            "update": [e.name for e in self.update],
            "delete": [e.name for e in self.delete],
        }


def compute_diff(inventory: ResourceInventory) -> DiffResult:
    """Classify every inventory entry without side effects.

    Args:
        inventory: Inventory populated by both collectors.

    Returns:
        DiffResult with entries sorted by name.
    """
    create: list[DiffEntry] = []
    update: list[DiffEntry] = []
    delete: list[DiffEntry] = []

    for name, state in inventory:
        action_type = classify(state)
        if action_type == ActionType.DELETE:
            delete.append(DiffEntry(name=name, diff_type=DiffType.DELETE))
        elif action_type == ActionType.UPSERT:
            if state.current is None:
                create.append(DiffEntry(name=name, diff_type=DiffType.CREATE))
            else:
                update.append(DiffEntry(name=name, diff_type=DiffType.UPDATE))

    return DiffResult(create=tuple(create), update=tuple(update), delete=tuple(delete))


def log_diff(inventory: ResourceInventory, log: logging.Logger | None = None) -> DiffResult:
    """Report what a reconciliation would change.

    Emits one info line per entry that would be deleted or written and
    nothing for entries already in sync.

    Args:
        inventory: Inventory populated by both collectors.
        log: Logger handle. Defaults to the module logger.

    Returns:
        The computed DiffResult.
    """
    log = log or logger
    log.debug("Logging diff")

    result = compute_diff(inventory)
    changes = sorted((*result.create, *result.update, *result.delete), key=lambda e: e.name)
    for entry in changes:
        if entry.diff_type == DiffType.DELETE:
            log.info("Deleting %s", entry.name)
        else:
            log.info("Updating %s", entry.name)

    return result
