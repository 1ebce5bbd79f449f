"""Resource inventory for a single reconciliation cycle.

The inventory is the only merge point between the current-state and the
desired-state collectors. Both sides are keyed by resource name, so a file
and a user with the same name end up in the same ResourceState.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keysync.models.keyfile import KeyFile
    from keysync.models.user import User


@dataclass(slots=True)
class ResourceState:
    """Observed and target representation of one resource.

    Attributes:
        current: Key file found in the local key directory, if any.
        desired: Key file derived from the remote user directory, if any.
        config: Raw remote record backing the desired side. Not used for
            diffing.
    """

    current: KeyFile | None = None
    desired: KeyFile | None = None
    config: User | None = None

    @property
    def is_empty(self) -> bool:
        """Check if neither side of the state is populated."""
        return self.current is None and self.desired is None


class ResourceInventory:
    """Keyed collection of ResourceState entries.

    Example:
        >>> inventory = ResourceInventory()
        >>> inventory.add("alice", ResourceState(current=KeyFile("alice", "key")))
        >>> inventory.get_or_create("alice").desired = KeyFile("alice", "key")
        >>> len(inventory)
        1
    """

    def __init__(self) -> None:
        self._states: dict[str, ResourceState] = {}

    def add(self, name: str, state: ResourceState) -> None:
        """Register a new resource state.

        Args:
            name: Resource identity.
            state: Populated state for the resource.

        Raises:
            ValueError: If the name is already registered or the state is empty.
        """
        if name in self._states:
            msg = f"Resource already in inventory: {name}"
            raise ValueError(msg)
        if state.is_empty:
            msg = f"Cannot add empty resource state: {name}"
            raise ValueError(msg)
        self._states[name] = state

    def get(self, name: str) -> ResourceState | None:
        """Look up the state registered for a name."""
        return self._states.get(name)

    def get_or_create(self, name: str) -> ResourceState:
        """Return the state for a name, registering a fresh one if absent.

        The caller is expected to populate the returned state immediately.

        Args:
            name: Resource identity.

        Returns:
            The existing or newly registered ResourceState.
        """
        state = self._states.get(name)
        if state is None:
            state = ResourceState()
            self._states[name] = state
        return state

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[tuple[str, ResourceState]]:
        # Sorted so logs and reports are stable between runs
        for name in sorted(self._states):
            yield name, self._states[name]
