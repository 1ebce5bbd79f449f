"""Reconciler for key files.

Executes the actions derived from a populated inventory against a key
store. Execution is sequential and stops at the first failure; files
already written or removed stay that way.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from keysync.core.actions import diff_to_actions
from keysync.errors import KeyStoreError
from keysync.models.action import Action, ActionResult, ActionType

if TYPE_CHECKING:
    from keysync.models.inventory import ResourceInventory
    from keysync.storage.base import KeyStore

logger = logging.getLogger(__name__)


class Reconciler:
    """Applies upserts and deletes to a key store.

    Attributes:
        store: Key store receiving the side effects.
    """

    def __init__(self, store: KeyStore, log: logging.Logger | None = None) -> None:
        """Initialize the Reconciler.

        Args:
            store: Key store receiving the side effects.
            log: Logger handle. Defaults to the module logger.
        """
        self.store = store
        self._log = log or logger

    def execute(self, action: Action) -> ActionResult:
        """Execute a single action.

        Args:
            action: The action to perform.

        Returns:
            ActionResult for the action.

        Raises:
            KeyStoreError: If the store operation fails.
        """
        if action.action_type == ActionType.DELETE:
            self._log.info("Deleting file %s", action.name)
            self.store.remove(action.name)
        elif action.action_type == ActionType.UPSERT:
            if action.content is None:
                msg = f"Upsert action for {action.name} requires content"
                raise ValueError(msg)
            self._log.info("Writing file %s", action.name)
            self.store.write(action.name, action.content)

        return ActionResult(action=action, success=True)

    def reconcile(self, inventory: ResourceInventory) -> list[ActionResult]:
        """Bring the key store in line with the inventory's desired side.

        Args:
            inventory: Inventory populated by both collectors.

        Returns:
            One ActionResult per executed action.

        Raises:
            KeyStoreError: On the first failing action. Remaining actions
                are not attempted.
        """
        self._log.info("Reconciling")

        results: list[ActionResult] = []
        for action in diff_to_actions(inventory):
            try:
                results.append(self.execute(action))
            except KeyStoreError as e:
                self._log.error("Failed to %s %s: %s", action.action_type.value, action.name, e)
                raise

        return results
