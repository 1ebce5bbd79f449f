"""The keysync reconciliation cycle.

A cycle observes the key directory, fetches the users, and applies the
difference. Nothing is carried over between cycles: every cycle starts
from a fresh inventory built from the actual files on disk, so re-running
after a failure converges.

Example:
    >>> config = load_config()
    >>> integration = KeyfileIntegration.from_config(config)
    >>> integration.setup()
    >>> result = asyncio.run(integration.run_cycle(dry_run=True))
    >>> result.diff.is_in_sync
    True
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from keysync.client.users import UserDirectoryClient
from keysync.core.collect import collect_current_state, collect_desired_state
from keysync.core.diff import DiffResult
from keysync.core.diff import log_diff as report_diff
from keysync.core.reconciler import Reconciler
from keysync.errors import CycleError, KeysyncError, RemoteFetchError
from keysync.models.inventory import ResourceInventory
from keysync.storage.local import LocalKeyStore

if TYPE_CHECKING:
    from keysync.client.users import FetchUsers
    from keysync.core.config import KeysyncConfig
    from keysync.models.action import ActionResult
    from keysync.storage.base import KeyStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CycleResult:
    """Outcome of one reconciliation cycle.

    Attributes:
        diff: Changes detected at the start of the cycle.
        results: Executed actions (empty on dry runs).
        dry_run: Whether the cycle only reported the diff.
    """

    diff: DiffResult
    results: tuple[ActionResult, ...] = field(default=())
    dry_run: bool = False


class KeyfileIntegration:
    """Reconciles a key directory with the remote user directory.

    Attributes:
        config: Effective configuration.
        store: Key store holding the current state.
    """

    def __init__(
        self,
        config: KeysyncConfig,
        store: KeyStore,
        fetch_users: FetchUsers,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the integration.

        Args:
            config: Effective configuration.
            store: Key store holding the current state.
            fetch_users: Coroutine function returning the desired users.
            log: Logger handle passed down to every phase.
        """
        self.config = config
        self.store = store
        self._fetch_users = fetch_users
        self._log = log or logger
        self._reconciler = Reconciler(store, log=self._log)

    @classmethod
    def from_config(
        cls, config: KeysyncConfig, log: logging.Logger | None = None
    ) -> KeyfileIntegration:
        """Wire the integration to the local filesystem and the real user directory."""
        client = UserDirectoryClient(
            url=config.server_url,
            token=config.token,
            timeout=config.timeout_seconds,
        )
        return cls(
            config=config,
            store=LocalKeyStore(config.keydir),
            fetch_users=client.fetch_users,
            log=log,
        )

    def setup(self) -> None:
        """Create the key directory. Safe to call repeatedly.

        Raises:
            KeyStoreError: If the directory cannot be created.
        """
        self._log.info("Setting up keysync in %s", self.store.root)
        self.store.ensure_root()

    def current_state(self, inventory: ResourceInventory) -> None:
        collect_current_state(self.store, inventory, log=self._log)

    async def desired_state(self, inventory: ResourceInventory) -> None:
        """Collect the desired state, bounded by the configured timeout.

        Raises:
            RemoteFetchError: If the fetch fails or times out.
        """
        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                await collect_desired_state(self._fetch_users, inventory, log=self._log)
        except TimeoutError as e:
            msg = f"Timed out after {self.config.timeout_seconds}s while getting users"
            raise RemoteFetchError(msg) from e

    def reconcile(self, inventory: ResourceInventory) -> list[ActionResult]:
        return self._reconciler.reconcile(inventory)

    def log_diff(self, inventory: ResourceInventory) -> DiffResult:
        return report_diff(inventory, log=self._log)

    async def run_cycle(self, dry_run: bool = False) -> CycleResult:
        """Run one observe, fetch, apply cycle.

        Args:
            dry_run: If True, only report the diff.

        Returns:
            CycleResult describing what changed (or would change).

        Raises:
            CycleError: If any phase fails. The cause is chained.
        """
        inventory = ResourceInventory()

        try:
            self.current_state(inventory)
        except KeysyncError as e:
            raise CycleError("current", e) from e

        try:
            await self.desired_state(inventory)
        except KeysyncError as e:
            raise CycleError("desired", e) from e

        diff = self.log_diff(inventory)
        if dry_run:
            return CycleResult(diff=diff, dry_run=True)

        try:
            results = self.reconcile(inventory)
        except KeysyncError as e:
            raise CycleError("reconcile", e) from e

        return CycleResult(diff=diff, results=tuple(results))

    async def run_forever(
        self,
        interval: float,
        dry_run: bool = False,
        max_cycles: int | None = None,
    ) -> None:
        """Run cycles back to back, sleeping between them.

        Cycles never overlap. A failed cycle is logged and the next one
        starts after the usual interval.

        Args:
            interval: Seconds to sleep between cycles.
            dry_run: If True, cycles only report the diff.
            max_cycles: Stop after this many cycles. None runs until cancelled.
        """
        count = 0
        while max_cycles is None or count < max_cycles:
            count += 1
            try:
                await self.run_cycle(dry_run=dry_run)
            except CycleError as e:
                self._log.error("Reconciliation cycle failed: %s", e)

            if max_cycles is None or count < max_cycles:
                await asyncio.sleep(interval)
