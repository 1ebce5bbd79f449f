"""State collectors.

Two independent producers fill a ResourceInventory: one reads the key
directory into ``current`` entries, the other queries the user directory
into ``desired`` entries. Either one aborts completely on the first
failure, since a partial view would turn into wrong deletes downstream.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from keysync.errors import RemoteFetchError
from keysync.models.inventory import ResourceInventory, ResourceState
from keysync.models.keyfile import KeyFile

if TYPE_CHECKING:
    from keysync.client.users import FetchUsers
    from keysync.storage.base import KeyStore

logger = logging.getLogger(__name__)


def collect_current_state(
    store: KeyStore,
    inventory: ResourceInventory,
    log: logging.Logger | None = None,
) -> None:
    """Populate the inventory with the key files on disk.

    Args:
        store: Key store to read from.
        inventory: Inventory to populate.
        log: Logger handle. Defaults to the module logger.

    Raises:
        KeyStoreError: If the directory cannot be listed or a file read.
    """
    log = log or logger
    log.info("Getting current state")

    # Read everything before touching the inventory
    found: list[KeyFile] = []
    for name in store.list_entries():
        log.debug("Found file %s", store.root / name)
        found.append(KeyFile(name=name, content=store.read(name)))

    for key_file in found:
        inventory.add(key_file.name, ResourceState(current=key_file))


async def collect_desired_state(
    fetch_users: FetchUsers,
    inventory: ResourceInventory,
    log: logging.Logger | None = None,
) -> None:
    """Populate the inventory with the users from the remote directory.

    Entries already created by the current-state collector are completed
    in place, so a file and a user of the same name share one entry.

    Args:
        fetch_users: Coroutine function returning the desired users.
        inventory: Inventory to populate.
        log: Logger handle. Defaults to the module logger.

    Raises:
        RemoteFetchError: If the users cannot be fetched.
    """
    log = log or logger
    log.info("Getting desired state")

    try:
        users = await fetch_users()
    except RemoteFetchError:
        raise
    except Exception as e:
        raise RemoteFetchError(f"Error while getting users: {e}") from e

    for user in users:
        state = inventory.get_or_create(user.org_username)
        state.config = user
        state.desired = KeyFile(name=user.org_username, content=user.key_content)
