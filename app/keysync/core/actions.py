"""Action conversion from inventory entries.

Pure business logic for turning a populated inventory into the side
effects a reconciliation has to perform.
"""

from keysync.core.diff import classify
from keysync.models.action import Action, ActionType
from keysync.models.inventory import ResourceInventory


def diff_to_actions(inventory: ResourceInventory) -> list[Action]:
    """Convert an inventory into a list of actions.

    Entries classified as NOOP produce no action:
    - DELETE: key file without a user -> remove the file at current.name
    - UPSERT: user without a file, or differing key -> write desired.content

    Args:
        inventory: Inventory populated by both collectors.

    Returns:
        Actions in inventory (name) order.

    Raises:
        ValueError: If an entry lacks the side its classification acts on.
    """
    actions: list[Action] = []

    for name, state in inventory:
        action_type = classify(state)

        if action_type == ActionType.DELETE:
            if state.current is None:
                msg = f"Cannot delete {name}: no key file on disk"
                raise ValueError(msg)
            actions.append(
                Action(
                    action_type=ActionType.DELETE,
                    name=state.current.name,
                    reason="Key file has no matching user",
                )
            )
        elif action_type == ActionType.UPSERT:
            if state.desired is None:
                msg = f"Cannot write {name}: no desired key"
                raise ValueError(msg)
            reason = (
                "User has no key file" if state.current is None else "Key file content differs"
            )
            actions.append(
                Action(
                    action_type=ActionType.UPSERT,
                    name=state.desired.name,
                    content=state.desired.content,
                    reason=reason,
                )
            )

    return actions
