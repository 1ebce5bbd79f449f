"""Data models for keysync.

This module exports the core data structures used throughout the application.
"""

from keysync.models.action import Action, ActionResult, ActionType
from keysync.models.inventory import ResourceInventory, ResourceState
from keysync.models.keyfile import KeyFile
from keysync.models.user import User

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "KeyFile",
    "ResourceInventory",
    "ResourceState",
    "User",
]
