"""Remote user directory client."""

from keysync.client.users import FetchUsers, UserDirectoryClient, parse_users_response

__all__ = ["FetchUsers", "UserDirectoryClient", "parse_users_response"]
