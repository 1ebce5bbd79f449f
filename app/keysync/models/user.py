"""Remote user record model."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A user record as returned by the remote user directory.

    Unknown fields are kept so the record can travel through the inventory
    as opaque configuration for downstream consumers.

    Attributes:
        org_username: Organisation-wide username, used as the identity key.
        public_gpg_key: ASCII-armored public key, if the user has one.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    org_username: Annotated[str, Field(min_length=1, description="Organisation username")]
    public_gpg_key: Annotated[str | None, Field(description="Public GPG key")] = None

    @property
    def key_content(self) -> str:
        """Key content to write for this user (empty if none is published)."""
        return self.public_gpg_key or ""
