"""Identity schemas."""

from pydantic import BaseModel, ConfigDict, Field


class IdentityUser(BaseModel):
    """Signed-in user object issued by the identity provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str
    display_name: str | None = Field(default=None, alias="displayName")
    email: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
