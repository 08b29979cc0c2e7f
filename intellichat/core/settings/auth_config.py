"""Identity provider configuration."""

from typing import Literal

from pydantic import BaseModel

FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)


class AuthConfig(BaseModel, frozen=True):
    """Identity provider settings."""

    provider: Literal["firebase", "demo"]
    firebase_project_id: str

    @property
    def issuer(self) -> str:
        """Expected ``iss`` claim of provider-issued ID tokens."""
        return f"https://securetoken.google.com/{self.firebase_project_id}"

    @property
    def jwks_url(self) -> str:
        """Public signing keys of the provider."""
        return FIREBASE_JWKS_URL
