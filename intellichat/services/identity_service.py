"""Identity providers verifying who is calling the API."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

import jwt
import structlog
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from intellichat.core.exceptions import (
    AuthenticationError,
    IdentityProviderUnavailableError,
    InvalidTokenError,
    TokenExpiredError,
)
from intellichat.core.settings import AuthConfig
from intellichat.schemas.auth_schema import IdentityUser

logger = structlog.get_logger()

DEMO_USER = IdentityUser(
    uid="demo-user",
    display_name="Demo User",
    email="demo@intellichat.local",
    photo_url=None,
)


class IdentityProvider(ABC):
    """Resolves a bearer token to the signed-in user."""

    @abstractmethod
    async def authenticate(self, token: str | None) -> IdentityUser:
        """Return the user owning ``token``.

        Raises:
            AuthenticationError: The token is missing or not acceptable.
        """


class FirebaseIdentityProvider(IdentityProvider):
    """Verifies Firebase ID tokens (RS256) against Google's published keys."""

    ALGORITHMS = ["RS256"]

    def __init__(
        self,
        config: AuthConfig,
        jwks_client: jwt.PyJWKClient | None = None,
    ) -> None:
        self._config = config
        self._jwks_client = jwks_client or jwt.PyJWKClient(
            config.jwks_url, cache_keys=True
        )

    async def authenticate(self, token: str | None) -> IdentityUser:
        if not token:
            raise AuthenticationError(message="Authorization header required")
        claims = self._decode(token, await self._signing_key(token))
        return IdentityUser(
            uid=claims["sub"],
            display_name=claims.get("name"),
            email=claims.get("email"),
            photo_url=claims.get("picture"),
        )

    async def _signing_key(self, token: str) -> Any:
        """Look up the key for the token's ``kid`` without blocking the loop."""
        loop = asyncio.get_running_loop()
        try:
            signing_key = await loop.run_in_executor(
                None, self._jwks_client.get_signing_key_from_jwt, token
            )
        except PyJWKClientConnectionError as exc:
            logger.error("Signing keys unreachable", error=str(exc))
            raise IdentityProviderUnavailableError() from exc
        except (PyJWKClientError, jwt.InvalidTokenError) as exc:
            logger.info("Token rejected", reason="unknown_key")
            raise InvalidTokenError() from exc
        return signing_key.key

    def _decode(self, token: str, key: Any) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                key,
                algorithms=self.ALGORITHMS,
                audience=self._config.firebase_project_id,
                issuer=self._config.issuer,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("Token rejected", reason="expired")
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Token rejected", reason="invalid")
            raise InvalidTokenError() from exc


class DemoIdentityProvider(IdentityProvider):
    """Offline stand-in: the bearer token is taken as the uid."""

    async def authenticate(self, token: str | None) -> IdentityUser:
        if not token:
            return DEMO_USER
        return IdentityUser(uid=token, display_name=token)


def build_identity_provider(config: AuthConfig) -> IdentityProvider:
    """Create the provider selected by configuration."""
    if config.provider == "firebase":
        return FirebaseIdentityProvider(config)
    return DemoIdentityProvider()
