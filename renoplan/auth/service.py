"""
Platform auth provider.

Validates bearer tokens by asking the hosted auth service who they belong to.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from renoplan.auth import schemas
from renoplan.auth.config import get_auth_settings
from renoplan.auth.constants import AuthEndpoints
from renoplan.utils.logger import logger


class AuthProvider(ABC):
    """Abstract interface for authentication providers."""

    @abstractmethod
    async def get_session(self, access_token: str) -> schemas.Session | None:
        """Get session information from an access token."""
        pass


class PlatformAuthProvider(AuthProvider):
    """Resolves tokens through `GET {auth_url}/user`."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        settings = get_auth_settings()
        self.base_url = settings.url.rstrip("/")
        self.api_key = settings.api_key
        self.timeout = settings.timeout_seconds
        self._transport = transport

    async def get_session(self, access_token: str) -> schemas.Session | None:
        headers = {"Authorization": f"Bearer {access_token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}{AuthEndpoints.USER.value}", headers=headers
                )
            response.raise_for_status()
            user = self._user_from_response(response.json())
        except httpx.HTTPStatusError as e:
            logger.info("Token rejected by auth service", status_code=e.response.status_code)
            return None
        except httpx.HTTPError as e:
            logger.error("Auth service unreachable", error=str(e))
            return None
        except ValueError as e:
            logger.error("Auth service returned invalid JSON", error=str(e))
            return None

        if not user:
            return None
        return schemas.Session(user=user, access_token=access_token)

    @staticmethod
    def _user_from_response(data: dict[str, Any]) -> schemas.User | None:
        if not isinstance(data, dict):
            return None
        user_id = data.get("id")
        if not user_id:
            return None
        metadata = data.get("user_metadata") or {}
        return schemas.User(
            id=user_id,
            email=data.get("email"),
            name=metadata.get("full_name") or metadata.get("name"),
            created_at=data.get("created_at"),
        )


def get_auth_provider() -> AuthProvider:
    """
    Get a singleton instance of the auth provider.

    Returns:
        AuthProvider: The cached auth provider instance.
    """
    if not hasattr(get_auth_provider, "_instance"):
        get_auth_provider._instance = PlatformAuthProvider()
    return get_auth_provider._instance
