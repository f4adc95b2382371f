"""Identity provider client.

Accounts and bearer tokens are owned by an external auth service speaking the
Supabase GoTrue REST API. This module only maps tokens to user ids and
creates accounts on signup.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog

from tourney.config import Settings
from tourney.exceptions import AuthenticationError, IdentityError, IdentityUnavailableError

logger = structlog.get_logger()


class IdentityProvider(Protocol):
    async def verify_token(self, token: str) -> str:
        """Return the user id owning token, or raise AuthenticationError."""
        ...

    async def create_account(self, email: str, password: str, metadata: dict[str, Any]) -> str:
        """Create a confirmed account and return its user id, or raise IdentityError."""
        ...

    async def close(self) -> None:
        ...


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return str(body.get("msg") or body.get("message") or body.get("error_description") or default)
    return default


class GoTrueIdentityProvider:
    """Identity provider backed by a GoTrue (Supabase Auth) server."""

    def __init__(self, base_url: str, service_key: str, timeout: float = 10.0) -> None:
        self.service_key = service_key
        self.client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    async def verify_token(self, token: str) -> str:
        try:
            response = await self.client.get(
                "/auth/v1/user",
                headers={"Authorization": f"Bearer {token}", "apikey": self.service_key},
            )
        except httpx.HTTPError as e:
            logger.warning("identity_unreachable", operation="verify_token", error=str(e))
            raise IdentityUnavailableError("Identity provider unavailable") from e

        if response.status_code != 200:
            logger.info("auth_token_rejected", status=response.status_code)
            raise AuthenticationError("Unauthorized - Invalid token")

        user_id = response.json().get("id")
        if not user_id:
            raise AuthenticationError("Unauthorized - Invalid token")
        return str(user_id)

    async def create_account(self, email: str, password: str, metadata: dict[str, Any]) -> str:
        try:
            response = await self.client.post(
                "/auth/v1/admin/users",
                headers={"Authorization": f"Bearer {self.service_key}", "apikey": self.service_key},
                json={
                    "email": email,
                    "password": password,
                    "email_confirm": True,  # no email server configured
                    "user_metadata": metadata,
                },
            )
        except httpx.HTTPError as e:
            logger.warning("identity_unreachable", operation="create_account", error=str(e))
            raise IdentityUnavailableError("Identity provider unavailable") from e

        if response.status_code not in (200, 201):
            message = _error_message(response, "Failed to create account")
            logger.info("signup_failed", email=email, status=response.status_code, error=message)
            raise IdentityError(message)

        return str(response.json()["id"])

    async def close(self) -> None:
        await self.client.aclose()


_provider: IdentityProvider | None = None


async def init_identity(settings: Settings) -> IdentityProvider:
    """Initialize the identity provider client."""
    global _provider  # noqa: PLW0603
    _provider = GoTrueIdentityProvider(
        settings.identity_url,
        settings.identity_service_key,
        timeout=settings.identity_timeout_seconds,
    )
    return _provider


async def close_identity() -> None:
    """Close the identity provider client."""
    global _provider  # noqa: PLW0603
    if _provider:
        await _provider.close()
        _provider = None


def get_identity_provider() -> IdentityProvider:
    """Get the identity provider (FastAPI dependency)."""
    if _provider is None:
        msg = "Identity provider not initialized. Call init_identity() first."
        raise RuntimeError(msg)
    return _provider
