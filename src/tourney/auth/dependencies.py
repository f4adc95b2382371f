"""FastAPI authentication dependencies."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tourney.auth.identity import IdentityProvider, get_identity_provider
from tourney.kv import KVStore, get_store, keys
from tourney.models import UserProfile

_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """Verify the bearer token with the identity provider and return the user id.

    Raises 401 when no token is sent or the provider rejects it.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized - No token provided")
    return await identity.verify_token(credentials.credentials)


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    store: KVStore = Depends(get_store),
) -> UserProfile:
    """Load the caller's profile. Raises 404 if missing, 403 if banned."""
    doc = await store.get(keys.user_profile(user_id))
    if doc is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = UserProfile.model_validate(doc)
    if profile.is_banned:
        raise HTTPException(status_code=403, detail="Account is banned")
    return profile


def require_role(*roles: str) -> Callable[..., Awaitable[UserProfile]]:
    """Dependency factory: the caller's profile must have one of roles."""

    async def _check(user: UserProfile = Depends(get_current_user)) -> UserProfile:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail=f"Forbidden - Requires role: {' or '.join(roles)}")
        return user

    return _check
