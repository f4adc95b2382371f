"""Shared test fixtures."""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tourney.auth.identity import get_identity_provider
from tourney.config import get_settings
from tourney.exceptions import AuthenticationError, IdentityError
from tourney.gamification.xp_service import XPService
from tourney.kv import MemoryKVStore, close_store, get_store, init_store, keys
from tourney.main import create_app
from tourney.models import UserProfile


class FakeIdentityProvider:
    """In-memory identity provider: accounts by email, tokens by user id."""

    def __init__(self) -> None:
        self.accounts: dict[str, dict[str, Any]] = {}
        self.tokens: dict[str, str] = {}

    async def verify_token(self, token: str) -> str:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise AuthenticationError("Unauthorized - Invalid token")
        return user_id

    async def create_account(self, email: str, password: str, metadata: dict[str, Any]) -> str:
        if email in self.accounts:
            raise IdentityError("A user with this email address has already been registered")
        user_id = str(uuid.uuid4())
        self.accounts[email] = {"id": user_id, "password": password, "metadata": metadata}
        self.tokens[f"token-{user_id}"] = user_id
        return user_id

    def token_for(self, user_id: str) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token


@pytest.fixture
def store() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture
def xp_service(store: MemoryKVStore) -> XPService:
    return XPService(store)


@pytest.fixture
def make_profile(store: MemoryKVStore):
    """Factory that writes a profile document straight to the store."""

    async def _make(user_id: str | None = None, **fields: Any) -> UserProfile:
        profile = UserProfile(
            id=user_id or str(uuid.uuid4()),
            role=fields.pop("role", "gamer"),
            display_name=fields.pop("display_name", "Player One"),
            **fields,
        )
        await store.set(keys.user_profile(profile.id), profile.to_document())
        return profile

    return _make


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest_asyncio.fixture
async def client(identity: FakeIdentityProvider) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client over the memory store and the fake identity provider."""
    os.environ["TOURNEY_STORE_BACKEND"] = "memory"
    os.environ["TOURNEY_LOG_FORMAT"] = "console"
    get_settings.cache_clear()

    app = create_app()
    await init_store(get_settings())
    app.dependency_overrides[get_identity_provider] = lambda: identity

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_store()
    get_settings.cache_clear()


@pytest.fixture
def app_store(client: AsyncClient) -> MemoryKVStore:
    """The store behind the test client."""
    return get_store()  # type: ignore[return-value]


@pytest.fixture
def signup(client: AsyncClient, identity: FakeIdentityProvider):
    """Sign up through the API. Returns (profile json, auth headers)."""

    async def _signup(
        role: str = "gamer",
        display_name: str = "Player One",
        email: str | None = None,
    ) -> tuple[dict, dict[str, str]]:
        response = await client.post("/api/v1/auth/signup", json={
            "email": email or f"{uuid.uuid4().hex[:10]}@example.com",
            "password": "SecureP@ss1",
            "role": role,
            "display_name": display_name,
        })
        assert response.status_code == 201, response.text
        profile = response.json()
        return profile, {"Authorization": f"Bearer {identity.token_for(profile['id'])}"}

    return _signup


@pytest_asyncio.fixture
async def admin_headers(app_store: MemoryKVStore, identity: FakeIdentityProvider) -> dict[str, str]:
    """An admin profile written directly (admins cannot self-signup)."""
    admin = UserProfile(id=str(uuid.uuid4()), role="admin", display_name="Admin")
    await app_store.set(keys.user_profile(admin.id), admin.to_document())
    return {"Authorization": f"Bearer {identity.token_for(admin.id)}"}
