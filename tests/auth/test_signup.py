"""Signup flow tests."""

from httpx import AsyncClient


def _body(**overrides) -> dict:
    return {
        "email": "player@example.com",
        "password": "SecureP@ss1",
        "role": "gamer",
        "display_name": "Player One",
        **overrides,
    }


class TestSignup:
    async def test_signup_creates_profile_with_welcome_xp(self, client: AsyncClient, identity):
        response = await client.post("/api/v1/auth/signup", json=_body())

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "player@example.com"
        assert data["role"] == "gamer"
        assert data["total_xp"] == 50
        assert data["current_xp"] == 50
        assert data["level"] == 1
        assert identity.accounts["player@example.com"]["metadata"] == {
            "role": "gamer", "display_name": "Player One",
        }

    async def test_signup_ledger_entry(self, client: AsyncClient, identity):
        response = await client.post("/api/v1/auth/signup", json=_body(role="organizer"))
        headers = {"Authorization": f"Bearer {identity.token_for(response.json()['id'])}"}

        history = (await client.get("/api/v1/gamification/xp", headers=headers)).json()

        assert history["total"] == 1
        assert history["entries"][0]["action_type"] == "account_created"
        assert history["entries"][0]["xp_amount"] == 50

    async def test_email_normalized(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/signup", json=_body(email="Player@Example.COM"))
        assert response.status_code == 201
        assert response.json()["email"] == "player@example.com"

    async def test_admin_role_rejected(self, client: AsyncClient, identity):
        response = await client.post("/api/v1/auth/signup", json=_body(role="admin"))

        assert response.status_code == 400
        assert "Invalid role" in response.json()["detail"]
        assert identity.accounts == {}

    async def test_duplicate_email(self, client: AsyncClient):
        await client.post("/api/v1/auth/signup", json=_body())

        response = await client.post("/api/v1/auth/signup", json=_body(display_name="Other"))

        assert response.status_code == 400
        assert "already been registered" in response.json()["detail"]

    async def test_short_password_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/signup", json=_body(password="123"))
        assert response.status_code == 422

    async def test_invalid_email_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/signup", json=_body(email="not-an-email"))
        assert response.status_code == 422
