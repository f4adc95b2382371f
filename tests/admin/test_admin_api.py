"""Admin endpoint tests."""

from __future__ import annotations

from httpx import AsyncClient


class TestAdminUsers:
    async def test_list_users(self, client: AsyncClient, signup, admin_headers):
        await signup()
        await signup(role="organizer")

        response = await client.get("/api/v1/admin/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert {u["role"] for u in data["users"]} == {"gamer", "organizer", "admin"}

    async def test_requires_admin(self, client: AsyncClient, signup):
        _, headers = await signup()

        response = await client.get("/api/v1/admin/users", headers=headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden - Requires role: admin"

    async def test_ban_and_unban(self, client: AsyncClient, signup, admin_headers):
        profile, headers = await signup()

        response = await client.patch(
            f"/api/v1/admin/users/{profile['id']}/ban", headers=admin_headers, json={"banned": True},
        )
        assert response.status_code == 200
        assert response.json()["is_banned"] is True
        assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 403
        leaderboard = (await client.get("/api/v1/gamification/leaderboard")).json()["entries"]
        assert profile["id"] not in {e["id"] for e in leaderboard}

        await client.patch(
            f"/api/v1/admin/users/{profile['id']}/ban", headers=admin_headers, json={"banned": False},
        )
        assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 200

    async def test_ban_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.patch("/api/v1/admin/users/missing/ban", headers=admin_headers, json={"banned": True})
        assert response.status_code == 404


class TestReconcileXP:
    async def test_reconcile_repairs_total(self, client: AsyncClient, signup, admin_headers, app_store):
        profile, _ = await signup()
        key = f"user_profile:{profile['id']}"
        doc = await app_store.get(key)
        await app_store.set(key, {**doc, "total_xp": 0, "current_xp": 0})

        response = await client.post(f"/api/v1/admin/users/{profile['id']}/reconcile-xp", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["total_xp"] == 50

    async def test_reconcile_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/v1/admin/users/missing/reconcile-xp", headers=admin_headers)
        assert response.status_code == 404
