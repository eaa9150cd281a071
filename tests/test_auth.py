from fechou.models.enums.user_plan import UserPlan
from tests.conftest import register, bearer, update_user


class TestRegister:
    async def test_register_returns_tokens_and_free_profile(self, client):
        """A new account starts on the FREE plan with a referral code."""
        data = await register(client, "Maria@Example.com")

        user = data["user"]
        assert data["auth"]["access_token"]
        assert data["auth"]["refresh_token"]
        assert user["email"] == "maria@example.com"
        assert user["plan"] == "FREE"
        assert user["quotes_limit"] == 5
        assert user["quotes_used_this_month"] == 0
        assert len(user["referral_code"]) == 8

    async def test_duplicate_email_conflicts(self, client):
        """Registering the same email twice is a 409."""
        await register(client, "dup@example.com")

        resp = await client.post(
            "/auth/register",
            json={"email": "dup@example.com", "password": "secret123"},
        )

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "USER_EMAIL_EXISTS"

    async def test_missing_password_is_rejected(self, client):
        """Local registration needs both email and password."""
        resp = await client.post("/auth/register", json={"email": "nopass@example.com"})

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["details"][0]["field"] == "password"


class TestLogin:
    async def test_login_with_valid_credentials(self, client):
        """Correct credentials return a fresh token pair."""
        await register(client, "login@example.com", password="pa55word")

        resp = await client.post(
            "/auth/login",
            json={"email": "login@example.com", "password": "pa55word"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["auth"]["token_type"] == "bearer"

    async def test_wrong_password_is_unauthorized(self, client):
        """A bad password is a 401 with INVALID_CREDENTIALS."""
        await register(client, "wrong@example.com")

        resp = await client.post(
            "/auth/login",
            json={"email": "wrong@example.com", "password": "nope-nope"},
        )

        assert resp.status_code == 401
        assert resp.json()["error_code"] == "INVALID_CREDENTIALS"

    async def test_inactive_user_is_forbidden(self, client):
        """Deactivated accounts cannot log in."""
        await register(client, "inactive@example.com")
        await update_user("inactive@example.com", is_active=False)

        resp = await client.post(
            "/auth/login",
            json={"email": "inactive@example.com", "password": "secret123"},
        )

        assert resp.status_code == 403
        assert resp.json()["error_code"] == "USER_INACTIVE"


class TestCurrentUser:
    async def test_requires_bearer_token(self, client):
        """No Authorization header means 401."""
        resp = await client.get("/auth/user")

        assert resp.status_code == 401
        assert resp.json()["error_code"] == "UNAUTHORIZED"

    async def test_rejects_garbage_token(self, client):
        """A token that does not decode is a 401."""
        resp = await client.get("/auth/user", headers={"Authorization": "Bearer not-a-jwt"})

        assert resp.status_code == 401

    async def test_returns_profile(self, client, provider):
        """The profile belongs to the token's user."""
        resp = await client.get("/auth/user", headers=provider["headers"])

        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == "provider@example.com"

    async def test_inactive_user_token_is_forbidden(self, client, provider):
        """A token for a deactivated account is a 403."""
        await update_user("provider@example.com", is_active=False)

        resp = await client.get("/auth/user", headers=provider["headers"])

        assert resp.status_code == 403

    async def test_update_profile_uppercases_state(self, client, provider):
        """Profile updates persist and normalise the state code."""
        resp = await client.put(
            "/auth/user",
            json={"business_name": "Lima Reformas", "estado": "sp", "pix_key": "provider@example.com"},
            headers=provider["headers"],
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["business_name"] == "Lima Reformas"
        assert data["estado"] == "SP"

    async def test_duplicate_document_conflicts(self, client, provider):
        """Two users cannot share a CPF/CNPJ."""
        other = await register(client, "other@example.com")
        await client.put("/auth/user", json={"cpf_cnpj": "12345678900"}, headers=bearer(other))

        resp = await client.put(
            "/auth/user",
            json={"cpf_cnpj": "12345678900"},
            headers=provider["headers"],
        )

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "USER_DOCUMENT_EXISTS"


class TestBranding:
    async def test_free_user_cannot_brand(self, client, provider):
        """Custom colors are a premium feature."""
        resp = await client.patch(
            "/auth/user/branding",
            json={"primary_color": "#112233"},
            headers=provider["headers"],
        )

        assert resp.status_code == 403
        assert resp.json()["error_code"] == "PREMIUM_REQUIRED"

    async def test_free_user_is_refused_before_validation(self, client, provider):
        """A FREE user gets 403 even when the colors are malformed."""
        resp = await client.patch(
            "/auth/user/branding",
            json={"primary_color": "blue"},
            headers=provider["headers"],
        )

        assert resp.status_code == 403
        assert resp.json()["error_code"] == "PREMIUM_REQUIRED"

    async def test_premium_user_sets_colors(self, client, provider):
        """Premium users can change brand colors."""
        await update_user("provider@example.com", plan=UserPlan.PREMIUM_CORTESIA)

        resp = await client.patch(
            "/auth/user/branding",
            json={"primary_color": "#aabbcc"},
            headers=provider["headers"],
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["primary_color"] == "#AABBCC"

    async def test_invalid_color_is_a_validation_error(self, client, provider):
        """Colors must be #RRGGBB."""
        await update_user("provider@example.com", plan=UserPlan.PREMIUM_CORTESIA)

        resp = await client.patch(
            "/auth/user/branding",
            json={"primary_color": "blue"},
            headers=provider["headers"],
        )

        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "primary_color"


class TestRefreshAndLogout:
    async def test_refresh_rotates_token(self, client, provider):
        """A refresh token can be used exactly once."""
        refresh_token = provider["data"]["auth"]["refresh_token"]

        first = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
        second = await client.post("/auth/refresh", json={"refresh_token": refresh_token})

        assert first.status_code == 200
        assert first.json()["data"]["refresh_token"] != refresh_token
        assert second.status_code == 401
        assert second.json()["error_code"] == "INVALID_TOKEN"

    async def test_logout_invalidates_existing_tokens(self, client, provider):
        """After logout the old access and refresh tokens stop working."""
        resp = await client.post("/auth/logout", headers=provider["headers"])
        assert resp.status_code == 200

        profile = await client.get("/auth/user", headers=provider["headers"])
        refreshed = await client.post(
            "/auth/refresh",
            json={"refresh_token": provider["data"]["auth"]["refresh_token"]},
        )

        assert profile.status_code == 401
        assert refreshed.status_code == 401
