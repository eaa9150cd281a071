from datetime import datetime, timedelta, timezone

from fechou.models.enums.user_plan import UserPlan
from fechou.utils.datetime_utils import ensure_aware
from tests.conftest import register, bearer, update_user, load_user


class TestReferralRewards:
    async def test_free_referrer_gets_bonus_quote(self, client, provider):
        """A FREE referrer earns one extra quote."""
        code = provider["data"]["user"]["referral_code"]

        await register(client, "friend@example.com", referral_code=code.lower())

        referrer = await load_user("provider@example.com")
        friend = await load_user("friend@example.com")
        assert referrer.bonus_quotes == 1
        assert referrer.referral_count == 1
        assert friend.referred_by_id == referrer.id

    async def test_premium_referrer_gets_fifteen_days(self, client, provider):
        """A PREMIUM referrer's expiry moves 15 days past the current one."""
        expires = datetime.now(timezone.utc) + timedelta(days=10)
        await update_user("provider@example.com", plan=UserPlan.PREMIUM, plan_expires_at=expires)

        await register(client, "friend@example.com", referral_code=provider["data"]["user"]["referral_code"])

        referrer = await load_user("provider@example.com")
        delta = ensure_aware(referrer.plan_expires_at) - expires
        assert abs(delta - timedelta(days=15)) < timedelta(seconds=1)
        assert referrer.bonus_quotes == 0

    async def test_expired_premium_extends_from_now(self, client, provider):
        """An already expired PREMIUM plan is extended from the current time."""
        await update_user(
            "provider@example.com",
            plan=UserPlan.PREMIUM,
            plan_expires_at=datetime.now(timezone.utc) - timedelta(days=30),
        )

        await register(client, "friend@example.com", referral_code=provider["data"]["user"]["referral_code"])

        referrer = await load_user("provider@example.com")
        remaining = ensure_aware(referrer.plan_expires_at) - datetime.now(timezone.utc)
        assert timedelta(days=14) < remaining <= timedelta(days=15)

    async def test_cortesia_referrer_gets_no_reward(self, client, provider):
        """PREMIUM_CORTESIA referrers are counted but not rewarded."""
        await update_user("provider@example.com", plan=UserPlan.PREMIUM_CORTESIA)

        await register(client, "friend@example.com", referral_code=provider["data"]["user"]["referral_code"])

        resp = await client.get("/referrals", headers=provider["headers"])
        referral = resp.json()["data"]["items"][0]
        assert referral["status"] == "completed"
        assert referral["reward_type"] is None
        assert (await load_user("provider@example.com")).referral_count == 1

    async def test_unknown_code_is_ignored(self, client, provider):
        """Registration succeeds with a code nobody owns."""
        data = await register(client, "friend@example.com", referral_code="NOPE1234")

        assert data["user"]["email"] == "friend@example.com"
        assert (await load_user("provider@example.com")).referral_count == 0

    async def test_referrer_is_notified(self, client, provider):
        """The referrer receives a REFERRAL_REWARD notification."""
        await register(client, "friend@example.com", referral_code=provider["data"]["user"]["referral_code"])

        resp = await client.get("/notifications", headers=provider["headers"])

        assert [n["type"] for n in resp.json()["data"]["items"]] == ["REFERRAL_REWARD"]


class TestReferralEndpoints:
    async def test_stats_summarise_rewards(self, client, provider):
        """Stats report the code, link, count and earned bonus."""
        code = provider["data"]["user"]["referral_code"]
        await register(client, "a@example.com", referral_code=code)
        await register(client, "b@example.com", referral_code=code)

        resp = await client.get("/referrals/stats", headers=provider["headers"])

        data = resp.json()["data"]
        assert data["referral_code"] == code
        assert data["referral_link"].endswith(f"/register?ref={code}")
        assert data["referral_count"] == 2
        assert data["bonus_quotes"] == 2
        assert data["rewarded_referrals"] == 2

    async def test_list_shows_referred_users(self, client, provider):
        """Referrals list the referred user, newest first."""
        code = provider["data"]["user"]["referral_code"]
        await register(client, "a@example.com", referral_code=code)
        await register(client, "b@example.com", referral_code=code)

        resp = await client.get("/referrals", headers=provider["headers"])

        emails = [r["referred_email"] for r in resp.json()["data"]["items"]]
        assert emails == ["b@example.com", "a@example.com"]

    async def test_generate_keeps_existing_code(self, client, provider):
        """Users that already have a code keep it."""
        resp = await client.post("/referrals/code", headers=provider["headers"])

        assert resp.json()["data"]["referral_code"] == provider["data"]["user"]["referral_code"]

    async def test_generate_creates_prefixed_code(self, client):
        """Users without a code get FECHOU plus six characters."""
        data = await register(client, "nocode@example.com")
        await update_user("nocode@example.com", referral_code=None)

        resp = await client.post("/referrals/code", headers=bearer(data))

        code = resp.json()["data"]["referral_code"]
        assert code.startswith("FECHOU")
        assert len(code) == 12
        assert code == code.upper()
