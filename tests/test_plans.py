from datetime import datetime, timedelta, timezone

import pytest

from fechou.core.exceptions import AppException
from fechou.models.enums.user_plan import UserPlan
from fechou.models.users.user_models import User
from fechou.services.plans.plan_service import (
    is_premium,
    is_plan_expired,
    effective_plan,
    apply_monthly_reset,
    apply_plan,
    can_create_quote,
    parse_plan,
    plan_limits,
)
from tests.conftest import (
    register,
    bearer,
    update_user,
    load_user,
    create_client_record,
    create_quote_record,
)

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_user(**overrides) -> User:
    values = dict(
        id=1,
        email="unit@example.com",
        plan=UserPlan.FREE,
        plan_expires_at=None,
        quotes_limit=5,
        quotes_used_this_month=0,
        bonus_quotes=0,
        last_quote_reset=NOW,
    )
    values.update(overrides)
    return User(**values)


class TestEffectivePlan:
    def test_cortesia_never_expires(self):
        """PREMIUM_CORTESIA stays premium even with a past expiry."""
        user = make_user(plan=UserPlan.PREMIUM_CORTESIA, plan_expires_at=NOW - timedelta(days=90))

        assert is_premium(user, NOW)
        assert not is_plan_expired(user, NOW)

    def test_premium_without_expiry_is_premium(self):
        """A PREMIUM plan with no expiry date counts as active."""
        assert is_premium(make_user(plan=UserPlan.PREMIUM), NOW)

    def test_expired_premium_behaves_as_free(self):
        """Once plan_expires_at passes the user falls back to FREE."""
        user = make_user(plan=UserPlan.PREMIUM, plan_expires_at=NOW - timedelta(seconds=1))

        assert is_plan_expired(user, NOW)
        assert not is_premium(user, NOW)
        assert effective_plan(user, NOW) == UserPlan.FREE

    def test_naive_expiry_is_read_as_utc(self):
        """Timestamps coming back from SQLite without tzinfo still compare."""
        user = make_user(plan=UserPlan.PREMIUM, plan_expires_at=datetime(2026, 3, 20))

        assert is_premium(user, NOW)


class TestMonthlyReset:
    def test_same_month_keeps_usage(self):
        """Usage survives within the same calendar month."""
        user = make_user(quotes_used_this_month=3, last_quote_reset=NOW - timedelta(days=10))

        assert apply_monthly_reset(user, NOW) is False
        assert user.quotes_used_this_month == 3

    def test_new_month_resets_usage(self):
        """Crossing into a new UTC month zeroes the counter."""
        user = make_user(quotes_used_this_month=5, last_quote_reset=datetime(2026, 2, 28, 23, 59, tzinfo=timezone.utc))

        assert apply_monthly_reset(user, NOW) is True
        assert user.quotes_used_this_month == 0
        assert user.last_quote_reset == NOW

    def test_same_month_number_in_another_year_resets(self):
        """March last year is not March this year."""
        user = make_user(quotes_used_this_month=2, last_quote_reset=datetime(2025, 3, 20, tzinfo=timezone.utc))

        assert apply_monthly_reset(user, NOW) is True


class TestQuota:
    def test_free_user_limited_by_limit_plus_bonus(self):
        """A FREE user may create quotes up to quotes_limit + bonus_quotes."""
        user = make_user(quotes_used_this_month=5, bonus_quotes=1)
        assert can_create_quote(user, NOW)

        user.quotes_used_this_month = 6
        assert not can_create_quote(user, NOW)

    def test_plan_limits_summary(self):
        """plan_limits reports remaining quotes for FREE users."""
        limits = plan_limits(make_user(quotes_used_this_month=2, bonus_quotes=1), NOW)

        assert limits.plan == UserPlan.FREE
        assert limits.monthly_quote_limit == 5
        assert limits.quotes_remaining == 4
        assert limits.can_create_quote is True


class TestPlanChanges:
    def test_parse_plan_is_case_insensitive(self):
        """Plan names are accepted in any case."""
        assert parse_plan("premium") == UserPlan.PREMIUM

    def test_parse_plan_rejects_unknown(self):
        """Unknown plans raise a 400."""
        with pytest.raises(AppException) as exc:
            parse_plan("GOLD")
        assert exc.value.status_code == 400

    def test_upgrade_to_premium(self):
        """PREMIUM runs for 30 days with an unlimited quota and fresh usage."""
        user = make_user(quotes_used_this_month=4)
        apply_plan(user, UserPlan.PREMIUM, NOW)

        assert user.plan == UserPlan.PREMIUM
        assert user.plan_expires_at == NOW + timedelta(days=30)
        assert user.quotes_limit == 999999
        assert user.quotes_used_this_month == 0

    def test_downgrade_to_free(self):
        """FREE clears the expiry and restores the default limit."""
        user = make_user(plan=UserPlan.PREMIUM, plan_expires_at=NOW + timedelta(days=3), quotes_limit=999999)
        apply_plan(user, UserPlan.FREE, NOW)

        assert user.plan_expires_at is None
        assert user.quotes_limit == 5


class TestQuoteQuotaApi:
    async def test_free_user_blocked_after_limit(self, client, provider):
        """The sixth quote of the month is refused for a FREE user."""
        c = await create_client_record(client, provider["headers"])
        for _ in range(5):
            await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.post(
            "/quotes",
            json={
                "client_id": c["id"],
                "title": "Extra",
                "items": [{"description": "Serviço", "quantity": 1, "unit_price": "10.00"}],
            },
            headers=provider["headers"],
        )

        assert resp.status_code == 403
        assert resp.json()["error_code"] == "PLAN_QUOTE_LIMIT_REACHED"
        assert (await load_user("provider@example.com")).quotes_used_this_month == 5

    async def test_bonus_quote_allows_one_more(self, client, provider):
        """Bonus quotes extend the monthly allowance."""
        await update_user("provider@example.com", bonus_quotes=1)
        c = await create_client_record(client, provider["headers"])
        for _ in range(6):
            await create_quote_record(client, provider["headers"], c["id"])

        limits = await client.get("/user/plan", headers=provider["headers"])

        assert limits.json()["data"]["quotes_used"] == 6
        assert limits.json()["data"]["can_create_quote"] is False

    async def test_premium_user_is_unlimited(self, client, provider):
        """Premium users are not counted against a cap."""
        await update_user(
            "provider@example.com",
            plan=UserPlan.PREMIUM,
            plan_expires_at=datetime.now(timezone.utc) + timedelta(days=10),
            quotes_limit=999999,
        )
        c = await create_client_record(client, provider["headers"])
        for _ in range(7):
            await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.get("/user/plan", headers=provider["headers"])

        assert resp.json()["data"]["is_premium"] is True
        assert resp.json()["data"]["can_create_quote"] is True

    async def test_stale_usage_resets_when_plan_is_read(self, client, provider):
        """Reading plan limits applies the monthly reset."""
        await update_user(
            "provider@example.com",
            quotes_used_this_month=5,
            last_quote_reset=datetime.now(timezone.utc) - timedelta(days=40),
        )

        resp = await client.get("/user/plan", headers=provider["headers"])

        assert resp.json()["data"]["quotes_used"] == 0
        assert resp.json()["data"]["quotes_remaining"] == 5

    async def test_free_list_shows_only_recent_quotes(self, client):
        """An expired premium user only sees the five latest quotes."""
        data = await register(client, "expired@example.com")
        headers = bearer(data)
        await update_user("expired@example.com", plan=UserPlan.PREMIUM_CORTESIA)
        c = await create_client_record(client, headers)
        created = [await create_quote_record(client, headers, c["id"]) for _ in range(7)]

        await update_user(
            "expired@example.com",
            plan=UserPlan.PREMIUM,
            plan_expires_at=datetime.now(timezone.utc) - timedelta(days=1),
        )
        resp = await client.get("/quotes", headers=headers)

        body = resp.json()["data"]
        assert body["total"] == 7
        assert body["visible_limit"] == 5
        assert [q["id"] for q in body["items"]] == [q["id"] for q in reversed(created)][:5]
