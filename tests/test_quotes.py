from decimal import Decimal

import pytest

from fechou.core.exceptions import AppException
from fechou.models.enums.quote_status import QuoteStatus
from fechou.services.quotes.quote_service import get_owned_quote, transition_quote
from tests.conftest import (
    register,
    bearer,
    load_user,
    create_client_record,
    create_quote_record,
)


class TestCreateQuote:
    async def test_totals_are_computed(self, client, provider):
        """Item totals, subtotal and total come from quantities and prices."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        assert quote["status"] == "draft"
        assert quote["quote_number"].startswith("FH")
        assert len(quote["quote_number"]) == 10
        assert [Decimal(i["total"]) for i in quote["items"]] == [Decimal("300.00"), Decimal("80.50")]
        assert Decimal(quote["subtotal"]) == Decimal("380.50")
        assert Decimal(quote["discount"]) == Decimal("30.50")
        assert Decimal(quote["total"]) == Decimal("350.00")
        assert quote["client"]["name"] == "Carlos Lima"

    async def test_send_now_creates_pending_quote(self, client, provider):
        """Quotes created as sent start pending with sent_at stamped."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)

        assert quote["status"] == "pending"
        assert quote["sent_at"] is not None

    async def test_quote_needs_items(self, client, provider):
        """A quote without items is a 400."""
        c = await create_client_record(client, provider["headers"])

        resp = await client.post(
            "/quotes",
            json={"client_id": c["id"], "title": "Vazio", "items": []},
            headers=provider["headers"],
        )

        assert resp.status_code == 400
        assert resp.json()["error_code"] == "QUOTE_EMPTY"

    async def test_discount_cannot_exceed_subtotal(self, client, provider):
        """Discount larger than the subtotal is a 400."""
        c = await create_client_record(client, provider["headers"])

        resp = await client.post(
            "/quotes",
            json={
                "client_id": c["id"],
                "title": "Desconto alto",
                "items": [{"description": "Serviço", "quantity": 1, "unit_price": "50.00"}],
                "discount": "60.00",
            },
            headers=provider["headers"],
        )

        assert resp.status_code == 400
        assert resp.json()["error_code"] == "QUOTE_INVALID_DISCOUNT"
        assert (await load_user("provider@example.com")).quotes_used_this_month == 0

    async def test_client_must_belong_to_caller(self, client, provider):
        """Using another user's client is a 404."""
        other = await register(client, "other@example.com")
        foreign = await create_client_record(client, bearer(other))

        resp = await client.post(
            "/quotes",
            json={
                "client_id": foreign["id"],
                "title": "Invasão",
                "items": [{"description": "Serviço", "quantity": 1, "unit_price": "50.00"}],
            },
            headers=provider["headers"],
        )

        assert resp.status_code == 404
        assert resp.json()["error_code"] == "CLIENT_NOT_FOUND"

    async def test_quantity_must_be_positive(self, client, provider):
        """Zero quantity fails request validation with field details."""
        c = await create_client_record(client, provider["headers"])

        resp = await client.post(
            "/quotes",
            json={
                "client_id": c["id"],
                "title": "Zero",
                "items": [{"description": "Serviço", "quantity": 0, "unit_price": "50.00"}],
            },
            headers=provider["headers"],
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "items.0.quantity"


class TestListAndGet:
    async def test_list_newest_first_with_item_count(self, client, provider):
        """Listing returns the caller's quotes newest first."""
        c = await create_client_record(client, provider["headers"])
        first = await create_quote_record(client, provider["headers"], c["id"], title="Primeiro")
        second = await create_quote_record(client, provider["headers"], c["id"], title="Segundo")

        resp = await client.get("/quotes", headers=provider["headers"])

        items = resp.json()["data"]["items"]
        assert [q["id"] for q in items] == [second["id"], first["id"]]
        assert items[0]["items_count"] == 2
        assert items[0]["client_name"] == "Carlos Lima"

    async def test_filter_by_status(self, client, provider):
        """The status filter narrows the list."""
        c = await create_client_record(client, provider["headers"])
        await create_quote_record(client, provider["headers"], c["id"])
        sent = await create_quote_record(client, provider["headers"], c["id"], send_now=True)

        resp = await client.get("/quotes?status=pending", headers=provider["headers"])

        assert [q["id"] for q in resp.json()["data"]["items"]] == [sent["id"]]

    async def test_other_users_quote_is_not_found(self, client, provider):
        """Quotes of one user are invisible to another."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])
        other = await register(client, "other@example.com")

        resp = await client.get(f"/quotes/{quote['id']}", headers=bearer(other))

        assert resp.status_code == 404
        assert resp.json()["error_code"] == "QUOTE_NOT_FOUND"


class TestUpdateAndDelete:
    async def test_replacing_items_recomputes_totals(self, client, provider):
        """New items replace the old ones and totals follow."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.put(
            f"/quotes/{quote['id']}",
            json={
                "items": [{"description": "Reboco", "quantity": 3, "unit_price": "20.00"}],
                "discount": "0",
            },
            headers=provider["headers"],
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert len(data["items"]) == 1
        assert Decimal(data["subtotal"]) == Decimal("60.00")
        assert Decimal(data["total"]) == Decimal("60.00")

    async def test_approved_quote_is_not_editable(self, client, provider):
        """Only draft and pending quotes can be edited."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
        await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        resp = await client.put(
            f"/quotes/{quote['id']}",
            json={"title": "Tarde demais"},
            headers=provider["headers"],
        )

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "QUOTE_INVALID_STATE"

    async def test_delete_hides_quote(self, client, provider):
        """Deleted quotes disappear from reads."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.delete(f"/quotes/{quote['id']}", headers=provider["headers"])
        fetched = await client.get(f"/quotes/{quote['id']}", headers=provider["headers"])

        assert resp.status_code == 200
        assert fetched.status_code == 404


class TestLifecycle:
    async def test_send_moves_draft_to_pending(self, client, provider):
        """Sending a draft stamps sent_at."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.post(f"/quotes/{quote['id']}/send", headers=provider["headers"])

        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "pending"
        assert resp.json()["data"]["sent_at"] is not None

    async def test_approve_only_once(self, client, provider):
        """A second approval of the same quote is a 409."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)

        first = await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )
        second = await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        assert first.status_code == 200
        assert first.json()["data"]["approved_at"] is not None
        assert second.status_code == 409

    async def test_stale_transition_loses_the_race(self, client, provider, db):
        """A transition based on an outdated status read fails with 409."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)

        user = await load_user("provider@example.com")
        stale = await get_owned_quote(db, quote["id"], user)
        await db.commit()

        await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        with pytest.raises(AppException) as exc:
            await transition_quote(db, stale, QuoteStatus.approved, actor_email=user.email)

        assert exc.value.status_code == 409
        assert exc.value.error_code == "QUOTE_INVALID_STATE"

        fetched = await client.get(f"/quotes/{quote['id']}", headers=provider["headers"])
        assert fetched.json()["data"]["status"] == "approved"

    async def test_stale_payment_confirmation_loses_the_race(self, client, provider, db):
        """A payment confirmed from an outdated read fails with 409 and records nothing."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
        await client.post(f"/public/quotes/{quote['quote_number']}/approve")

        user = await load_user("provider@example.com")
        stale = await get_owned_quote(db, quote["id"], user)
        await db.commit()

        paid = await client.post(
            f"/quotes/{quote['id']}/confirm-payment",
            json={"method": "PIX"},
            headers=provider["headers"],
        )
        assert paid.status_code == 200

        with pytest.raises(AppException) as exc:
            await transition_quote(db, stale, QuoteStatus.paid, actor_email=user.email)

        assert exc.value.status_code == 409
        assert exc.value.error_code == "QUOTE_INVALID_STATE"

        payments = await client.get("/payments", headers=provider["headers"])
        assert payments.json()["data"]["total"] == 1

    async def test_terminal_states_do_not_move(self, client, provider):
        """Rejected quotes cannot be approved."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
        await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "rejected", "rejection_reason": "Caro demais"},
            headers=provider["headers"],
        )

        resp = await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "QUOTE_INVALID_TRANSITION"

    async def test_draft_cannot_jump_to_approved(self, client, provider):
        """Drafts must be sent before approval."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        assert resp.status_code == 409


class TestConfirmPayment:
    async def test_payment_marks_quote_paid(self, client, provider):
        """Confirming payment records a PAID payment for the total."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
        await client.patch(
            f"/quotes/{quote['id']}/status",
            json={"status": "approved"},
            headers=provider["headers"],
        )

        resp = await client.post(
            f"/quotes/{quote['id']}/confirm-payment",
            json={"method": "PIX"},
            headers=provider["headers"],
        )
        payments = await client.get("/payments", headers=provider["headers"])

        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "paid"
        assert resp.json()["data"]["paid_at"] is not None

        items = payments.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["status"] == "PAID"
        assert items[0]["quote_number"] == quote["quote_number"]
        assert Decimal(items[0]["amount"]) == Decimal("350.00")

    async def test_pending_quote_cannot_be_paid(self, client, provider):
        """Payment requires an approved quote."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)

        resp = await client.post(
            f"/quotes/{quote['id']}/confirm-payment",
            json={"method": "PIX"},
            headers=provider["headers"],
        )

        assert resp.status_code == 409
        assert (await client.get("/payments", headers=provider["headers"])).json()["data"]["total"] == 0
