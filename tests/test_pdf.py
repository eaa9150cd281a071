from datetime import datetime, timedelta, timezone

from fechou.models.enums.user_plan import UserPlan
from fechou.utils.pdf_generators import common
from tests.conftest import update_user, create_client_record, create_quote_record


def count_watermarks(monkeypatch) -> list:
    calls = []
    real_draw = common.draw_watermark

    def spy(canvas, doc):
        calls.append(doc)
        real_draw(canvas, doc)

    monkeypatch.setattr(common, "draw_watermark", spy)
    return calls


async def paid_quote(client, provider) -> dict:
    c = await create_client_record(client, provider["headers"])
    quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
    await client.post(f"/public/quotes/{quote['quote_number']}/approve")
    await client.post(
        f"/quotes/{quote['id']}/confirm-payment",
        json={"method": "PIX"},
        headers=provider["headers"],
    )
    return quote


class TestQuotePdf:
    async def test_free_user_pdf_has_watermark(self, client, provider, monkeypatch):
        """Non-premium PDFs carry the watermark on every page."""
        calls = count_watermarks(monkeypatch)
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.get(f"/quotes/{quote['id']}/pdf", headers=provider["headers"])

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert f"pedido-{quote['quote_number']}.pdf" in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")
        assert len(calls) >= 1

    async def test_premium_user_pdf_has_no_watermark(self, client, provider, monkeypatch):
        """Premium PDFs are clean."""
        await update_user(
            "provider@example.com",
            plan=UserPlan.PREMIUM,
            plan_expires_at=datetime.now(timezone.utc) + timedelta(days=5),
        )
        calls = count_watermarks(monkeypatch)
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.get(f"/public/quotes/{quote['quote_number']}/pdf")

        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF")
        assert calls == []


class TestReceiptPdf:
    async def test_receipt_needs_paid_quote(self, client, provider):
        """Unpaid quotes have no receipt."""
        c = await create_client_record(client, provider["headers"])
        quote = await create_quote_record(client, provider["headers"], c["id"])

        resp = await client.get(f"/quotes/{quote['id']}/receipt/pdf", headers=provider["headers"])

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "QUOTE_NOT_PAID"

    async def test_receipt_for_paid_quote(self, client, provider, monkeypatch):
        """Paid quotes render a watermarked receipt for FREE users."""
        calls = count_watermarks(monkeypatch)
        quote = await paid_quote(client, provider)

        owner = await client.get(f"/quotes/{quote['id']}/receipt/pdf", headers=provider["headers"])
        public = await client.get(f"/public/quotes/{quote['quote_number']}/receipt/pdf")

        assert owner.content.startswith(b"%PDF")
        assert public.content.startswith(b"%PDF")
        assert f"recibo-{quote['quote_number']}.pdf" in public.headers["content-disposition"]
        assert len(calls) >= 2
