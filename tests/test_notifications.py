from tests.conftest import register, create_client_record, create_quote_record


async def notified_provider(client, provider, quotes: int = 2):
    c = await create_client_record(client, provider["headers"])
    for _ in range(quotes):
        quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
        await client.get(f"/public/quotes/{quote['quote_number']}")


class TestNotifications:
    async def test_list_and_unread_count(self, client, provider):
        """Views create unread notifications, newest first."""
        await notified_provider(client, provider)

        listing = await client.get("/notifications", headers=provider["headers"])
        count = await client.get("/notifications/unread-count", headers=provider["headers"])

        data = listing.json()["data"]
        assert data["total"] == 2
        assert data["unread"] == 2
        assert {n["type"] for n in data["items"]} == {"QUOTE_VIEWED"}
        assert count.json()["data"]["unread"] == 2

    async def test_mark_one_read(self, client, provider):
        """Marking one notification read lowers the unread count."""
        await notified_provider(client, provider)
        first = (await client.get("/notifications", headers=provider["headers"])).json()["data"]["items"][0]

        resp = await client.patch(f"/notifications/{first['id']}/read", headers=provider["headers"])
        count = await client.get("/notifications/unread-count", headers=provider["headers"])

        assert resp.json()["data"]["is_read"] is True
        assert count.json()["data"]["unread"] == 1

    async def test_mark_all_read(self, client, provider):
        """Mark-all reports how many notifications changed."""
        await notified_provider(client, provider)

        resp = await client.patch("/notifications/read-all", headers=provider["headers"])
        unread = await client.get("/notifications?unread_only=true", headers=provider["headers"])

        assert resp.json()["data"]["updated"] == 2
        assert unread.json()["data"]["total"] == 0

    async def test_other_users_notification_is_not_found(self, client, provider):
        """Notifications are private."""
        await notified_provider(client, provider, quotes=1)
        first = (await client.get("/notifications", headers=provider["headers"])).json()["data"]["items"][0]
        other = await register(client, "other@example.com")

        resp = await client.patch(
            f"/notifications/{first['id']}/read",
            headers={"Authorization": f"Bearer {other['auth']['access_token']}"},
        )

        assert resp.status_code == 404
