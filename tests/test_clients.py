from tests.conftest import register, bearer, create_client_record, create_quote_record


class TestClientCrud:
    async def test_create_and_get(self, client, provider):
        """A created client can be read back by its owner."""
        created = await create_client_record(client, provider["headers"])

        resp = await client.get(f"/clients/{created['id']}", headers=provider["headers"])

        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "Carlos Lima"
        assert resp.json()["data"]["quote_count"] == 0

    async def test_list_is_newest_first_with_quote_count(self, client, provider):
        """The list carries each client's number of quotes."""
        older = await create_client_record(client, provider["headers"], name="Bruna")
        newer = await create_client_record(client, provider["headers"], name="Diego")
        await create_quote_record(client, provider["headers"], older["id"])

        resp = await client.get("/clients", headers=provider["headers"])

        items = resp.json()["data"]["items"]
        assert [c["id"] for c in items] == [newer["id"], older["id"]]
        assert items[1]["quote_count"] == 1

    async def test_update(self, client, provider):
        """Updates change only the provided fields."""
        created = await create_client_record(client, provider["headers"])

        resp = await client.put(
            f"/clients/{created['id']}",
            json={"city": "Campinas", "state": "SP"},
            headers=provider["headers"],
        )

        data = resp.json()["data"]
        assert data["city"] == "Campinas"
        assert data["name"] == "Carlos Lima"

    async def test_delete_is_soft(self, client, provider):
        """Deleted clients disappear from reads."""
        created = await create_client_record(client, provider["headers"])

        await client.delete(f"/clients/{created['id']}", headers=provider["headers"])
        resp = await client.get(f"/clients/{created['id']}", headers=provider["headers"])
        listing = await client.get("/clients", headers=provider["headers"])

        assert resp.status_code == 404
        assert listing.json()["data"]["total"] == 0

    async def test_missing_phone_is_a_validation_error(self, client, provider):
        """Phone is mandatory."""
        resp = await client.post("/clients", json={"name": "Sem telefone"}, headers=provider["headers"])

        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "phone"


class TestClientSearch:
    async def test_search_matches_name_email_and_phone(self, client, provider):
        """Search is a substring match on name, email and phone."""
        await create_client_record(client, provider["headers"], name="Fernanda Alves")
        await create_client_record(client, provider["headers"], name="Gustavo Reis")

        by_name = await client.get("/clients/search/fernanda", headers=provider["headers"])
        by_query = await client.get("/clients?search=Reis", headers=provider["headers"])
        by_phone = await client.get("/clients/search/99990000", headers=provider["headers"])

        assert [c["name"] for c in by_name.json()["data"]["items"]] == ["Fernanda Alves"]
        assert [c["name"] for c in by_query.json()["data"]["items"]] == ["Gustavo Reis"]
        assert by_phone.json()["data"]["total"] == 2


class TestClientIsolation:
    async def test_other_users_client_is_not_found(self, client, provider):
        """A user never sees or touches another user's clients."""
        created = await create_client_record(client, provider["headers"])
        other = await register(client, "other@example.com")
        headers = bearer(other)

        get = await client.get(f"/clients/{created['id']}", headers=headers)
        put = await client.put(f"/clients/{created['id']}", json={"city": "X"}, headers=headers)
        delete = await client.delete(f"/clients/{created['id']}", headers=headers)
        listing = await client.get("/clients", headers=headers)

        assert get.status_code == 404
        assert put.status_code == 404
        assert delete.status_code == 404
        assert listing.json()["data"]["total"] == 0
