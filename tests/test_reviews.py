from tests.conftest import register, bearer, create_client_record, create_quote_record


async def approved_quote(client, provider) -> dict:
    c = await create_client_record(client, provider["headers"])
    quote = await create_quote_record(client, provider["headers"], c["id"], send_now=True)
    await client.post(f"/public/quotes/{quote['quote_number']}/approve")
    return quote


class TestPublicReviews:
    async def test_client_leaves_review(self, client, provider):
        """A review is attached to the quote's client and owner."""
        quote = await approved_quote(client, provider)

        resp = await client.post(
            "/public/reviews",
            json={"quote_number": quote["quote_number"], "rating": 5, "comment": "Excelente"},
        )
        exists = await client.get(f"/public/quotes/{quote['quote_number']}/review")

        assert resp.status_code == 201
        assert resp.json()["data"]["client"]["name"] == "Carlos Lima"
        assert exists.json()["data"]["exists"] is True

    async def test_duplicate_review_conflicts(self, client, provider):
        """Only one review per quote and client."""
        quote = await approved_quote(client, provider)
        payload = {"quote_number": quote["quote_number"], "rating": 4}

        await client.post("/public/reviews", json=payload)
        resp = await client.post("/public/reviews", json=payload)

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "REVIEW_ALREADY_EXISTS"

    async def test_rating_out_of_range(self, client, provider):
        """Ratings go from 1 to 5."""
        quote = await approved_quote(client, provider)

        resp = await client.post(
            "/public/reviews",
            json={"quote_number": quote["quote_number"], "rating": 6},
        )

        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "rating"


class TestOwnerReviews:
    async def test_list_with_average(self, client, provider):
        """Owners see their reviews with the average rating."""
        first = await approved_quote(client, provider)
        second = await approved_quote(client, provider)
        await client.post("/public/reviews", json={"quote_number": first["quote_number"], "rating": 5})
        await client.post("/public/reviews", json={"quote_number": second["quote_number"], "rating": 4})

        resp = await client.get("/reviews", headers=provider["headers"])

        data = resp.json()["data"]
        assert data["total"] == 2
        assert data["average_rating"] == 4.5

    async def test_respond(self, client, provider):
        """The owner can answer a review."""
        quote = await approved_quote(client, provider)
        review = (
            await client.post("/public/reviews", json={"quote_number": quote["quote_number"], "rating": 3})
        ).json()["data"]

        resp = await client.post(
            f"/reviews/{review['id']}/respond",
            json={"response": "Obrigado pelo retorno!"},
            headers=provider["headers"],
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["response"] == "Obrigado pelo retorno!"
        assert resp.json()["data"]["responded_at"] is not None

    async def test_cannot_respond_to_others_review(self, client, provider):
        """Responding to another user's review is a 404."""
        quote = await approved_quote(client, provider)
        review = (
            await client.post("/public/reviews", json={"quote_number": quote["quote_number"], "rating": 3})
        ).json()["data"]
        other = await register(client, "other@example.com")

        resp = await client.post(
            f"/reviews/{review['id']}/respond",
            json={"response": "Não é meu"},
            headers=bearer(other),
        )

        assert resp.status_code == 404
