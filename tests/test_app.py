import logging

import pytest


class TestHealth:
    async def test_service_info(self, client):
        """The root route describes the service."""
        resp = await client.get("/")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_database_ping(self, client):
        """The health check reaches the database."""
        resp = await client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["database"] == "ok"

    async def test_database_down_is_503(self, client, monkeypatch):
        """A failing database turns into a 503."""
        from sqlalchemy.exc import OperationalError

        import main

        async def broken():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(main, "_ping_database", broken)

        resp = await client.get("/health")

        assert resp.status_code == 503
        assert resp.json()["error_code"] == "SERVICE_UNAVAILABLE"
        assert resp.headers["retry-after"] == "30"


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def access_records():
    handler = CollectingHandler()
    access_logger = logging.getLogger("access")
    access_logger.addHandler(handler)
    yield handler.records
    access_logger.removeHandler(handler)


class TestRequestLogging:
    async def test_request_id_is_generated(self, client, access_records):
        """Every response carries a request id that the access line repeats."""
        resp = await client.get("/")

        request_id = resp.headers["x-request-id"]
        assert request_id
        assert access_records[-1].request_id == request_id
        assert access_records[-1].user_id == "-"
        assert access_records[-1].status_code == 200

    async def test_incoming_request_id_is_kept(self, client, access_records):
        """A caller supplied X-Request-ID is echoed back."""
        resp = await client.get("/", headers={"X-Request-ID": "abc-123"})

        assert resp.headers["x-request-id"] == "abc-123"
        assert access_records[-1].request_id == "abc-123"

    async def test_authenticated_user_is_logged(self, client, provider, access_records):
        """Authenticated requests record who made them."""
        resp = await client.get("/auth/user", headers=provider["headers"])

        assert resp.status_code == 200
        assert access_records[-1].user_id == provider["data"]["user"]["id"]
        assert access_records[-1].path == "/auth/user"


