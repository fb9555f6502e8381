import re
import uuid

import pytest


RFC3339_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


@pytest.fixture
def payload(user_id):
    def _make(**overrides) -> dict:
        body = {
            "service_name": "Yandex Plus",
            "price": 400,
            "user_id": user_id,
            "start_date": "07-2025",
        }
        body.update(overrides)
        return body

    return _make


@pytest.mark.anyio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_create_returns_record(client, payload, user_id):
    r = await client.post("/subscriptions", json=payload(end_date="12-2025"))
    assert r.status_code == 201, r.text

    body = r.json()
    assert set(body) == {
        "id", "service_name", "price", "user_id",
        "start_date", "end_date", "created_at", "updated_at",
    }
    uuid.UUID(body["id"])
    assert body["service_name"] == "Yandex Plus"
    assert body["price"] == 400
    assert body["user_id"] == user_id
    assert body["start_date"] == "07-2025"
    assert body["end_date"] == "12-2025"
    assert RFC3339_UTC.match(body["created_at"])
    assert RFC3339_UTC.match(body["updated_at"])


@pytest.mark.anyio
async def test_create_without_end_date_returns_null(client, payload):
    r = await client.post("/subscriptions", json=payload())
    assert r.status_code == 201, r.text
    assert r.json()["end_date"] is None


@pytest.mark.anyio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"service_name": " ab "}, "service_name must be at least 3 characters"),
        ({"price": 0}, "price must be positive integer"),
        ({"user_id": "not-a-uuid"}, "invalid user_id"),
        ({"start_date": "2025-07"}, "invalid month format, expected MM-YYYY: 2025-07"),
        ({"start_date": "12-2025", "end_date": "07-2025"}, "end_date must be after start_date"),
    ],
)
async def test_create_invalid_argument_is_400_with_detail(client, uow, payload, overrides, message):
    r = await client.post("/subscriptions", json=payload(**overrides))
    assert r.status_code == 400, r.text
    assert r.json() == {"error": message}
    assert uow.subscriptions.calls == []


@pytest.mark.anyio
async def test_create_malformed_json_is_400(client):
    r = await client.post(
        "/subscriptions",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "invalid json"}


@pytest.mark.anyio
async def test_create_missing_field_is_400(client, payload):
    body = payload()
    del body["price"]
    r = await client.post("/subscriptions", json=body)
    assert r.status_code == 400
    assert "price" in r.json()["error"]


@pytest.mark.anyio
async def test_get_roundtrip_and_not_found(client, payload):
    created = (await client.post("/subscriptions", json=payload())).json()

    r = await client.get(f"/subscriptions/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created

    r = await client.get(f"/subscriptions/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json() == {"error": "not found"}


@pytest.mark.anyio
@pytest.mark.parametrize("method", ["GET", "DELETE"])
async def test_invalid_path_id_is_400(client, method):
    r = await client.request(method, "/subscriptions/not-a-uuid")
    assert r.status_code == 400
    assert r.json() == {"error": "invalid id"}


@pytest.mark.anyio
async def test_update_keeps_identity(client, payload):
    created = (await client.post("/subscriptions", json=payload())).json()

    r = await client.put(
        f"/subscriptions/{created['id']}",
        json=payload(service_name="Netflix", price=999, end_date="09-2025"),
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["id"] == created["id"]
    assert body["created_at"] == created["created_at"]
    assert (body["service_name"], body["price"], body["end_date"]) == ("Netflix", 999, "09-2025")


@pytest.mark.anyio
async def test_update_errors(client, payload):
    r = await client.put(f"/subscriptions/{uuid.uuid4()}", json=payload())
    assert r.status_code == 404

    r = await client.put("/subscriptions/nope", json=payload())
    assert r.status_code == 400
    assert r.json() == {"error": "invalid id"}

    created = (await client.post("/subscriptions", json=payload())).json()
    r = await client.put(f"/subscriptions/{created['id']}", json=payload(price=-1))
    assert r.status_code == 400


@pytest.mark.anyio
async def test_delete_then_delete_again(client, payload):
    created = (await client.post("/subscriptions", json=payload())).json()

    r = await client.delete(f"/subscriptions/{created['id']}")
    assert r.status_code == 204
    assert r.content == b""

    r = await client.delete(f"/subscriptions/{created['id']}")
    assert r.status_code == 404


@pytest.mark.anyio
async def test_duplicate_is_409(client, uow, payload):
    from src.subtrack.domain.errors import SubscriptionError

    uow.subscriptions.fail_with = SubscriptionError.duplicate("subscription already exists")
    r = await client.post("/subscriptions", json=payload())
    assert r.status_code == 409
    assert r.json() == {"error": "already exists"}


@pytest.mark.anyio
async def test_list_filters_and_limits(client, payload, user_id):
    other = str(uuid.uuid4())
    for i in range(3):
        await client.post("/subscriptions", json=payload(service_name=f"Service {i}"))
    await client.post("/subscriptions", json=payload(user_id=other, service_name="Service 0"))

    r = await client.get("/subscriptions")
    assert r.status_code == 200
    assert len(r.json()) == 4
    assert r.json()[0]["user_id"] == other

    r = await client.get("/subscriptions", params={"user_id": user_id})
    assert {s["user_id"] for s in r.json()} == {user_id}
    assert len(r.json()) == 3

    r = await client.get("/subscriptions", params={"service_name": "Service 0"})
    assert len(r.json()) == 2

    r = await client.get("/subscriptions", params={"limit": 2, "offset": 1})
    assert len(r.json()) == 2

    # нечисловые limit/offset игнорируются
    r = await client.get("/subscriptions", params={"limit": "many", "offset": "x"})
    assert r.status_code == 200
    assert len(r.json()) == 4


@pytest.mark.anyio
async def test_list_limit_over_max_resets_to_default(client, payload):
    for _ in range(25):
        await client.post("/subscriptions", json=payload())

    assert len((await client.get("/subscriptions", params={"limit": 500})).json()) == 20
    assert len((await client.get("/subscriptions", params={"limit": 0})).json()) == 20
    assert len((await client.get("/subscriptions", params={"limit": 100})).json()) == 25
    assert len((await client.get("/subscriptions", params={"offset": -5})).json()) == 20


@pytest.mark.anyio
async def test_list_invalid_user_id_is_400(client):
    r = await client.get("/subscriptions", params={"user_id": "bad"})
    assert r.status_code == 400
    assert r.json() == {"error": "invalid user_id"}


@pytest.mark.anyio
async def test_summary(client, payload, user_id):
    await client.post(
        "/subscriptions",
        json=payload(price=100, start_date="01-2025", end_date="03-2025"),
    )
    await client.post(
        "/subscriptions",
        json=payload(price=7, start_date="01-2025", service_name="Other", user_id=str(uuid.uuid4())),
    )

    r = await client.get("/subscriptions/summary", params={"start": "01-2025", "end": "03-2025"})
    assert r.status_code == 200, r.text
    assert r.json() == {"total": 321}

    r = await client.get(
        "/subscriptions/summary",
        params={"start": "01-2025", "end": "03-2025", "user_id": user_id},
    )
    assert r.json() == {"total": 300}

    r = await client.get(
        "/subscriptions/summary",
        params={"start": "01-2025", "end": "03-2025", "service_name": "Other"},
    )
    assert r.json() == {"total": 21}

    r = await client.get("/subscriptions/summary", params={"start": "04-2025", "end": "06-2025"})
    assert r.json() == {"total": 21}


@pytest.mark.anyio
@pytest.mark.parametrize(
    "params, message",
    [
        ({}, "start and end are required"),
        ({"start": "01-2025"}, "start and end are required"),
        ({"start": "2025-01", "end": "03-2025"}, "invalid month format, expected MM-YYYY: 2025-01"),
        ({"start": "07-2025", "end": "06-2025"}, "end must be after start"),
        ({"start": "01-2025", "end": "03-2025", "user_id": "bad"}, "invalid user_id"),
    ],
)
async def test_summary_bad_request(client, params, message):
    r = await client.get("/subscriptions/summary", params=params)
    assert r.status_code == 400
    assert r.json() == {"error": message}


@pytest.mark.anyio
async def test_unexpected_failure_is_generic_500(client, uow, payload):
    uow.subscriptions.fail_with = RuntimeError("password=secret in dsn")

    r = await client.post("/subscriptions", json=payload())
    assert r.status_code == 500
    assert r.json() == {"error": "internal error"}
    assert "secret" not in r.text

    # процесс продолжает обслуживать запросы
    uow.subscriptions.fail_with = None
    r = await client.get("/health")
    assert r.status_code == 200


@pytest.mark.anyio
async def test_unknown_route_uses_error_body(client):
    r = await client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


@pytest.mark.anyio
@pytest.mark.parametrize("price", ["400", True, 400.5])
async def test_create_non_integer_price_is_400(client, uow, payload, price):
    r = await client.post("/subscriptions", json=payload(price=price))
    assert r.status_code == 400, r.text
    assert r.json()["error"].startswith("invalid price")
    assert uow.subscriptions.calls == []


@pytest.mark.anyio
async def test_summary_range_ending_in_year_9999(client, payload):
    await client.post("/subscriptions", json=payload(price=10, start_date="01-9999", end_date=None))

    r = await client.get("/subscriptions/summary", params={"start": "11-9999", "end": "12-9999"})
    assert r.status_code == 200, r.text
    assert r.json() == {"total": 20}
