import pytest
import requests
from fastapi.testclient import TestClient

from personapi.api.main import create_app
from personapi.enrichment import EnrichmentOutcome, EnrichmentService, classifiers
from personapi.errors import ClassifierStatusError, EnrichmentError, StorageError
from personapi.services import PersonService
from tests.unit.fakes import DummyResponse, FakeEnricher, FakeStore

pytestmark = pytest.mark.testclient


@pytest.fixture
def enricher():
    return FakeEnricher(EnrichmentOutcome(age=25, gender="male", nationality="GB"))


@pytest.fixture
def client(enricher, store):
    app = create_app(service=PersonService(enricher, store))
    with TestClient(app) as client:
        yield client


def test_status(client):
    resp = client.get("/status")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_person_router_crud(client):
    resp = client.get("/persons")
    assert resp.status_code == 200
    assert resp.json() == {"persons": [], "total": 0, "page": 1, "page_size": 10}

    resp = client.post("/persons", json={"name": "Test", "surname": "User"})
    assert resp.status_code == 201
    created = resp.json()
    assert created["age"] == 25
    assert created["gender"] == "male"
    assert created["nationality"] == "GB"
    assert created["patronymic"] is None
    assert created["created_at"]
    person_id = created["id"]

    resp = client.get(f"/persons/{person_id}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Test"

    resp = client.put(f"/persons/{person_id}", json={"name": "New", "age": 30})
    assert resp.status_code == 200
    body = resp.json()
    assert (body["name"], body["surname"], body["age"], body["gender"]) == ("New", "User", 30, "male")

    resp = client.delete(f"/persons/{person_id}")
    assert resp.status_code == 204

    resp = client.get(f"/persons/{person_id}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "person not found"


def test_routes_are_mirrored_under_api_prefix(client):
    resp = client.post("/api/persons", json={"name": "Anna", "surname": "Ivanova"})
    assert resp.status_code == 201
    assert client.get(f"/api/persons/{resp.json()['id']}").status_code == 200


def test_create_enrichment_failure_returns_502_and_persists_nothing(client, enricher):
    enricher.error = EnrichmentError([ClassifierStatusError("agify", "https://api.agify.io/", 500)])

    resp = client.post("/persons", json={"name": "Err", "surname": "User"})

    assert resp.status_code == 502
    assert client.get("/persons").json()["total"] == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"surname": "User"},
        {"name": "", "surname": "User"},
        {"name": "Test1", "surname": "User"},
        {"name": "Test", "surname": "User", "patronymic": "O'Neil"},
        {"name": "Test", "surname": "User", "age": 3},
    ],
)
def test_create_rejects_invalid_payload(client, enricher, payload):
    resp = client.post("/persons", json=payload)

    assert resp.status_code == 422
    assert enricher.calls == []


def test_create_accepts_cyrillic_and_empty_patronymic(client):
    resp = client.post(
        "/persons", json={"name": "Дмитрий", "surname": "Ушаков", "patronymic": ""}
    )

    assert resp.status_code == 201
    assert resp.json()["patronymic"] is None


def test_update_missing_person_returns_404(client):
    resp = client.put("/persons/12345", json={"age": 3})
    assert resp.status_code == 404


def test_update_with_empty_body_returns_400(client):
    person_id = client.post("/persons", json={"name": "Test", "surname": "User"}).json()["id"]

    resp = client.put(f"/persons/{person_id}", json={})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "no fields to update"


@pytest.mark.parametrize(
    "payload",
    [
        {"age": -1},
        {"gender": "other"},
        {"nationality": "gb"},
        {"nationality": "GBR"},
        {"name": None},
        {"surname": "Sm1th"},
    ],
)
def test_update_rejects_invalid_fields(client, payload):
    person_id = client.post("/persons", json={"name": "Test", "surname": "User"}).json()["id"]

    resp = client.put(f"/persons/{person_id}", json=payload)

    assert resp.status_code == 422


def test_update_can_clear_optional_field(client):
    person_id = client.post("/persons", json={"name": "Test", "surname": "User"}).json()["id"]

    resp = client.put(f"/persons/{person_id}", json={"nationality": None})

    assert resp.status_code == 200
    assert resp.json()["nationality"] is None
    assert resp.json()["age"] == 25


def test_delete_missing_person_returns_404(client):
    assert client.delete("/persons/999").status_code == 404


def test_non_positive_id_is_bad_request(client):
    assert client.get("/persons/0").status_code == 400


def test_list_pagination_and_filters(client, enricher):
    for name, age in [("Anna", 30), ("Hannah", 17), ("Ivan", 45)]:
        enricher.outcome = EnrichmentOutcome(age=age, gender="female", nationality="RU")
        assert client.post("/persons", json={"name": name, "surname": "Doe"}).status_code == 201

    resp = client.get("/persons", params={"page": 2, "page_size": 2})
    body = resp.json()
    assert body["total"] == 3
    assert (body["page"], body["page_size"]) == (2, 2)
    assert [p["name"] for p in body["persons"]] == ["Ivan"]

    resp = client.get("/persons", params={"name": "ann", "min_age": 18})
    assert [p["name"] for p in resp.json()["persons"]] == ["Anna"]


@pytest.mark.parametrize(
    "params",
    [{"page": 0}, {"page_size": 0}, {"page_size": 101}, {"min_age": -1}, {"page": "x"}],
)
def test_list_rejects_bad_query(client, params):
    assert client.get("/persons", params=params).status_code == 422


def test_create_end_to_end_with_real_fan_out(monkeypatch, store):
    responses = {
        "https://agify.test/": DummyResponse({"age": 25}),
        "https://genderize.test/": DummyResponse({"gender": "male"}),
        "https://nationalize.test/": DummyResponse(
            {"country": [{"country_id": "GB", "probability": 0.5}]}
        ),
    }
    monkeypatch.setattr(
        classifiers.requests, "get", lambda url, params=None, timeout=None: responses[url]
    )
    enrichment = EnrichmentService(
        classifiers.default_classifiers(
            agify_url="https://agify.test/",
            genderize_url="https://genderize.test/",
            nationalize_url="https://nationalize.test/",
        )
    )
    app = create_app(service=PersonService(enrichment, store))

    with TestClient(app) as client:
        resp = client.post("/persons", json={"name": "Test", "surname": "User"})
        assert resp.status_code == 201
        assert (resp.json()["age"], resp.json()["nationality"]) == (25, "GB")

        def refuse(url, params=None, timeout=None):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(classifiers.requests, "get", refuse)
        resp = client.post("/persons", json={"name": "Err", "surname": "User"})
        assert resp.status_code == 502
        assert client.get("/persons").json()["total"] == 1


@pytest.mark.parametrize(
    "params",
    [
        {"page": 10**18, "page_size": 100},
        {"page": 1_000_001},
        {"min_age": 10**20},
        {"max_age": 201},
    ],
)
def test_list_rejects_out_of_range_query(client, params):
    resp = client.get("/persons", params=params)

    assert resp.status_code == 422
    assert "detail" in resp.json()


@pytest.mark.parametrize("method", ["get", "delete"])
def test_id_beyond_int64_is_bad_request(client, method):
    resp = getattr(client, method)(f"/persons/{10**20}")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid id"


def test_update_rejects_out_of_range_age(client):
    person_id = client.post("/persons", json={"name": "Test", "surname": "User"}).json()["id"]

    assert client.put(f"/persons/{person_id}", json={"age": 10**20}).status_code == 422


class FailingStore(FakeStore):
    def _fail(self, *args, **kwargs):
        raise StorageError("database is locked")

    create = update = delete = get = list = _fail


@pytest.mark.parametrize(
    "method, path, kwargs, detail",
    [
        ("get", "/persons", {}, "could not list persons"),
        ("get", "/persons/1", {}, "could not get person"),
        ("post", "/persons", {"json": {"name": "Test", "surname": "User"}}, "could not create person"),
        ("put", "/persons/1", {"json": {"age": 30}}, "could not update person"),
        ("delete", "/persons/1", {}, "could not delete person"),
    ],
)
def test_storage_failure_returns_500(enricher, method, path, kwargs, detail):
    app = create_app(service=PersonService(enricher, FailingStore()))

    with TestClient(app) as client:
        resp = getattr(client, method)(path, **kwargs)

    assert resp.status_code == 500
    assert resp.json()["detail"] == detail
