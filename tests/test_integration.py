import pytest
from fastapi.testclient import TestClient

from src.dealfinder.data.deals_repository import InMemoryDealRepository
from src.dealfinder.main import create_app

LAT, LNG = 1.3521, 103.8198


def _repository() -> InMemoryDealRepository:
    repository = InMemoryDealRepository()
    here = repository.add_establishment("Corner Bar", LAT, LNG, city="Singapore")
    nearby = repository.add_establishment("Lane Pub", LAT + 0.002, LNG, city="Singapore")
    repository.add_establishment("Unmapped Lounge", None, None)
    far = repository.add_establishment("Far Tavern", LAT + 0.45, LNG)

    repository.add_deal(here.establishment_id, "Tiger Pint", "Weekdays", "17:00", "20:00",
                        happy_hour_price=8.0, standard_price=16.0)
    repository.add_deal(nearby.establishment_id, "House Pour", "weekdays", "1700", "2000",
                        happy_hour_price=6.0, standard_price=12.0)
    repository.add_deal(nearby.establishment_id, "Late Gin", "mon-fri", "18:30", "22:00",
                        happy_hour_price=9.0)
    repository.add_deal(here.establishment_id, "Brunch Mimosa", "weekends", "11:00", "14:00",
                        happy_hour_price=10.0)
    repository.add_deal(far.establishment_id, "Far Lager", "daily", "17:00", "20:00", happy_hour_price=5.0)
    return repository


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from src.dealfinder.api.routes import deals as deals_routes
    from src.dealfinder.api.routes import establishments as establishment_routes
    from src.dealfinder.data import deals_repository

    repository = _repository()
    monkeypatch.setattr(deals_routes, "get_repository", lambda: repository)
    monkeypatch.setattr(establishment_routes, "get_repository", lambda: repository)
    monkeypatch.setattr(deals_repository, "get_repository", lambda: repository)
    return TestClient(create_app())


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    data = api_client.get("/api/health/data").json()
    assert data["healthy"] is True
    assert data["establishments"] == 4
    assert data["deals"] == 5


def test_nearby_deals_active_bucket(api_client: TestClient):
    response = api_client.get(
        "/api/deals/nearby",
        params={"lat": LAT, "lng": LNG, "radius": 1, "at": "2025-10-15T18:00:00"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert [item["payload"]["drink_name"] for item in payload["active"]] == ["Tiger Pint", "House Pour"]
    first = payload["active"][0]
    assert first["distanceKm"] == pytest.approx(0.0, abs=1e-6)
    assert first["distanceDisplay"] == "0m"
    assert first["payload"]["state"] == "active"
    assert first["payload"]["establishment"]["name"] == "Corner Bar"
    assert first["payload"]["savings_percentage"] == 50.0
    assert set(first) == {"payload", "distanceKm", "distanceDisplay", "walkingMinutes", "status"}
    assert first["status"] == first["payload"]["status_display"] == "Ends in 2h 0m"
    assert [item["payload"]["drink_name"] for item in payload["upcoming"]] == ["Late Gin"]
    assert payload["upcoming"][0]["status"] == "Starts in 30m"
    assert payload["future"] == []
    assert payload["radiusKm"] == 1
    assert payload["reference"].startswith("2025-10-15T18:00:00")


def test_nearby_deals_after_hours_are_future(api_client: TestClient):
    response = api_client.get(
        "/api/deals/nearby",
        params={"lat": LAT, "lng": LNG, "radius": 1, "at": "2025-10-15T22:30:00"},
    )

    payload = response.json()
    assert payload["active"] == [] and payload["upcoming"] == []
    assert [item["payload"]["drink_name"] for item in payload["future"]] == ["Tiger Pint", "House Pour", "Late Gin"]


def test_nearby_deals_limit(api_client: TestClient):
    response = api_client.get(
        "/api/deals/nearby",
        params={"lat": LAT, "lng": LNG, "radius": 1, "limit": 1, "at": "2025-10-15T18:00:00"},
    )

    assert [item["payload"]["drink_name"] for item in response.json()["active"]] == ["Tiger Pint"]


def test_nearby_deals_uses_default_radius(api_client: TestClient):
    response = api_client.get("/api/deals/nearby", params={"lat": LAT, "lng": LNG, "at": "2025-10-15T18:00:00"})

    payload = response.json()
    assert payload["radiusKm"] == 1.0
    assert "Far Lager" not in [item["payload"]["drink_name"] for item in payload["active"]]


@pytest.mark.parametrize(
    "params",
    [
        {"lat": 95, "lng": LNG},
        {"lat": LAT, "lng": -200},
        {"lat": LAT, "lng": LNG, "radius": 10_000},
    ],
)
def test_nearby_deals_rejects_bad_input(api_client: TestClient, params):
    response = api_client.get("/api/deals/nearby", params=params)

    assert response.status_code == 400


def test_nearby_deals_empty_area_is_success(api_client: TestClient):
    response = api_client.get("/api/deals/nearby", params={"lat": -33.86, "lng": 151.2, "radius": 5})

    assert response.status_code == 200
    payload = response.json()
    assert payload["active"] == payload["upcoming"] == payload["future"] == []


def test_nearby_establishments(api_client: TestClient):
    response = api_client.get(
        "/api/establishments/nearby",
        params={"lat": LAT, "lng": LNG, "radius": 1, "at": "2025-10-15T18:00:00"},
    )

    assert response.status_code == 200
    items = response.json()
    assert [item["name"] for item in items] == ["Corner Bar", "Lane Pub"]
    assert [deal["drink_name"] for deal in items[0]["activeDeals"]] == ["Tiger Pint"]
    assert [deal["drink_name"] for deal in items[1]["activeDeals"]] == ["House Pour"]
    assert items[1]["distanceDisplay"] == "222m"


def test_establishment_detail_orders_deals(api_client: TestClient):
    response = api_client.get("/api/establishments/2", params={"at": "2025-10-15T18:00:00"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["establishment"]["name"] == "Lane Pub"
    assert [(deal["drink_name"], deal["state"]) for deal in payload["deals"]] == [
        ("House Pour", "active"),
        ("Late Gin", "upcoming"),
    ]
    assert payload["deals"][1]["status_display"] == "Starts in 30m"


def test_establishment_detail_without_coordinates(api_client: TestClient):
    response = api_client.get("/api/establishments/3")

    assert response.status_code == 200
    assert response.json()["deals"] == []


def test_establishment_detail_not_found(api_client: TestClient):
    response = api_client.get("/api/establishments/404")

    assert response.status_code == 404
