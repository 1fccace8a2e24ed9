import pytest
from httpx import AsyncClient

from src.config import settings
from src.services.engine import ParkingEngine


@pytest.mark.asyncio
async def test_list_seeded_slots(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/slots", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == settings.initial_slot_count
    assert data["slots"][0] == {"id": "1", "slot_number": "P-01", "status": "Available"}


@pytest.mark.asyncio
async def test_add_slot(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/slots", json={"slot_number": "p-10"}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["slot_number"] == "P-10"
    assert data["status"] == "Available"

    response = await client.get(f"/api/v1/slots/{data['id']}", headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_add_duplicate_slot(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/slots", json={"slot_number": "p-01"}, headers=auth_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_add_empty_slot(client: AsyncClient, auth_headers: dict):
    response = await client.post("/api/v1/slots", json={"slot_number": " "}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_available_slots_and_occupancy(
    client: AsyncClient, auth_headers: dict, parking_engine: ParkingEngine, clock
):
    parking_engine.register_vehicle("RAC123A", "Jane")
    parking_engine.start_session("RAC123A", "1", clock.now)

    response = await client.get("/api/v1/slots/available", headers=auth_headers)
    assert response.status_code == 200
    assert "P-01" not in [s["slot_number"] for s in response.json()]

    response = await client.get(
        "/api/v1/slots", params={"status": "Occupied"}, headers=auth_headers
    )
    assert [s["slot_number"] for s in response.json()["slots"]] == ["P-01"]

    response = await client.get("/api/v1/slots/occupancy", headers=auth_headers)
    data = response.json()
    assert data["occupied"] == 1
    assert data["available"] == settings.initial_slot_count - 1


@pytest.mark.asyncio
async def test_rename_slot(client: AsyncClient, auth_headers: dict):
    response = await client.patch(
        "/api/v1/slots/2", json={"slot_number": "vip-1"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["slot_number"] == "VIP-1"


@pytest.mark.asyncio
async def test_rename_occupied_slot_is_rejected(
    client: AsyncClient, auth_headers: dict, parking_engine: ParkingEngine, clock
):
    parking_engine.register_vehicle("RAC123A", "Jane")
    parking_engine.start_session("RAC123A", "1", clock.now)

    response = await client.patch(
        "/api/v1/slots/1", json={"slot_number": "P-99"}, headers=auth_headers
    )
    assert response.status_code == 409
    assert parking_engine.get_slot("1").slot_number == "P-01"


@pytest.mark.asyncio
async def test_unknown_slot(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/slots/missing", headers=auth_headers)
    assert response.status_code == 404
