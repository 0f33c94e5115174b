"""
房间管理 API 单元测试
覆盖 /rooms 端点
"""
from datetime import date
from fastapi.testclient import TestClient

from hotel_desk.models.ontology import Room, RoomStatus


def _batch_payload(start="301", count=3):
    return {
        "start_number": start,
        "count": count,
        "floor": 3,
        "type": "Deluxe",
        "price_per_night": "150.00",
        "max_guests": 2
    }


def _book(client, headers, room_id, guest_id, check_in="2025-03-01", check_out="2025-03-03"):
    return client.post("/reservations", headers=headers, json={
        "room_id": room_id,
        "guest_id": guest_id,
        "check_in_date": check_in,
        "check_out_date": check_out
    })


class TestRoomQueries:

    def test_list_rooms(self, client: TestClient, staff_auth_headers, sample_room, sample_room_102):
        response = client.get("/rooms", headers=staff_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [r["room_number"] for r in data] == ["101", "102"]
        assert data[0]["status"] == "Available"
        assert data[1]["type"] == "Deluxe"

    def test_filter_by_status(self, client: TestClient, staff_auth_headers, sample_room, sample_room_102, db_session):
        sample_room_102.status = RoomStatus.MAINTENANCE
        db_session.commit()

        response = client.get("/rooms", headers=staff_auth_headers, params={"status": "Maintenance"})
        assert [r["room_number"] for r in response.json()] == ["102"]

    def test_get_room(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.get(f"/rooms/{sample_room.id}", headers=staff_auth_headers)
        assert response.status_code == 200
        assert float(response.json()["price_per_night"]) == 100.0

    def test_get_room_not_found(self, client: TestClient, staff_auth_headers):
        response = client.get("/rooms/999", headers=staff_auth_headers)
        assert response.status_code == 404

    def test_room_reservation_empty(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.get(f"/rooms/{sample_room.id}/reservation", headers=staff_auth_headers)
        assert response.status_code == 200
        assert response.json() is None

    def test_room_reservation(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        _book(client, staff_auth_headers, sample_room.id, sample_guest.id)

        response = client.get(f"/rooms/{sample_room.id}/reservation", headers=staff_auth_headers)
        data = response.json()
        assert data["guest_name"] == "Ada Lovelace"
        assert data["room_number"] == "101"
        assert data["status"] == "Active"

    def test_status_summary(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.get("/rooms/status-summary", headers=staff_auth_headers)
        assert response.json() == {"total": 1, "Available": 1, "Occupied": 0, "Maintenance": 0}

    def test_requires_auth(self, client: TestClient):
        response = client.get("/rooms")
        assert response.status_code in (401, 403)


class TestRoomWrites:

    def test_batch_add_and_remove(self, client: TestClient, manager_auth_headers, db_session):
        response = client.post("/rooms/batch", headers=manager_auth_headers, json=_batch_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["room_ids"]) == 3
        numbers = [r["room_number"] for r in client.get("/rooms", headers=manager_auth_headers).json()]
        assert numbers == ["301", "302", "303"]

        response = client.post("/rooms/remove", headers=manager_auth_headers, json={"room_ids": data["room_ids"]})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/rooms", headers=manager_auth_headers).json() == []

    def test_add_room_list(self, client: TestClient, manager_auth_headers):
        response = client.post("/rooms", headers=manager_auth_headers, json=[
            {"room_number": "501", "floor": 5, "type": "Suite", "price_per_night": "400", "max_guests": 4},
            {"room_number": "502", "floor": 5, "type": "Suite", "price_per_night": "400", "max_guests": 4},
        ])
        assert response.status_code == 200
        assert len(response.json()["room_ids"]) == 2

    def test_add_existing_number(self, client: TestClient, manager_auth_headers, sample_room):
        response = client.post("/rooms/batch", headers=manager_auth_headers, json=_batch_payload(start="101", count=2))

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert "101" in body["message"]

    def test_non_numeric_start(self, client: TestClient, manager_auth_headers):
        response = client.post("/rooms/batch", headers=manager_auth_headers, json=_batch_payload(start="A1"))
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_staff_cannot_add(self, client: TestClient, staff_auth_headers):
        response = client.post("/rooms/batch", headers=staff_auth_headers, json=_batch_payload())
        assert response.status_code == 403

    def test_remove_occupied_rejected(self, client: TestClient, manager_auth_headers,
                                      sample_room, sample_room_102, sample_guest, db_session):
        _book(client, manager_auth_headers, sample_room.id, sample_guest.id)

        response = client.post("/rooms/remove", headers=manager_auth_headers,
                               json={"room_ids": [sample_room.id, sample_room_102.id]})

        assert response.status_code == 409
        assert response.json()["success"] is False
        assert db_session.query(Room).count() == 2

    def test_set_maintenance(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.patch(f"/rooms/{sample_room.id}/status", headers=staff_auth_headers,
                                json={"status": "Maintenance"})
        assert response.status_code == 200
        assert response.json()["status"] == "Maintenance"

    def test_set_status_on_occupied_room(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        _book(client, staff_auth_headers, sample_room.id, sample_guest.id)

        response = client.patch(f"/rooms/{sample_room.id}/status", headers=staff_auth_headers,
                                json={"status": "Available"})
        assert response.status_code == 409

    def test_invalid_payload_envelope(self, client: TestClient, manager_auth_headers):
        response = client.post("/rooms/batch", headers=manager_auth_headers, json={"start_number": "301"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["message"]
