"""
预订管理 API 单元测试
覆盖 /reservations 端点及其对房态的影响
"""
from fastapi.testclient import TestClient


def _payload(room_id, guest_id=None, check_in="2025-03-01", check_out="2025-03-03", **extra):
    data = {
        "room_id": room_id,
        "check_in_date": check_in,
        "check_out_date": check_out,
    }
    if guest_id is not None:
        data["guest_id"] = guest_id
    data.update(extra)
    return data


def _room_status(client, headers, room_id):
    return client.get(f"/rooms/{room_id}", headers=headers).json()["status"]


class TestReservationFlow:

    def test_booking_scenario(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        """预订 -> 重叠被拒 -> 首尾相接被拒 -> 退房 -> 再次预订成功"""
        response = client.post("/reservations", headers=staff_auth_headers,
                               json=_payload(sample_room.id, sample_guest.id, number_of_guests=2))
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert _room_status(client, staff_auth_headers, sample_room.id) == "Occupied"

        response = client.post("/reservations", headers=staff_auth_headers,
                               json=_payload(sample_room.id, sample_guest.id, "2025-03-02", "2025-03-04"))
        assert response.status_code == 409
        assert response.json()["success"] is False

        response = client.post("/reservations", headers=staff_auth_headers,
                               json=_payload(sample_room.id, sample_guest.id, "2025-03-03", "2025-03-05"))
        assert response.status_code == 409

        response = client.post(f"/reservations/checkout/{sample_room.id}", headers=staff_auth_headers)
        assert response.status_code == 200
        assert _room_status(client, staff_auth_headers, sample_room.id) == "Available"

        response = client.post("/reservations", headers=staff_auth_headers,
                               json=_payload(sample_room.id, sample_guest.id, "2025-03-02", "2025-03-04"))
        assert response.status_code == 200

    def test_new_guest_booking(self, client: TestClient, staff_auth_headers, staff_user, sample_room):
        response = client.post("/reservations", headers=staff_auth_headers, json=_payload(
            sample_room.id,
            is_new_guest=True,
            guest_name="Grace Hopper",
            guest_phone="555-0199"
        ))
        assert response.status_code == 200
        guest_id = response.json()["guest_id"]

        guest = client.get(f"/guests/{guest_id}", headers=staff_auth_headers).json()
        assert guest["full_name"] == "Grace Hopper"

        listed = client.get("/reservations", headers=staff_auth_headers).json()
        assert len(listed) == 1
        assert listed[0]["created_by_manager_id"] == staff_user.id

    def test_new_guest_missing_phone(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.post("/reservations", headers=staff_auth_headers, json=_payload(
            sample_room.id, is_new_guest=True, guest_name="Grace Hopper"
        ))
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_checkout_on_empty_room_is_noop(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.post(f"/reservations/checkout/{sample_room.id}", headers=staff_auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["reservation_id"] is None

    def test_checkout_unknown_room(self, client: TestClient, staff_auth_headers):
        response = client.post("/reservations/checkout/999", headers=staff_auth_headers)
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestConflictCheck:

    def test_conflict_endpoint(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        client.post("/reservations", headers=staff_auth_headers, json=_payload(sample_room.id, sample_guest.id))

        response = client.get("/reservations/conflict", headers=staff_auth_headers, params={
            "room_id": sample_room.id, "check_in_date": "2025-03-02", "check_out_date": "2025-03-05"
        })
        assert response.json() == {"conflict": True}

        response = client.get("/reservations/conflict", headers=staff_auth_headers, params={
            "room_id": sample_room.id, "check_in_date": "2025-04-01", "check_out_date": "2025-04-05"
        })
        assert response.json() == {"conflict": False}

    def test_conflict_invalid_range(self, client: TestClient, staff_auth_headers, sample_room):
        response = client.get("/reservations/conflict", headers=staff_auth_headers, params={
            "room_id": sample_room.id, "check_in_date": "2025-04-05", "check_out_date": "2025-04-01"
        })
        assert response.status_code == 400


class TestUpdateAndCancel:

    def test_update(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        created = client.post("/reservations", headers=staff_auth_headers,
                              json=_payload(sample_room.id, sample_guest.id)).json()

        response = client.put(f"/reservations/{created['reservation_id']}", headers=staff_auth_headers, json={
            "check_in_date": "2025-03-01",
            "check_out_date": "2025-03-05",
            "number_of_guests": 1,
            "staff_notes": "extended"
        })
        assert response.status_code == 200

        listed = client.get("/reservations", headers=staff_auth_headers).json()
        assert listed[0]["check_out_date"] == "2025-03-05"
        assert listed[0]["staff_notes"] == "extended"

    def test_cancel(self, client: TestClient, staff_auth_headers, sample_room, sample_guest):
        created = client.post("/reservations", headers=staff_auth_headers,
                              json=_payload(sample_room.id, sample_guest.id)).json()

        response = client.post(f"/reservations/{created['reservation_id']}/cancel", headers=staff_auth_headers)
        assert response.status_code == 200
        assert _room_status(client, staff_auth_headers, sample_room.id) == "Available"
        assert client.get("/reservations", headers=staff_auth_headers).json() == []

        response = client.post(f"/reservations/{created['reservation_id']}/cancel", headers=staff_auth_headers)
        assert response.status_code == 409

    def test_cancel_unknown(self, client: TestClient, staff_auth_headers):
        response = client.post("/reservations/999/cancel", headers=staff_auth_headers)
        assert response.status_code == 404
