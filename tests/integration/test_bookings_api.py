import uuid

from tourx.store.records import Collection

BOOKING = {"packageId": "pkg-1", "packageName": "Sundarbans", "date": "2026-11-02", "price": 50}


def test_create_and_list_own_bookings(client, store, customer):
    r = client.post("/bookings", headers=customer["headers"], json={"email": "c@x.com", **BOOKING})
    assert r.status_code == 200, r.text
    booking_id = r.json()["insertedId"]

    r = client.get("/bookings", params={"email": "C@X.com"}, headers=customer["headers"])
    assert r.status_code == 200
    assert r.json() == [{
        "id": booking_id, "email": "c@x.com", "packageId": "pkg-1", "packageName": "Sundarbans",
        "date": "2026-11-02", "price": 50.0,
    }]


def test_booking_owner_must_exist(client, store, token_headers):
    r = client.post("/bookings", headers=token_headers("ghost@x.com"), json={"email": "ghost@x.com", **BOOKING})
    assert r.status_code == 404
    assert store.all(Collection.BOOKINGS) == []


def test_booking_for_someone_else_is_forbidden(client, customer, admin):
    r = client.post("/bookings", headers=admin["headers"], json={"email": "c@x.com", **BOOKING})
    assert r.status_code == 403
    r = client.get("/bookings", params={"email": "c@x.com"}, headers=admin["headers"])
    assert r.status_code == 403


def test_booking_body_validation(client, customer):
    r = client.post("/bookings", headers=customer["headers"], json={"email": "c@x.com", "date": "2026-11-02"})
    assert r.status_code == 400
    r = client.post("/bookings", headers=customer["headers"], json={"email": "c@x.com", **BOOKING, "price": -1})
    assert r.status_code == 400


def test_cancel_booking(client, store, customer, admin):
    booking = store.seed(Collection.BOOKINGS, {"email": "c@x.com", **BOOKING})

    assert client.delete(f"/bookings/{booking.id}", headers=admin["headers"]).status_code == 403
    r = client.delete(f"/bookings/{booking.id}", headers=customer["headers"])
    assert r.json() == {"acknowledged": True, "deletedCount": 1}
    assert client.delete(f"/bookings/{booking.id}", headers=customer["headers"]).status_code == 404
    assert client.delete("/bookings/b1", headers=customer["headers"]).status_code == 400
    assert client.delete(f"/bookings/{uuid.uuid4()}").status_code == 401
