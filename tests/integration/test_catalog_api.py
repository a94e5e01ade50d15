import uuid

from tourx.store.records import Collection

PACKAGE = {"name": "Sundarbans", "tourType": "Wildlife", "price": 120, "description": "Mangroves"}


def test_public_package_listing_and_detail(client, store):
    pkg = store.seed(Collection.PACKAGES, PACKAGE)

    r = client.get("/package")
    assert r.status_code == 200
    assert r.json()[0]["tourType"] == "Wildlife"
    assert r.json()[0]["price"] == 120.0

    assert client.get(f"/package/{pkg.id}").json()["name"] == "Sundarbans"
    assert client.get(f"/package/{uuid.uuid4()}").status_code == 404
    assert client.get("/package/p1").status_code == 400


def test_package_admin_crud(client, store, customer, admin):
    assert client.post("/package", headers=customer["headers"], json=PACKAGE).status_code == 403

    r = client.post("/package", headers=admin["headers"], json=PACKAGE)
    assert r.status_code == 200, r.text
    pid = r.json()["insertedId"]
    assert store.all(Collection.PACKAGES)[0]["price"] == "120.00"

    r = client.patch(f"/package/{pid}", headers=admin["headers"], json={"price": 99.5})
    assert r.status_code == 200
    assert r.json()["package"]["price"] == 99.5

    assert client.patch(f"/package/{pid}", headers=admin["headers"], json={"owner": "x"}).status_code == 400
    assert client.patch(f"/package/{uuid.uuid4()}", headers=admin["headers"], json={"price": 1}).status_code == 404

    assert client.delete(f"/package/{pid}", headers=admin["headers"]).json()["deletedCount"] == 1
    assert client.delete(f"/package/{pid}", headers=admin["headers"]).status_code == 404


def test_package_create_requires_fields(client, store, admin):
    r = client.post("/package", headers=admin["headers"], json={"name": "No type", "price": 10})
    assert r.status_code == 400
    assert store.all(Collection.PACKAGES) == []


def test_guides(client, store, customer, admin):
    r = client.post("/guides", headers=admin["headers"], json={"name": "Rafi", "email": "Rafi@TourX.com"})
    assert r.status_code == 200
    gid = r.json()["insertedId"]
    assert client.post("/guides", headers=customer["headers"], json={"name": "X", "email": "x@x.com"}).status_code == 403

    assert client.get("/guides").json()[0]["email"] == "rafi@tourx.com"
    assert client.get(f"/guides/{gid}").json()["name"] == "Rafi"
    assert client.get(f"/guides/{uuid.uuid4()}").status_code == 404
    assert client.get("/guides/g1").status_code == 400
