import uuid


def test_admin_creates_lists_and_updates_services(client, auth_headers):
    admin_headers, _ = auth_headers(role="admin")
    client_headers, _ = auth_headers(role="client")

    r = client.post("/services", json={"title": "VPN", "price": 50}, headers=admin_headers)
    assert r.status_code == 201
    service = r.json()
    assert service["title"] == "VPN"
    assert service["price"] == "50.00"
    assert service["active"] is True

    # any authenticated role can browse the catalog
    r = client.get("/services/list", headers=client_headers)
    assert r.status_code == 200
    assert [s["title"] for s in r.json()] == ["VPN"]

    r = client.get(f"/services/{service['id']}", headers=client_headers)
    assert r.status_code == 200
    assert r.json()["price"] == "50.00"

    r = client.put(f"/services/{service['id']}", json={"title": "VPN setup", "price": "65.5"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["title"] == "VPN setup"
    assert r.json()["price"] == "65.50"


def test_service_management_is_admin_only(client, auth_headers, create_service):
    tech_headers, _ = auth_headers(role="tech")
    service = create_service(title="Formatting", price="30.00")

    assert client.post("/services", json={"title": "Backup", "price": 10}, headers=tech_headers).status_code == 403
    assert client.put(f"/services/{service.id}", json={"title": "Backup", "price": 10}, headers=tech_headers).status_code == 403
    assert client.delete(f"/services/{service.id}", headers=tech_headers).status_code == 403
    assert client.get("/services/list").status_code == 401


def test_service_validation(client, auth_headers):
    admin_headers, _ = auth_headers(role="admin")

    r = client.post("/services", json={"title": "TV", "price": 10}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"

    r = client.post("/services", json={"title": "Repair", "price": -1}, headers=admin_headers)
    assert r.status_code == 400

    r = client.post("/services", json={"title": "Repair", "price": "12.345"}, headers=admin_headers)
    assert r.status_code == 400


def test_unknown_service_is_reported_as_not_found(client, auth_headers):
    admin_headers, _ = auth_headers(role="admin")
    missing = str(uuid.uuid4())

    r = client.put(f"/services/{missing}", json={"title": "Ghost", "price": 1}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == {"code": "not_found", "message": "This service does not exist"}

    r = client.get(f"/services/{missing}", headers=admin_headers)
    assert r.status_code == 400


def test_deactivated_service_is_hidden_from_list(client, auth_headers, create_service):
    admin_headers, _ = auth_headers(role="admin")
    keep = create_service(title="Keep", price="10.00")
    drop = create_service(title="Drop", price="10.00")

    r = client.delete(f"/services/{drop.id}", headers=admin_headers)
    assert r.status_code == 204

    r = client.get("/services/list", headers=admin_headers)
    assert [s["id"] for s in r.json()] == [keep.id]

    # still readable directly, flagged inactive
    r = client.get(f"/services/{drop.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["active"] is False
