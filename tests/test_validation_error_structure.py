def test_validation_error_structure_on_missing_ticket_services(client, auth_headers):
    headers, _ = auth_headers(role="client", email="valstruct@example.com", password="valstructpw")

    r = client.post("/tickets", json={"tech_id": "not-a-uuid"}, headers=headers)
    assert r.status_code == 400
    body = r.json()
    assert "error" in body and isinstance(body["error"], dict)
    assert body["error"].get("code") == "validation_error"
    assert "message" in body["error"]
    assert isinstance(body["error"].get("details"), list)
    fields = {tuple(err["loc"]) for err in body["error"]["details"]}
    assert ("body", "tech_id") in fields
    assert ("body", "service_ids") in fields


def test_domain_error_structure_has_no_details(client, auth_headers):
    headers, _ = auth_headers(role="admin")

    r = client.get("/services/00000000-0000-0000-0000-000000000000", headers=headers)
    assert r.status_code == 400
    assert set(r.json()["error"]) == {"code", "message"}


def test_invalid_path_id_is_a_validation_error(client, auth_headers):
    headers, _ = auth_headers(role="admin")

    r = client.put("/tickets/status/123", json={"status": "open"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"
