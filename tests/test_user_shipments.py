from conftest import cookie_for, shipment_payload


def _create(client, user, **overrides):
    r = client.post("/api/user/shipments", json=shipment_payload(**overrides), headers=cookie_for(user))
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_requires_session(client):
    r = client.get("/api/user/shipments")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Unauthorized"}

def test_create_and_read_back(client, alice):
    data = _create(client, alice, weight=2.5, events=[
        {"status": "Picked up", "location": "Berlin", "timestamp": "2025-01-08T10:00:00Z"},
        {"status": "Departed hub", "description": "Left sorting center", "timestamp": "2025-01-09T07:30:00Z"},
    ])
    assert data["userId"] == alice.id
    assert data["trackingNumber"] == "TRK-1001"
    assert data["weight"] == "2.5"
    assert data["estimatedDeliveryDate"] is None
    assert data["shipmentDate"].startswith("2025-01-08T00:00:00")
    assert [e["status"] for e in data["events"]] == ["Departed hub", "Picked up"]
    assert data["events"][1]["description"] == ""

    r = client.get(f"/api/user/shipments/{data['id']}", headers=cookie_for(alice))
    assert r.status_code == 200
    assert r.json()["data"]["customerName"] == "Jane Doe"

def test_progress_defaults_to_pickup(client, alice):
    body = shipment_payload()
    del body["trackingProgress"]
    r = client.post("/api/user/shipments", json=body, headers=cookie_for(alice))
    assert r.json()["data"]["trackingProgress"] == "Pickup"

def test_invalid_progress_rejected(client, alice):
    r = client.post("/api/user/shipments", json=shipment_payload(trackingProgress="Lost"), headers=cookie_for(alice))
    assert r.status_code == 400
    assert r.json()["success"] is False

def test_null_progress_rejected_on_update(client, alice):
    created = _create(client, alice)
    url = f"/api/user/shipments/{created['id']}"
    r = client.put(url, json={"trackingProgress": None}, headers=cookie_for(alice))
    assert r.status_code == 400
    assert r.json()["message"] == "Tracking progress must be one of the tracking stages"

    stored = client.get(url, headers=cookie_for(alice)).json()["data"]
    assert stored["trackingProgress"] == "In Transit"

    r = client.put(url, json={"customerName": "John"}, headers=cookie_for(alice))
    assert r.json()["data"]["trackingProgress"] == "In Transit"

def test_tracking_number_required(client, alice):
    body = shipment_payload()
    del body["trackingNumber"]
    r = client.post("/api/user/shipments", json=body, headers=cookie_for(alice))
    assert r.status_code == 400
    assert r.json()["message"] == "trackingNumber is required"

    r = client.post("/api/user/shipments", json=shipment_payload(tracking_number="   "), headers=cookie_for(alice))
    assert r.status_code == 400

def test_unknown_field_rejected(client, alice):
    r = client.post("/api/user/shipments", json=shipment_payload(notAColumn="x"), headers=cookie_for(alice))
    assert r.status_code == 400

def test_duplicate_tracking_number(client, alice):
    _create(client, alice)
    r = client.post("/api/user/shipments", json=shipment_payload(), headers=cookie_for(alice))
    assert r.status_code == 409
    assert r.json()["message"] == "A shipment with this tracking number already exists"

def test_garbage_event_timestamp_rejected(client, alice):
    r = client.post("/api/user/shipments", json=shipment_payload(events=[{"status": "Lost", "timestamp": "whenever"}]),
                    headers=cookie_for(alice))
    assert r.status_code == 400

def test_list_is_scoped_to_owner(client, alice, bob):
    _create(client, alice, tracking_number="TRK-A")
    _create(client, bob, tracking_number="TRK-B")

    mine = client.get("/api/user/shipments", headers=cookie_for(alice)).json()["data"]
    assert [s["trackingNumber"] for s in mine] == ["TRK-A"]

def test_foreign_shipment_looks_missing(client, alice, bob):
    theirs = _create(client, bob)
    missing = client.get("/api/user/shipments/does-not-exist", headers=cookie_for(alice))
    foreign = client.get(f"/api/user/shipments/{theirs['id']}", headers=cookie_for(alice))
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"success": False, "message": "Shipment not found"}

    assert client.put(f"/api/user/shipments/{theirs['id']}", json={"origin": "X"}, headers=cookie_for(alice)).status_code == 404
    assert client.delete(f"/api/user/shipments/{theirs['id']}", headers=cookie_for(alice)).status_code == 404
    assert client.get(f"/api/user/shipments/{theirs['id']}", headers=cookie_for(bob)).json()["data"]["origin"] == "Berlin, Germany"

def test_update_without_events_keeps_them(client, alice):
    created = _create(client, alice, events=[{"status": "Picked up", "timestamp": "2025-01-08T10:00:00Z"}])
    r = client.put(f"/api/user/shipments/{created['id']}", json={"currentLocation": "Brussels, Belgium"},
                   headers=cookie_for(alice))
    assert r.status_code == 200
    data = r.json()["data"]
    assert r.json()["message"] == "Shipment updated successfully"
    assert data["currentLocation"] == "Brussels, Belgium"
    assert data["origin"] == "Berlin, Germany"
    assert [e["status"] for e in data["events"]] == ["Picked up"]

def test_update_with_empty_events_clears_them(client, alice):
    created = _create(client, alice, events=[{"status": "Picked up"}])
    r = client.put(f"/api/user/shipments/{created['id']}", json={"events": []}, headers=cookie_for(alice))
    assert r.json()["data"]["events"] == []

def test_update_replaces_events(client, alice):
    created = _create(client, alice, events=[{"status": "Picked up"}, {"status": "Shipped"}])
    echoed = created["events"][0]
    r = client.put(f"/api/user/shipments/{created['id']}", headers=cookie_for(alice), json={
        "trackingProgress": "Delivered",
        "events": [echoed, {"status": "Delivered", "timestamp": "2099-01-01T00:00:00Z"}],
    })
    data = r.json()["data"]
    assert data["trackingProgress"] == "Delivered"
    assert [e["status"] for e in data["events"]] == ["Delivered", echoed["status"]]
    assert echoed["id"] not in [e["id"] for e in data["events"]]

def test_update_clears_date_with_empty_string(client, alice):
    created = _create(client, alice)
    r = client.put(f"/api/user/shipments/{created['id']}", json={"shipmentDate": ""}, headers=cookie_for(alice))
    assert r.json()["data"]["shipmentDate"] is None

def test_user_cannot_reassign_owner(client, alice, bob):
    created = _create(client, alice)
    r = client.put(f"/api/user/shipments/{created['id']}", json={"userId": bob.id}, headers=cookie_for(alice))
    assert r.status_code == 200
    assert r.json()["data"]["userId"] == alice.id

def test_delete(client, alice):
    created = _create(client, alice, events=[{"status": "Picked up"}])
    r = client.delete(f"/api/user/shipments/{created['id']}", headers=cookie_for(alice))
    assert r.json() == {"success": True, "message": "Shipment deleted successfully"}
    assert client.get(f"/api/user/shipments/{created['id']}", headers=cookie_for(alice)).status_code == 404
