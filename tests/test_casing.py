from shiptrack.core.casing import camel_to_snake_key, snake_to_camel_key, to_camel, to_snake


def test_key_conversion():
    assert snake_to_camel_key("tracking_number") == "trackingNumber"
    assert snake_to_camel_key("origin_postal_code") == "originPostalCode"
    assert camel_to_snake_key("estimatedDeliveryDate") == "estimated_delivery_date"
    assert snake_to_camel_key("id") == "id"

def test_nested_structures_convert_keys_only():
    row = {"tracking_number": "TRK-1", "events": [{"shipment_id": "s1", "status": "In_Transit"}]}
    camel = to_camel(row)
    assert camel == {"trackingNumber": "TRK-1", "events": [{"shipmentId": "s1", "status": "In_Transit"}]}
    assert to_snake(camel) == row

def test_scalars_pass_through():
    assert to_camel(None) is None
    assert to_snake(3) == 3
    assert to_camel(["a_b"]) == ["a_b"]

def _stored_keys():
    from shiptrack.db.models import SHIPMENT_WRITABLE_COLUMNS

    shipment = list(SHIPMENT_WRITABLE_COLUMNS) + ["id", "user_id", "created_at", "updated_at"]
    event = ["id", "shipment_id", "status", "description", "location", "timestamp"]
    user = ["id", "email", "name", "is_admin", "created_at"]
    return shipment, event, user

def test_round_trip_over_every_stored_key():
    shipment, event, user = _stored_keys()
    snake = {
        **{k: f"v-{k}" for k in shipment},
        "events": [{k: f"e-{k}" for k in event}, {k: None for k in event}],
        "owner": {k: k for k in user},
        "history": [[{"status_details": "x"}]],
    }
    camel = to_camel(snake)

    assert all("_" not in k for k in camel)
    assert all("_" not in k for e in camel["events"] for k in e)
    assert to_snake(camel) == snake
    assert to_camel(to_snake(camel)) == camel

def test_each_key_round_trips_individually():
    shipment, event, user = _stored_keys()
    for key in set(shipment + event + user):
        camel = snake_to_camel_key(key)
        assert camel_to_snake_key(camel) == key
        assert snake_to_camel_key(camel_to_snake_key(camel)) == camel
