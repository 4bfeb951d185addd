import httpx

from shiptrack.core.config import settings
from shiptrack.presentation.map_overlay import build_map_overlay
from shiptrack.services.geocoding import _search, format_address, geocode_location


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_format_address_skips_blanks():
    assert format_address("1 Main St", "Springfield", "", "USA") == "1 Main St, Springfield, USA"
    assert format_address(None, None, None, None) == ""

def test_geocode_parses_first_result(monkeypatch):
    monkeypatch.setattr(settings, "GEOCODING_ENABLED", True)
    seen = {}

    def handler(request):
        seen["q"] = request.url.params["q"]
        seen["limit"] = request.url.params["limit"]
        return httpx.Response(200, json=[{"lat": "52.52", "lon": "13.405"}])

    with _client(handler) as client:
        assert geocode_location(" Berlin ", client=client) == (52.52, 13.405)
    assert seen == {"q": "Berlin", "limit": "1"}

def test_geocode_failures_return_none(monkeypatch):
    monkeypatch.setattr(settings, "GEOCODING_ENABLED", True)
    with _client(lambda request: httpx.Response(200, json=[])) as client:
        assert geocode_location("Atlantis", client=client) is None
    with _client(lambda request: httpx.Response(503)) as client:
        assert geocode_location("Berlin", client=client) is None
    with _client(lambda request: httpx.Response(200, json=[{"lat": "north"}])) as client:
        assert geocode_location("Berlin", client=client) is None

def test_geocode_disabled_or_blank():
    def handler(request):
        raise AssertionError("no request expected")

    with _client(handler) as client:
        assert geocode_location("Berlin", client=client) is None
        assert geocode_location("  ", client=client) is None

def test_stored_coordinates_win_over_lookup():
    calls = []

    def geocode(query):
        calls.append(query)
        return (1.0, 2.0)

    overlay = build_map_overlay({
        "origin": "Berlin", "origin_latitude": 52.5, "origin_longitude": 13.4,
        "destination": "Paris",
    }, geocode)
    assert calls == ["Paris"]
    assert overlay["markers"][0] == {
        "kind": "origin", "label": "Origin", "color": "green", "location": "Berlin", "lat": 52.5, "lng": 13.4,
    }
    assert overlay["routes"] == [{"type": "remaining", "points": [{"lat": 52.5, "lng": 13.4}, {"lat": 1.0, "lng": 2.0}]}]

def test_unresolved_point_drops_its_segments():
    overlay = build_map_overlay(
        {"origin": "A", "current_location": "B", "destination": "C"},
        {"A": (0.0, 0.0), "C": (1.0, 1.0)}.get,
    )
    assert [m["kind"] for m in overlay["markers"]] == ["origin", "destination"]
    assert [r["type"] for r in overlay["routes"]] == ["remaining"]
    assert overlay["legend"]["current"] == "B"

def test_transport_errors_are_retried(monkeypatch):
    monkeypatch.setattr(settings, "GEOCODING_ENABLED", True)
    monkeypatch.setattr(_search.retry, "sleep", lambda seconds: None)
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    with _client(handler) as client:
        assert geocode_location("Berlin", client=client) is None
    assert len(attempts) == 2

def test_address_parts_stand_in_for_missing_location():
    queries = []

    def geocode(query):
        queries.append(query)
        return None

    overlay = build_map_overlay({"destination_city": "Lyon", "destination_country": "France"}, geocode)
    assert queries == ["Lyon, France"]
    assert overlay["legend"]["destination"] == "Lyon, France"
    assert overlay["legend"]["origin"] == "Unknown Origin"
