"""Tests for the place routes."""


def test_places(client):
    r = client.post(
        "/places",
        json={
            "name": "Cubbon Park",
            "type": "Tourist Spot",
            "latitude": 12.9763,
            "longitude": 77.5929,
            "address": "Kasturba Road",
        },
    )
    assert r.status_code == 201

    r = client.post(
        "/places",
        json={
            "name": "Nowhere",
            "type": "Castle",
            "latitude": 12.9,
            "longitude": 77.5,
            "address": "-",
        },
    )
    assert r.status_code == 422

    r = client.get(
        "/places/nearby",
        params={"latitude": 12.9716, "longitude": 77.5946, "type": "Tourist Spot"},
    )
    assert r.status_code == 200
    places = r.json()
    assert [p["name"] for p in places] == ["Cubbon Park"]
    assert places[0]["distance"] < 1

    r = client.get(
        "/places/nearby",
        params={"latitude": 12.9716, "longitude": 77.5946, "type": "Lodge"},
    )
    assert r.json() == []


def test_nearby_places_requires_coordinates(client):
    r = client.get("/places/nearby", params={"longitude": 77.5946})
    assert r.status_code == 422
