"""Tests for the system router."""


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_system_settings_requires_staff(client, customer_headers):
    r = client.get("/system/settings", headers=customer_headers)
    assert r.status_code == 403


def test_system_settings(client, staff_headers):
    """GET /system/settings returns grouped settings without credentials."""
    r = client.get("/system/settings", headers=staff_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["app"]["environment"] == "test"
    assert data["chat"]["message_max_length"] == 1000
    assert data["database"]["database_driver"] == "sqlite"
    assert "password" not in str(data)


def test_polling_settings(client):
    r = client.get("/system/polling")
    assert r.status_code == 200
    assert r.json() == {"transcript_poll_seconds": 3, "badge_poll_seconds": 5}
