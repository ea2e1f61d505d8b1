import pytest


@pytest.mark.asyncio
async def test_root_describes_service(api_client) -> None:
    response = await api_client.get("/")

    assert response.status_code == 200
    payload = response.json()
    assert payload["endpoints"]["checkout"].startswith("POST /checkout")
    assert "50 points per item" in payload["note"]


@pytest.mark.asyncio
async def test_health_reports_configured_providers(api_client, settings) -> None:
    settings.shopify_access_token = None

    response = await api_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "OK"
    assert payload["uptime"] >= 0
    assert payload["configured"] == {"shopify": False, "rivo": True, "email": True}


@pytest.mark.asyncio
async def test_unknown_route_lists_available_endpoints(api_client) -> None:
    response = await api_client.get("/collections")

    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Endpoint not found"
    assert "POST /checkout" in payload["availableEndpoints"]
