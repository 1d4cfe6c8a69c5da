from app import config


async def test_root_carries_security_headers(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


async def test_health_is_excluded_from_security_headers(client):
    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}
    assert "Content-Security-Policy" not in response.headers


async def test_unknown_route_is_404(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404


async def test_cors_preflight_uses_configured_origins(client):
    origin = config.ALLOWED_ORIGINS[0]
    response = await client.options(
        "/api/categories",
        headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
