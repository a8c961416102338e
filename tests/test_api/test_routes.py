def test_health(api_client):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_preflight(api_client):
    response = api_client.options(
        "/api/query",
        headers={"Origin": "https://app.example", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 204
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_options_on_any_path(api_client):
    assert api_client.options("/anything/at/all").status_code == 204


def test_unknown_route(api_client):
    response = api_client.get("/api/unknown")

    assert response.status_code == 404
    assert response.text == "Not Found"


def test_wrong_method_reads_as_not_found(api_client):
    response = api_client.get("/api/query")

    assert response.status_code == 404
    assert response.text == "Not Found"


def test_model_catalog(api_client):
    response = api_client.get("/api/models")

    assert response.status_code == 200
    providers = {p["id"]: p for p in response.json()["providers"]}
    assert set(providers) == {"claude", "openai", "gemini"}
    assert providers["claude"]["defaultModel"] == "claude-sonnet-4-5-20250929"
    assert providers["openai"]["name"] == "OpenAI"
    assert {"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash"} in providers["gemini"]["models"]


def test_cors_headers_without_origin_on_error_responses(api_client):
    # Clients get the CORS headers on every response, errors included, even without an Origin header
    not_found = api_client.get("/api/unknown")
    bad_request = api_client.post("/api/query", content=b"not json", headers={"Content-Type": "application/json"})

    assert bad_request.status_code == 400
    for response in (not_found, bad_request):
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"
