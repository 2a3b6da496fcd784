async def test_register_login_and_me(client, auth_headers):
    headers = await auth_headers("katniss")

    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["username"] == "katniss"

    login = await client.post(
        "/api/v1/auth/login", json={"username": "katniss", "password": "secret123"}
    )
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"


async def test_duplicate_username_rejected(client, auth_headers):
    await auth_headers("peeta")

    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "peeta", "email": "other@example.com", "password": "secret123"},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


async def test_short_password_rejected(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "gale", "email": "gale@example.com", "password": "abc"},
    )
    assert response.status_code == 422


async def test_wrong_password(client, auth_headers):
    await auth_headers("haymitch")

    response = await client.post(
        "/api/v1/auth/login", json={"username": "haymitch", "password": "wrong-one"}
    )

    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"


async def test_refresh_token(client):
    registered = await client.post(
        "/api/v1/auth/register",
        json={"username": "effie", "email": "effie@example.com", "password": "secret123"},
    )
    tokens = registered.json()

    refreshed = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert refreshed.status_code == 200

    # An access token is not accepted as a refresh token
    rejected = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert rejected.status_code == 401


async def test_missing_token_is_unauthenticated(client):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"


async def test_garbage_token_is_unauthenticated(client):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_logout(client, auth_headers):
    headers = await auth_headers("cinna")
    response = await client.post("/api/v1/auth/logout", headers=headers)
    assert response.status_code == 204
