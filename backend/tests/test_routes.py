"""
CodigoHub Backend — HTTP Route Tests
=====================================

What:  Status codes, envelopes and error bodies at the request boundary.
How:   HTTPX AsyncClient over ASGITransport; the app shares db_session with
       the test and authenticates with real bearer tokens.

What we test:
    ✅ Success envelopes carry success=true and a message
    ✅ Each error kind maps to its status code and `code`
    ✅ Error bodies carry message, raw error and request_id
    ✅ Body validation failures are 400, not 422
"""

import pytest

from codigohub.security import Actor, Role


class TestCodigoRoutes:

    @pytest.mark.asyncio
    async def test_create_requires_token(self, test_client):
        response = await test_client.post("/api/codigos", json={"titulo": "x"})

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "AUTHENTICATION"

    @pytest.mark.asyncio
    async def test_create_and_read(self, test_client, auth_headers, owner):
        created = await test_client.post(
            "/api/codigos",
            json={"titulo": "Suma", "codigo": "a+b", "lenguaje": "js", "tags": ["math"]},
            headers=auth_headers(owner),
        )
        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["codigo"]["tags"] == "math"

        codigo_id = body["codigo"]["id"]
        fetched = await test_client.get(f"/api/codigos/{codigo_id}", headers=auth_headers(owner))
        assert fetched.status_code == 200
        assert fetched.json()["codigo"]["titulo"] == "Suma"

    @pytest.mark.asyncio
    async def test_create_missing_fields_is_400(self, test_client, auth_headers, owner):
        response = await test_client.post(
            "/api/codigos", json={"titulo": "Solo"}, headers=auth_headers(owner)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION"

    @pytest.mark.asyncio
    async def test_foreign_code_is_403_with_error_body(
        self, test_client, auth_headers, make_codigo, other
    ):
        codigo = await make_codigo(usuario_id=1)

        response = await test_client.get(
            f"/api/codigos/{codigo.id}",
            headers={**auth_headers(other), "X-Request-ID": "req-1234"},
        )

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "FORBIDDEN"
        assert body["error"] == "Forbidden"
        assert body["message"]
        assert body["request_id"] == "req-1234"
        assert response.headers["X-Request-ID"] == "req-1234"

    @pytest.mark.asyncio
    async def test_missing_code_is_404(self, test_client, auth_headers, other):
        response = await test_client.get("/api/codigos/999", headers=auth_headers(other))

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_tags_are_public(self, test_client, make_codigo):
        await make_codigo(tags="math,basic")

        response = await test_client.get("/api/codigos/tags/math")

        assert response.status_code == 200
        assert len(response.json()["codigos"]) == 1

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, auth_headers, make_codigo, owner):
        codigo = await make_codigo(usuario_id=owner.id, descripcion="keep me")

        response = await test_client.put(
            f"/api/codigos/{codigo.id}", json={"titulo": "Nuevo"}, headers=auth_headers(owner)
        )

        assert response.status_code == 200
        assert response.json()["codigo"]["descripcion"] == "keep me"

    @pytest.mark.asyncio
    async def test_membership_add_twice_then_remove(
        self, test_client, auth_headers, make_codigo, make_collection, owner
    ):
        codigo = await make_codigo(usuario_id=owner.id)
        coleccion = await make_collection(usuario_id=owner.id)
        payload = {"codigoId": codigo.id, "coleccionId": coleccion.id}

        for _ in range(2):
            response = await test_client.post(
                "/api/codigos/colecciones/add", json=payload, headers=auth_headers(owner)
            )
            assert response.status_code == 200

        removed = await test_client.post(
            "/api/codigos/colecciones/remove", json=payload, headers=auth_headers(owner)
        )
        assert removed.status_code == 200

        again = await test_client.post(
            "/api/codigos/colecciones/remove", json=payload, headers=auth_headers(owner)
        )
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_membership_body_type_error_is_400(self, test_client, auth_headers, owner):
        response = await test_client.post(
            "/api/codigos/colecciones/add",
            json={"codigoId": "abc", "coleccionId": 1},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION"
        assert body["details"]["errors"][0]["field"] == "codigoId"

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_headers, make_codigo, owner):
        codigo = await make_codigo(usuario_id=owner.id)

        response = await test_client.delete(f"/api/codigos/{codigo.id}", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Code deleted successfully"}


class TestCollectionRoutes:

    @pytest.mark.asyncio
    async def test_duplicate_snippet_is_409(
        self, test_client, auth_headers, make_codigo, make_collection, owner
    ):
        coleccion = await make_collection(usuario_id=owner.id)
        codigo = await make_codigo(usuario_id=owner.id)
        url = f"/api/collections/{coleccion.id}/snippets"

        first = await test_client.post(url, json={"snippetId": codigo.id}, headers=auth_headers(owner))
        second = await test_client.post(url, json={"snippetId": codigo.id}, headers=auth_headers(owner))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "DUPLICATE"

    @pytest.mark.asyncio
    async def test_private_collection_admin_override(
        self, test_client, auth_headers, make_collection
    ):
        coleccion = await make_collection(usuario_id=1, visibilidad="privada")
        url = f"/api/collections/{coleccion.id}"

        denied = await test_client.get(url, headers=auth_headers(Actor(id=2, role=Role.USUARIO)))
        allowed = await test_client.get(url, headers=auth_headers(Actor(id=99, role=Role.ADMIN)))

        assert denied.status_code == 403
        assert allowed.status_code == 200

    @pytest.mark.asyncio
    async def test_create_and_list_mine(self, test_client, auth_headers, owner):
        created = await test_client.post(
            "/api/collections",
            json={"nombre": "Utils", "visibilidad": "publica"},
            headers=auth_headers(owner),
        )
        listed = await test_client.get("/api/collections", headers=auth_headers(owner))

        assert created.status_code == 201
        assert [c["nombre"] for c in listed.json()["collections"]] == ["Utils"]


class TestCategoryRoutes:

    @pytest.mark.asyncio
    async def test_invalid_estado_is_400(self, test_client, auth_headers, make_category, owner):
        category = await make_category()

        response = await test_client.put(
            "/api/categories",
            json={"id": category.id, "nombre": "x", "descripcion": "y", "estado": "pendiente"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION"

    @pytest.mark.asyncio
    async def test_reads_require_token(self, test_client, make_category, make_codigo):
        category = await make_category("Web")
        codigo = await make_codigo()

        for url in (
            "/api/categories",
            f"/api/categories/{category.id}",
            f"/api/categories/code/{codigo.id}",
        ):
            response = await test_client.get(url)
            assert response.status_code == 401, url
            assert response.json()["code"] == "AUTHENTICATION"

    @pytest.mark.asyncio
    async def test_listing_with_token(self, test_client, auth_headers, make_category, owner):
        await make_category("Web")

        response = await test_client.get("/api/categories", headers=auth_headers(owner))

        assert response.status_code == 200
        assert [c["nombre"] for c in response.json()["categories"]] == ["Web"]

    @pytest.mark.asyncio
    async def test_link_missing_code_is_404(self, test_client, auth_headers, make_category, owner):
        category = await make_category("Web")

        response = await test_client.post(
            "/api/codigo-categorias/add",
            json={"codigoId": 12345, "categoriaId": category.id},
            headers=auth_headers(owner),
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_link_and_list_by_code(
        self, test_client, auth_headers, make_category, make_codigo, owner
    ):
        category = await make_category("Web")
        codigo = await make_codigo()

        linked = await test_client.post(
            "/api/codigo-categorias/add",
            json={"codigoId": codigo.id, "categoriaId": category.id},
            headers=auth_headers(owner),
        )
        listed = await test_client.get(
            f"/api/categories/code/{codigo.id}", headers=auth_headers(owner)
        )

        assert linked.status_code == 200
        assert [c["id"] for c in listed.json()["data"]] == [category.id]


class TestSubscriptionRoutes:

    @pytest.mark.asyncio
    async def test_subscribe_and_feed(
        self, test_client, auth_headers, make_category, make_codigo, owner
    ):
        category = await make_category("Web")
        codigo = await make_codigo()
        await test_client.post(
            "/api/codigo-categorias/add",
            json={"codigoId": codigo.id, "categoriaId": category.id},
            headers=auth_headers(owner),
        )

        created = await test_client.post(
            "/api/subscriptions",
            json={"id_usuario": owner.id, "id_categoria": category.id},
            headers=auth_headers(owner),
        )
        duplicate = await test_client.post(
            "/api/subscriptions",
            json={"id_usuario": owner.id, "id_categoria": category.id},
            headers=auth_headers(owner),
        )
        feed = await test_client.get(
            f"/api/subscriptions/feed/user/{owner.id}", headers=auth_headers(owner)
        )

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert [c["id"] for c in feed.json()["feed"]["codigos"]] == [codigo.id]

    @pytest.mark.asyncio
    async def test_reads_require_token(self, test_client, owner):
        for url in (
            f"/api/subscriptions/user/{owner.id}",
            f"/api/subscriptions/feed/user/{owner.id}",
            "/api/subscriptions/1",
        ):
            response = await test_client.get(url)
            assert response.status_code == 401, url
            assert response.json()["code"] == "AUTHENTICATION"


class TestUserRoutes:

    @pytest.mark.asyncio
    async def test_register_login_me(self, test_client):
        registered = await test_client.post(
            "/api/users",
            json={"nombre_completo": "Ana", "email": "ana@example.com", "contrasena": "s3cret"},
        )
        assert registered.status_code == 201

        login = await test_client.post(
            "/api/users/login", json={"email": "ana@example.com", "contrasena": "s3cret"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        me = await test_client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["usuario"]["email"] == "ana@example.com"

    @pytest.mark.asyncio
    async def test_registration_cannot_grant_admin(self, test_client, make_codigo):
        codigo = await make_codigo(usuario_id=50)
        await test_client.post(
            "/api/users",
            json={
                "nombre_completo": "Eve",
                "email": "eve@example.com",
                "contrasena": "s3cret",
                "rol": "admin",
            },
        )
        login = await test_client.post(
            "/api/users/login", json={"email": "eve@example.com", "contrasena": "s3cret"}
        )
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        assert login.json()["usuario"]["rol"] == "usuario"
        response = await test_client.get(f"/api/codigos/{codigo.id}", headers=headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_other_profile_is_forbidden(self, test_client, auth_headers, admin):
        registered = await test_client.post(
            "/api/users",
            json={"nombre_completo": "Ana", "email": "ana@example.com", "contrasena": "s3cret"},
        )
        user_id = registered.json()["usuario"]["id_usuario"]
        stranger = Actor(id=user_id + 1, role=Role.USUARIO)

        denied = await test_client.get(f"/api/users/{user_id}", headers=auth_headers(stranger))
        allowed = await test_client.get(f"/api/users/{user_id}", headers=auth_headers(admin))

        assert denied.status_code == 403
        assert allowed.status_code == 200

    @pytest.mark.asyncio
    async def test_bad_credentials_401(self, test_client):
        response = await test_client.post(
            "/api/users/login", json={"email": "ghost@example.com", "contrasena": "x"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_users_admin_only(self, test_client, auth_headers, owner, admin):
        denied = await test_client.get("/api/users", headers=auth_headers(owner))
        allowed = await test_client.get("/api/users", headers=auth_headers(admin))

        assert denied.status_code == 403
        assert allowed.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_token_401(self, test_client):
        response = await test_client.get(
            "/api/users/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
