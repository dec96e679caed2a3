"""
CodigoHub Backend — User Service Tests
=======================================
"""

import pytest

from codigohub.exceptions import (
    AuthenticationError,
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from codigohub.security import Actor, Role, decode_access_token
from codigohub.services.user_service import UserService


@pytest.fixture
def register(db_session):
    service = UserService()

    async def _register(email: str = "ana@example.com", **fields):
        data = {
            "nombre_completo": "Ana Pérez",
            "email": email,
            "contrasena": "s3cret",
        }
        data.update(fields)
        return await service.register(db_session, data)

    return _register


class TestUserRegistration:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_register_hides_password(self, register):
        user = await register()

        assert user.id_usuario is not None
        assert user.rol == "usuario"
        assert not hasattr(user, "contrasena")

    @pytest.mark.asyncio
    async def test_duplicate_email_case_insensitive(self, register):
        await register(email="ana@example.com")

        with pytest.raises(DuplicateError):
            await register(email="ANA@example.com")

    @pytest.mark.asyncio
    async def test_missing_fields(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.register(mock_db_session, {"email": "x@example.com"})

    @pytest.mark.asyncio
    async def test_requested_admin_role_is_ignored(self, register):
        user = await register(email="eve@example.com", rol="admin")

        assert user.rol == "usuario"


class TestUserLogin:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_login_returns_token_for_user(self, db_session, register):
        user = await register()

        result = await self.service.login(db_session, "ana@example.com", "s3cret")

        actor = decode_access_token(result.token)
        assert actor.id == user.id_usuario
        assert actor.role is Role.USUARIO
        assert result.usuario.email == "ana@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, db_session, register):
        await register()

        with pytest.raises(AuthenticationError):
            await self.service.login(db_session, "ana@example.com", "nope")

    @pytest.mark.asyncio
    async def test_unknown_email(self, db_session):
        with pytest.raises(AuthenticationError):
            await self.service.login(db_session, "ghost@example.com", "s3cret")


class TestUserProfiles:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_get_missing_profile(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_profile(db_session, Actor(id=1), 404)

    @pytest.mark.asyncio
    async def test_profile_readable_by_self_and_admin_only(self, db_session, register):
        user = await register()

        mine = await self.service.get_profile(
            db_session, Actor(id=user.id_usuario), user.id_usuario
        )
        assert mine.email == "ana@example.com"

        with pytest.raises(ForbiddenError):
            await self.service.get_profile(
                db_session, Actor(id=user.id_usuario + 1), user.id_usuario
            )

        seen = await self.service.get_profile(
            db_session, Actor(id=99, role=Role.ADMIN), user.id_usuario
        )
        assert seen.id_usuario == user.id_usuario

    @pytest.mark.asyncio
    async def test_self_update(self, db_session, register):
        user = await register()
        me = Actor(id=user.id_usuario, role=Role.USUARIO)

        result = await self.service.update_profile(
            db_session, me, user.id_usuario, {"nombre_completo": "Ana María"}
        )

        assert result.nombre_completo == "Ana María"
        assert result.email == "ana@example.com"

    @pytest.mark.asyncio
    async def test_stranger_cannot_update(self, db_session, register):
        user = await register()

        with pytest.raises(ForbiddenError):
            await self.service.update_profile(
                db_session, Actor(id=user.id_usuario + 1), user.id_usuario, {"nombre_completo": "X"}
            )

    @pytest.mark.asyncio
    async def test_only_admin_changes_role(self, db_session, register):
        user = await register()
        me = Actor(id=user.id_usuario, role=Role.USUARIO)

        with pytest.raises(ForbiddenError, match="roles"):
            await self.service.update_profile(db_session, me, user.id_usuario, {"rol": "admin"})

        result = await self.service.update_profile(
            db_session, Actor(id=99, role=Role.ADMIN), user.id_usuario, {"rol": "admin"}
        )
        assert result.rol == "admin"

    @pytest.mark.asyncio
    async def test_email_taken_by_another_user(self, db_session, register):
        await register(email="ana@example.com")
        bob = await register(email="bob@example.com", nombre_completo="Bob")

        with pytest.raises(DuplicateError):
            await self.service.update_profile(
                db_session,
                Actor(id=bob.id_usuario),
                bob.id_usuario,
                {"email": "ana@example.com"},
            )


class TestUserAdministration:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_delete_requires_admin(self, db_session, register):
        user = await register()

        with pytest.raises(ForbiddenError):
            await self.service.delete(db_session, Actor(id=user.id_usuario), user.id_usuario)

        await self.service.delete(db_session, Actor(id=99, role=Role.ADMIN), user.id_usuario)
        with pytest.raises(NotFoundError):
            await self.service.get_profile(
                db_session, Actor(id=99, role=Role.ADMIN), user.id_usuario
            )

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found_first(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete(db_session, Actor(id=1), 404)

    @pytest.mark.asyncio
    async def test_list_all_admin_only(self, db_session, register):
        await register()

        with pytest.raises(ForbiddenError):
            await self.service.list_all(db_session, Actor(id=1))

        result = await self.service.list_all(db_session, Actor(id=99, role=Role.ADMIN))
        assert len(result) == 1

    @pytest.mark.asyncio
    async def test_search_by_name_or_email(self, db_session, register):
        await register(email="ana@example.com", nombre_completo="Ana Pérez")
        await register(email="bob@work.org", nombre_completo="Roberto")

        by_name = await self.service.search(db_session, "rober")
        by_email = await self.service.search(db_session, "EXAMPLE")

        assert [u.email for u in by_name] == ["bob@work.org"]
        assert [u.email for u in by_email] == ["ana@example.com"]
