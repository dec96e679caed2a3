"""
CodigoHub Backend — Collection Service Tests
=============================================

What:  Visibility-aware reads, strict-ownership writes and the snippet
       membership of a collection.
"""

from unittest.mock import MagicMock

import pytest

from codigohub.exceptions import (
    DeleteError,
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from codigohub.security import Actor, Role
from codigohub.services.collection_service import CollectionService


class TestCollectionVisibility:

    def setup_method(self):
        self.service = CollectionService()

    @pytest.mark.asyncio
    async def test_private_collection_scenario(self, db_session, make_collection):
        coleccion = await make_collection(usuario_id=1, visibilidad="privada")

        with pytest.raises(ForbiddenError):
            await self.service.get_by_id(db_session, coleccion.id, Actor(id=2, role=Role.USUARIO))

        result = await self.service.get_by_id(
            db_session, coleccion.id, Actor(id=99, role=Role.ADMIN)
        )
        assert result.id == coleccion.id

    @pytest.mark.asyncio
    async def test_public_collection_readable_by_anyone(
        self, db_session, make_collection, make_codigo, owner, other
    ):
        coleccion = await make_collection(usuario_id=owner.id, visibilidad="publica")
        codigo = await make_codigo(usuario_id=owner.id)
        await self.service.add_snippet(db_session, coleccion.id, codigo.id, owner)

        result = await self.service.get_by_id(db_session, coleccion.id, other)
        assert result.visibilidad == "publica"
        snippets = await self.service.list_snippets(db_session, coleccion.id, other)
        assert [s.id for s in snippets] == [codigo.id]

    @pytest.mark.asyncio
    async def test_missing_collection_is_not_found(self, db_session, other):
        with pytest.raises(NotFoundError):
            await self.service.get_by_id(db_session, 404, other)

    @pytest.mark.asyncio
    async def test_list_by_user_requires_id(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.list_by_user(mock_db_session, 0)


class TestCollectionWrites:

    def setup_method(self):
        self.service = CollectionService()

    @pytest.mark.asyncio
    async def test_create_defaults_to_private(self, db_session, owner):
        result = await self.service.create(db_session, owner.id, {"nombre": "  Utils  "})

        assert result.nombre == "Utils"
        assert result.visibilidad == "privada"
        assert result.usuario_id == owner.id

    @pytest.mark.asyncio
    async def test_create_rejects_blank_name(self, mock_db_session, owner):
        with pytest.raises(ValidationError):
            await self.service.create(mock_db_session, owner.id, {"nombre": "   "})

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_visibility(self, mock_db_session, owner):
        with pytest.raises(ValidationError, match="visibilidad"):
            await self.service.create(
                mock_db_session, owner.id, {"nombre": "x", "visibilidad": "secreta"}
            )

    @pytest.mark.asyncio
    async def test_update_keeps_visibility_and_replaces_description(
        self, db_session, make_collection, owner
    ):
        coleccion = await make_collection(
            usuario_id=owner.id, visibilidad="publica", descripcion="old"
        )

        result = await self.service.update(db_session, coleccion.id, owner, {"nombre": "Renamed"})

        assert result.nombre == "Renamed"
        assert result.visibilidad == "publica"
        assert result.descripcion is None

    @pytest.mark.asyncio
    async def test_stranger_update_forbidden_before_body_validation(
        self, db_session, make_collection, other
    ):
        coleccion = await make_collection(usuario_id=1, visibilidad="publica")

        with pytest.raises(ForbiddenError):
            await self.service.update(db_session, coleccion.id, other, {"nombre": ""})

    @pytest.mark.asyncio
    async def test_delete_removes_collection(self, db_session, make_collection, owner):
        coleccion = await make_collection(usuario_id=owner.id)

        await self.service.delete(db_session, coleccion.id, owner)

        with pytest.raises(NotFoundError):
            await self.service.get_by_id(db_session, coleccion.id, owner)

    @pytest.mark.asyncio
    async def test_delete_zero_rows_is_delete_error(self, mock_db_session, owner):
        found = MagicMock()
        found.scalar_one_or_none.return_value = MagicMock(usuario_id=owner.id)
        deleted = MagicMock(rowcount=0)
        mock_db_session.execute.side_effect = [found, MagicMock(), deleted]

        with pytest.raises(DeleteError):
            await self.service.delete(mock_db_session, 7, owner)


class TestCollectionSnippets:

    def setup_method(self):
        self.service = CollectionService()

    @pytest.mark.asyncio
    async def test_second_add_is_duplicate(self, db_session, make_collection, make_codigo, owner):
        coleccion = await make_collection(usuario_id=owner.id)
        codigo = await make_codigo(usuario_id=owner.id)

        await self.service.add_snippet(db_session, coleccion.id, codigo.id, owner)
        with pytest.raises(DuplicateError):
            await self.service.add_snippet(db_session, coleccion.id, codigo.id, owner)

    @pytest.mark.asyncio
    async def test_add_missing_snippet_is_not_found(self, db_session, make_collection, owner):
        coleccion = await make_collection(usuario_id=owner.id)

        with pytest.raises(NotFoundError):
            await self.service.add_snippet(db_session, coleccion.id, 999, owner)

    @pytest.mark.asyncio
    async def test_add_to_foreign_collection_forbidden(
        self, db_session, make_collection, make_codigo, other
    ):
        coleccion = await make_collection(usuario_id=1, visibilidad="publica")
        codigo = await make_codigo(usuario_id=other.id)

        with pytest.raises(ForbiddenError):
            await self.service.add_snippet(db_session, coleccion.id, codigo.id, other)

    @pytest.mark.asyncio
    async def test_remove_absent_snippet(self, db_session, make_collection, make_codigo, owner):
        coleccion = await make_collection(usuario_id=owner.id)
        codigo = await make_codigo(usuario_id=owner.id)

        with pytest.raises(NotFoundError, match="Snippet not found in the collection"):
            await self.service.remove_snippet(db_session, coleccion.id, codigo.id, owner)

    @pytest.mark.asyncio
    async def test_remove_then_list(self, db_session, make_collection, make_codigo, owner):
        coleccion = await make_collection(usuario_id=owner.id)
        keep = await make_codigo(usuario_id=owner.id)
        drop = await make_codigo(usuario_id=owner.id)
        await self.service.add_snippet(db_session, coleccion.id, keep.id, owner)
        await self.service.add_snippet(db_session, coleccion.id, drop.id, owner)

        await self.service.remove_snippet(db_session, coleccion.id, drop.id, owner)

        snippets = await self.service.list_snippets(db_session, coleccion.id, owner)
        assert [s.id for s in snippets] == [keep.id]
