"""
CodigoHub Backend — Collection Service (Collections Manager)
=============================================================

What:  CRUD over collections and snippet membership for one collection.
Who:   Called by the /api/collections router.

Authorization summary:
    get_by_id / list_snippets → visibility-aware read
                                (publica: anyone; privada: owner or admin)
    update / delete / add_snippet / remove_snippet
                              → strict ownership, regardless of visibility

Membership policy:
    add_snippet rejects an existing pair with DuplicateError, unlike
    CodigoService.add_to_collection which refreshes the timestamp.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import DeleteError, DuplicateError, NotFoundError, ValidationError
from codigohub.models.codigo import Codigo
from codigohub.models.collection import Collection, ColeccionCodigo
from codigohub.schemas.codigo import CodigoListItem, CollectionSnippet
from codigohub.schemas.collection import CollectionResponse
from codigohub.security import Actor
from codigohub.services.authorization import (
    PRIVADA,
    VISIBILITIES,
    require_access,
    require_found,
)
from codigohub.services.lookups import (
    fetch_codigo,
    fetch_collection,
    fetch_membership,
    storage_errors,
)

logger = logging.getLogger(__name__)


def _clean_nombre(nombre: Optional[str]) -> str:
    if not nombre or not nombre.strip():
        raise ValidationError("Data is missing: nombre", field="nombre")
    return nombre.strip()


def _check_visibilidad(visibilidad: Optional[str]) -> Optional[str]:
    if visibilidad and visibilidad not in VISIBILITIES:
        raise ValidationError(
            "Invalid value for visibilidad. Must be 'publica' or 'privada'",
            field="visibilidad",
        )
    return visibilidad or None


def _clean_descripcion(descripcion: Optional[str]) -> Optional[str]:
    return descripcion.strip() if descripcion else None


class CollectionService:
    """Business logic for collections and their snippet membership."""

    async def _get_readable(
        self, db: AsyncSession, collection_id: int, actor: Actor
    ) -> Collection:
        coleccion = require_found(
            await fetch_collection(db, collection_id), "collection", collection_id
        )
        require_access(
            actor,
            coleccion.usuario_id,
            "You do not have permission to view this collection",
            visibilidad=coleccion.visibilidad,
        )
        return coleccion

    async def _get_writable(
        self, db: AsyncSession, collection_id: int, actor: Actor, message: str
    ) -> Collection:
        coleccion = require_found(
            await fetch_collection(db, collection_id), "collection", collection_id
        )
        require_access(actor, coleccion.usuario_id, message, write=True)
        return coleccion

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_by_user(self, db: AsyncSession, user_id: int) -> List[CollectionResponse]:
        if not user_id:
            raise ValidationError("Data is missing: userId", field="userId")
        with storage_errors("retrieve collections"):
            result = await db.execute(
                select(Collection)
                .where(Collection.usuario_id == user_id)
                .order_by(Collection.id.desc())
            )
            return [CollectionResponse.model_validate(c) for c in result.scalars().all()]

    async def get_by_id(
        self, db: AsyncSession, collection_id: int, actor: Actor
    ) -> CollectionResponse:
        with storage_errors("retrieve the collection"):
            coleccion = await self._get_readable(db, collection_id, actor)
        return CollectionResponse.model_validate(coleccion)

    async def list_snippets(
        self, db: AsyncSession, collection_id: int, actor: Actor
    ) -> List[CollectionSnippet]:
        """Snippets in the collection, most recently added first."""
        with storage_errors("retrieve the collection snippets"):
            await self._get_readable(db, collection_id, actor)
            result = await db.execute(
                select(Codigo, ColeccionCodigo.fecha_agregado)
                .join(ColeccionCodigo, ColeccionCodigo.codigo_id == Codigo.id)
                .where(ColeccionCodigo.coleccion_id == collection_id)
                .order_by(ColeccionCodigo.fecha_agregado.desc(), Codigo.id.desc())
            )
            rows = result.all()
        return [
            CollectionSnippet(
                **CodigoListItem.model_validate(codigo).model_dump(),
                fecha_agregado=fecha_agregado,
            )
            for codigo, fecha_agregado in rows
        ]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(
        self, db: AsyncSession, owner_id: int, data: Dict[str, Any]
    ) -> CollectionResponse:
        """
        Create a collection.

        Raises:
            ValidationError: nombre empty after trim, or unknown visibilidad
        """
        nombre = _clean_nombre(data.get("nombre"))
        visibilidad = _check_visibilidad(data.get("visibilidad")) or PRIVADA

        coleccion = Collection(
            usuario_id=owner_id,
            nombre=nombre,
            descripcion=_clean_descripcion(data.get("descripcion")),
            visibilidad=visibilidad,
        )
        with storage_errors("create the collection"):
            db.add(coleccion)
            await db.flush()
        logger.info("Collection %s created by user %s", coleccion.id, owner_id)
        return CollectionResponse.model_validate(coleccion)

    async def update(
        self, db: AsyncSession, collection_id: int, actor: Actor, data: Dict[str, Any]
    ) -> CollectionResponse:
        """
        Replace nombre and descripcion; visibilidad is kept when not given.

        Ownership is checked before the body is validated, so a stranger
        gets FORBIDDEN even for a malformed body.
        """
        with storage_errors("update the collection"):
            coleccion = await self._get_writable(
                db, collection_id, actor, "You do not have permission to update this collection"
            )

            nombre = _clean_nombre(data.get("nombre"))
            visibilidad = _check_visibilidad(data.get("visibilidad"))

            coleccion.nombre = nombre
            coleccion.descripcion = _clean_descripcion(data.get("descripcion"))
            coleccion.visibilidad = visibilidad or coleccion.visibilidad
            await db.flush()
        logger.info("Collection %s updated by user %s", collection_id, actor.id)
        return CollectionResponse.model_validate(coleccion)

    async def delete(self, db: AsyncSession, collection_id: int, actor: Actor) -> None:
        """
        Raises:
            DeleteError: the delete statement affected no rows
        """
        with storage_errors("delete the collection"):
            await self._get_writable(
                db, collection_id, actor, "You do not have permission to delete this collection"
            )
            await db.execute(
                delete(ColeccionCodigo).where(ColeccionCodigo.coleccion_id == collection_id)
            )
            result = await db.execute(delete(Collection).where(Collection.id == collection_id))
            if result.rowcount == 0:
                raise DeleteError("Error deleting the collection")
        logger.info("Collection %s deleted by user %s", collection_id, actor.id)

    async def add_snippet(
        self, db: AsyncSession, collection_id: int, snippet_id: int, actor: Actor
    ) -> None:
        """
        Raises:
            NotFoundError:  collection or snippet does not exist
            ForbiddenError: actor does not own the collection
            DuplicateError: snippet already in the collection
        """
        if not collection_id or not snippet_id:
            raise ValidationError("Data is missing: collectionId, snippetId")

        with storage_errors("add the snippet to the collection"):
            await self._get_writable(
                db, collection_id, actor, "You do not have permission to modify this collection"
            )
            require_found(await fetch_codigo(db, snippet_id), "codigo", snippet_id)

            if await fetch_membership(db, collection_id, snippet_id) is not None:
                raise DuplicateError("The snippet is already in this collection")

            db.add(
                ColeccionCodigo(
                    coleccion_id=collection_id,
                    codigo_id=snippet_id,
                    fecha_agregado=datetime.now(timezone.utc),
                )
            )
            await db.flush()
        logger.info("Snippet %s added to collection %s", snippet_id, collection_id)

    async def remove_snippet(
        self, db: AsyncSession, collection_id: int, snippet_id: int, actor: Actor
    ) -> None:
        """
        Raises:
            NotFoundError: collection missing, or snippet not in the collection
        """
        if not collection_id or not snippet_id:
            raise ValidationError("Data is missing: collectionId, snippetId")

        with storage_errors("remove the snippet from the collection"):
            await self._get_writable(
                db, collection_id, actor, "You do not have permission to modify this collection"
            )
            result = await db.execute(
                delete(ColeccionCodigo).where(
                    ColeccionCodigo.coleccion_id == collection_id,
                    ColeccionCodigo.codigo_id == snippet_id,
                )
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    resource="snippet",
                    resource_id=snippet_id,
                    message="Snippet not found in the collection",
                )
        logger.info("Snippet %s removed from collection %s", snippet_id, collection_id)


# ── Singleton Instance ────────────────────────────────────────────────────
collection_service = CollectionService()
