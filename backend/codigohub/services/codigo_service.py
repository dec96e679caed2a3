"""
CodigoHub Backend — Codigo Service (Snippets Manager)
======================================================

What:  CRUD over code snippets, tag lookup, and collection membership for
       a single code.
Who:   Called by the /api/codigos router.

Authorization summary:
    get / update / delete / list_collections_containing
        → checked against the CODE's owner (no public snippets)
    add_to_collection / remove_from_collection
        → checked against the COLLECTION's owner; adding to a collection
          is an act on the collection
    list_by_tag
        → public, no actor

Membership policy:
    add_to_collection is a single INSERT ... ON CONFLICT DO UPDATE, so
    concurrent adds of one pair both succeed. Re-adding an existing
    (collection, code) pair refreshes fecha_agregado instead of failing. CollectionService
    .add_snippet rejects the same situation with DuplicateError; both
    behaviours are kept for existing clients.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import ValidationError
from codigohub.models.codigo import Codigo
from codigohub.models.collection import Collection, ColeccionCodigo
from codigohub.schemas.codigo import (
    CodigoListItem,
    CodigoResponse,
    ColeccionCodigoResponse,
)
from codigohub.schemas.collection import CodigoCollection, CollectionResponse
from codigohub.security import Actor
from codigohub.services.authorization import require_access, require_found
from codigohub.services.lookups import (
    fetch_codigo,
    fetch_collection,
    storage_errors,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("titulo", "codigo", "lenguaje")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


def membership_upsert(dialect_name: str, coleccion_id: int, codigo_id: int, fecha: datetime):
    """
    Single-statement insert of a (collection, code) pair that refreshes
    fecha_agregado when the pair already exists.
    """
    stmt = _UPSERT_INSERTS[dialect_name](ColeccionCodigo).values(
        coleccion_id=coleccion_id,
        codigo_id=codigo_id,
        fecha_agregado=fecha,
    )
    return stmt.on_conflict_do_update(
        index_elements=[ColeccionCodigo.coleccion_id, ColeccionCodigo.codigo_id],
        set_={"fecha_agregado": stmt.excluded.fecha_agregado},
    )


def serialize_tags(tags: Optional[Iterable[str]]) -> Optional[str]:
    """
    Join a tag list into the stored comma-separated form.

    ["math", "basic"] → "math,basic"; an empty list → None.
    """
    if tags is None:
        return None
    cleaned = [str(tag).strip() for tag in tags]
    joined = ",".join(tag for tag in cleaned if tag)
    return joined or None


class CodigoService:
    """
    Business logic for snippets.

    Every single-code operation runs existence check → authorization →
    action, so a missing code is always NOT_FOUND, whoever asks.
    """

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_by_user(self, db: AsyncSession, user_id: int) -> List[CodigoListItem]:
        """All snippets owned by `user_id`, newest first by id. Never None."""
        with storage_errors("retrieve codes"):
            result = await db.execute(
                select(Codigo)
                .where(Codigo.usuario_id == user_id)
                .order_by(Codigo.id.desc())
            )
            return [CodigoListItem.model_validate(c) for c in result.scalars().all()]

    async def get_by_id(self, db: AsyncSession, codigo_id: int, actor: Actor) -> CodigoResponse:
        """
        Raises:
            NotFoundError:  code does not exist
            ForbiddenError: actor is neither the author nor an admin
        """
        with storage_errors("retrieve the code"):
            codigo = require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
        require_access(actor, codigo.usuario_id, "Forbidden")
        return CodigoResponse.model_validate(codigo)

    async def list_by_tag(self, db: AsyncSession, tag: str) -> List[CodigoListItem]:
        """
        Snippets whose tag list contains `tag` as a whole element.

        The SQL LIKE only narrows candidates; the element match happens on
        the split list, so "mat" does not match "math,basic".
        """
        tag = (tag or "").strip()
        if not tag:
            return []
        with storage_errors("retrieve codes by tag"):
            result = await db.execute(
                select(Codigo)
                .where(Codigo.tags.contains(tag, autoescape=True))
                .order_by(Codigo.id.desc())
            )
            candidates = result.scalars().all()
        return [CodigoListItem.model_validate(c) for c in candidates if tag in c.tag_list]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(
        self, db: AsyncSession, data: Dict[str, Any], owner_id: int
    ) -> CodigoResponse:
        """
        Create a snippet for `owner_id`.

        Raises:
            ValidationError: titulo, codigo or lenguaje missing/empty
        """
        missing = [f for f in REQUIRED_FIELDS if not (data.get(f) or "").strip()]
        if missing:
            raise ValidationError(
                "Required fields: titulo, codigo, lenguaje",
                context={"missing": missing},
            )

        codigo = Codigo(
            usuario_id=owner_id,
            titulo=data["titulo"],
            descripcion=data.get("descripcion") or None,
            codigo=data["codigo"],
            lenguaje=data["lenguaje"],
            tags=serialize_tags(data.get("tags")),
            tipo=data.get("tipo") or None,
        )
        with storage_errors("create the code"):
            db.add(codigo)
            await db.flush()
        logger.info("Codigo %s created by user %s", codigo.id, owner_id)
        return CodigoResponse.model_validate(codigo)

    async def update(
        self, db: AsyncSession, codigo_id: int, data: Dict[str, Any], actor: Actor
    ) -> CodigoResponse:
        """
        Partial update.

        `data` should only hold the fields the client sent. Absent fields
        keep their value; empty titulo/codigo/lenguaje are ignored so those
        columns never become empty; `tags` replaces the whole list.
        """
        with storage_errors("update the code"):
            codigo = require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
            require_access(
                actor, codigo.usuario_id, "Only the author can modify this code", write=True
            )

            for field in REQUIRED_FIELDS:
                if data.get(field):
                    setattr(codigo, field, data[field])
            if "descripcion" in data:
                codigo.descripcion = data["descripcion"] or None
            if "tipo" in data:
                codigo.tipo = data["tipo"] or None
            if data.get("tags") is not None:
                codigo.tags = serialize_tags(data["tags"])

            await db.flush()
        logger.info("Codigo %s updated by user %s", codigo_id, actor.id)
        return CodigoResponse.model_validate(codigo)

    async def delete(self, db: AsyncSession, codigo_id: int, actor: Actor) -> bool:
        """
        Delete a snippet and its collection memberships.

        Membership rows go first, then the code row. Returns whether the
        code row was actually removed.
        """
        with storage_errors("delete the code"):
            codigo = require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
            require_access(
                actor, codigo.usuario_id, "Only the author can delete this code", write=True
            )

            await db.execute(
                delete(ColeccionCodigo).where(ColeccionCodigo.codigo_id == codigo_id)
            )
            result = await db.execute(delete(Codigo).where(Codigo.id == codigo_id))
            deleted = result.rowcount > 0
        logger.info("Codigo %s deleted by user %s (removed=%s)", codigo_id, actor.id, deleted)
        return deleted

    # ── Collection membership ─────────────────────────────────────────────

    async def _load_pair(
        self, db: AsyncSession, codigo_id: int, coleccion_id: int
    ) -> Collection:
        require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
        return require_found(await fetch_collection(db, coleccion_id), "collection", coleccion_id)

    async def add_to_collection(
        self, db: AsyncSession, codigo_id: int, coleccion_id: int, actor: Actor
    ) -> ColeccionCodigoResponse:
        """
        Put a code into a collection the actor owns (or any, for admins).

        Idempotent: an existing pair gets a fresh fecha_agregado and stays a
        single row.
        """
        with storage_errors("add the code to the collection"):
            coleccion = await self._load_pair(db, codigo_id, coleccion_id)
            require_access(
                actor,
                coleccion.usuario_id,
                "You can only add codes to your own collections",
                write=True,
            )

            now = _utcnow()
            dialect = db.get_bind().dialect.name
            await db.execute(membership_upsert(dialect, coleccion_id, codigo_id, now))
        logger.info("Codigo %s added to collection %s", codigo_id, coleccion_id)
        return ColeccionCodigoResponse(
            coleccion_id=coleccion_id, codigo_id=codigo_id, fecha_agregado=now
        )

    async def remove_from_collection(
        self, db: AsyncSession, codigo_id: int, coleccion_id: int, actor: Actor
    ) -> bool:
        """Returns False when the code was not in the collection."""
        with storage_errors("remove the code from the collection"):
            coleccion = await self._load_pair(db, codigo_id, coleccion_id)
            require_access(
                actor,
                coleccion.usuario_id,
                "You can only remove codes from your own collections",
                write=True,
            )
            result = await db.execute(
                delete(ColeccionCodigo).where(
                    ColeccionCodigo.codigo_id == codigo_id,
                    ColeccionCodigo.coleccion_id == coleccion_id,
                )
            )
            return result.rowcount > 0

    async def list_collections_containing(
        self, db: AsyncSession, codigo_id: int, actor: Actor
    ) -> List[CodigoCollection]:
        """Collections holding the code, most recently added first."""
        with storage_errors("retrieve collections"):
            codigo = require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
            require_access(actor, codigo.usuario_id, "Forbidden")

            result = await db.execute(
                select(Collection, ColeccionCodigo.fecha_agregado)
                .join(ColeccionCodigo, ColeccionCodigo.coleccion_id == Collection.id)
                .where(ColeccionCodigo.codigo_id == codigo_id)
                .order_by(ColeccionCodigo.fecha_agregado.desc(), Collection.id.desc())
            )
            rows = result.all()
        return [
            CodigoCollection(
                **CollectionResponse.model_validate(coleccion).model_dump(),
                fecha_agregado=fecha_agregado,
            )
            for coleccion, fecha_agregado in rows
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
codigo_service = CodigoService()
