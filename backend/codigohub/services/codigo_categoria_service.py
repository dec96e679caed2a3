"""
CodigoHub Backend — Codigo-Categoria Relationship Service
==========================================================

What:  Many-to-many links between codes and categories.
Who:   Called by the /api/codigo-categorias router and CategoryService.

Any authenticated actor may link or unlink any code; there is no
ownership check on this association. Linking needs both the code and the
category to exist (NotFoundError otherwise). Both operations are
idempotent: linking an existing pair and unlinking a missing pair succeed
silently.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import ValidationError
from codigohub.models.category import Category, CodigoCategoria
from codigohub.models.codigo import Codigo
from codigohub.schemas.category import CategoryResponse
from codigohub.schemas.codigo import CodigoListItem
from codigohub.services.authorization import require_found
from codigohub.services.lookups import fetch_category, fetch_codigo, storage_errors

logger = logging.getLogger(__name__)


def _require_ids(codigo_id: Optional[int], categoria_id: Optional[int]) -> None:
    if not codigo_id or not categoria_id:
        raise ValidationError("codigoId and categoriaId are required")


class CodigoCategoriaService:

    async def link(self, db: AsyncSession, codigo_id: int, categoria_id: int) -> None:
        _require_ids(codigo_id, categoria_id)
        with storage_errors("add the code to the category"):
            require_found(await fetch_codigo(db, codigo_id), "codigo", codigo_id)
            require_found(await fetch_category(db, categoria_id), "category", categoria_id)
            existing = await db.execute(
                select(CodigoCategoria).where(
                    CodigoCategoria.codigo_id == codigo_id,
                    CodigoCategoria.categoria_id == categoria_id,
                )
            )
            if existing.scalar_one_or_none() is None:
                db.add(CodigoCategoria(codigo_id=codigo_id, categoria_id=categoria_id))
                await db.flush()
        logger.info("Codigo %s linked to category %s", codigo_id, categoria_id)

    async def unlink(self, db: AsyncSession, codigo_id: int, categoria_id: int) -> None:
        _require_ids(codigo_id, categoria_id)
        with storage_errors("remove the code from the category"):
            await db.execute(
                delete(CodigoCategoria).where(
                    CodigoCategoria.codigo_id == codigo_id,
                    CodigoCategoria.categoria_id == categoria_id,
                )
            )
        logger.info("Codigo %s unlinked from category %s", codigo_id, categoria_id)

    async def categories_of(self, db: AsyncSession, codigo_id: int) -> List[CategoryResponse]:
        if not codigo_id:
            raise ValidationError("codigoId is required", field="codigoId")
        with storage_errors("retrieve the code categories"):
            result = await db.execute(
                select(Category)
                .join(CodigoCategoria, CodigoCategoria.categoria_id == Category.id)
                .where(CodigoCategoria.codigo_id == codigo_id)
                .order_by(Category.nombre)
            )
            return [CategoryResponse.model_validate(c) for c in result.scalars().all()]

    async def codes_of(self, db: AsyncSession, categoria_id: int) -> List[CodigoListItem]:
        if not categoria_id:
            raise ValidationError("categoriaId is required", field="categoriaId")
        with storage_errors("retrieve the category codes"):
            result = await db.execute(
                select(Codigo)
                .join(CodigoCategoria, CodigoCategoria.codigo_id == Codigo.id)
                .where(CodigoCategoria.categoria_id == categoria_id)
                .order_by(Codigo.id.desc())
            )
            return [CodigoListItem.model_validate(c) for c in result.scalars().all()]


# ── Singleton Instance ────────────────────────────────────────────────────
codigo_categoria_service = CodigoCategoriaService()
