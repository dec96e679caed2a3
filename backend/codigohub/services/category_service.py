"""
CodigoHub Backend — Category Service
=====================================

What:  CRUD over categories. Categories are not owned; `estado` must be
       'activo' or 'inactivo' and is validated before anything is stored.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import NotFoundError, ValidationError
from codigohub.models.category import Category, CodigoCategoria
from codigohub.models.subscription import Subscription
from codigohub.schemas.category import CategoryResponse
from codigohub.services.codigo_categoria_service import codigo_categoria_service
from codigohub.services.lookups import fetch_category, storage_errors

logger = logging.getLogger(__name__)

ESTADOS = ("activo", "inactivo")


def _validate_category(data: Dict[str, Any], require_id: bool = False) -> None:
    required = ("id", "nombre", "descripcion", "estado") if require_id else (
        "nombre",
        "descripcion",
        "estado",
    )
    missing = [field for field in required if not str(data.get(field) or "").strip()]
    if missing:
        raise ValidationError(
            f"Data is missing: {', '.join(required)}",
            context={"missing": missing},
        )
    if data["estado"] not in ESTADOS:
        raise ValidationError(
            "Invalid value for estado. Must be 'activo' or 'inactivo'",
            field="estado",
        )


class CategoryService:

    async def list_all(self, db: AsyncSession) -> List[CategoryResponse]:
        with storage_errors("retrieve categories"):
            result = await db.execute(select(Category).order_by(Category.id))
            return [CategoryResponse.model_validate(c) for c in result.scalars().all()]

    async def get_by_id(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        if not category_id:
            raise ValidationError("Data is missing: id", field="id")
        with storage_errors("retrieve the category"):
            category = await fetch_category(db, category_id)
        if category is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        return CategoryResponse.model_validate(category)

    async def categories_by_code(
        self, db: AsyncSession, codigo_id: int
    ) -> List[CategoryResponse]:
        if not codigo_id:
            raise ValidationError("Data is missing: id", field="id")
        return await codigo_categoria_service.categories_of(db, codigo_id)

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> CategoryResponse:
        _validate_category(data)
        category = Category(
            nombre=data["nombre"].strip(),
            descripcion=data["descripcion"].strip(),
            estado=data["estado"],
        )
        with storage_errors("create the category"):
            db.add(category)
            await db.flush()
        logger.info("Category %s created", category.id)
        return CategoryResponse.model_validate(category)

    async def update(self, db: AsyncSession, data: Dict[str, Any]) -> CategoryResponse:
        """
        Full update; id, nombre, descripcion and estado are all required.

        Validation runs before any statement is issued.
        """
        _validate_category(data, require_id=True)
        with storage_errors("update the category"):
            category = await fetch_category(db, data["id"])
            if category is None:
                raise NotFoundError(resource="category", resource_id=data["id"])
            category.nombre = data["nombre"].strip()
            category.descripcion = data["descripcion"].strip()
            category.estado = data["estado"]
            await db.flush()
        logger.info("Category %s updated (estado=%s)", category.id, category.estado)
        return CategoryResponse.model_validate(category)

    async def delete(self, db: AsyncSession, category_id: int) -> None:
        if not category_id:
            raise ValidationError("Data is missing: id", field="id")
        with storage_errors("delete the category"):
            await db.execute(
                delete(CodigoCategoria).where(CodigoCategoria.categoria_id == category_id)
            )
            await db.execute(
                delete(Subscription).where(Subscription.id_categoria == category_id)
            )
            result = await db.execute(delete(Category).where(Category.id == category_id))
            if result.rowcount == 0:
                raise NotFoundError(resource="category", resource_id=category_id)
        logger.info("Category %s deleted", category_id)


# ── Singleton Instance ────────────────────────────────────────────────────
category_service = CategoryService()
