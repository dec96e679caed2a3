"""
CodigoHub Backend — Shared Row Lookups
=======================================

What:  Single-row fetches used by more than one manager, and the helper
       that turns driver failures into DatabaseError.
Why:   CodigoService needs collections and CollectionService needs codes;
       keeping the lookups here avoids the two modules importing each other.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import DatabaseError
from codigohub.models.category import Category
from codigohub.models.codigo import Codigo
from codigohub.models.collection import Collection, ColeccionCodigo

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Wrap SQLAlchemy failures raised inside the block in DatabaseError.

    Application exceptions (NotFoundError, ForbiddenError, ...) pass through
    untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {operation}. Please try again.",
            context={"error_type": type(e).__name__},
        )


async def fetch_codigo(db: AsyncSession, codigo_id: int) -> Optional[Codigo]:
    result = await db.execute(select(Codigo).where(Codigo.id == codigo_id))
    return result.scalar_one_or_none()


async def fetch_collection(db: AsyncSession, collection_id: int) -> Optional[Collection]:
    result = await db.execute(select(Collection).where(Collection.id == collection_id))
    return result.scalar_one_or_none()


async def fetch_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def fetch_membership(
    db: AsyncSession, collection_id: int, codigo_id: int
) -> Optional[ColeccionCodigo]:
    result = await db.execute(
        select(ColeccionCodigo).where(
            ColeccionCodigo.coleccion_id == collection_id,
            ColeccionCodigo.codigo_id == codigo_id,
        )
    )
    return result.scalar_one_or_none()
