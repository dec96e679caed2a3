"""
CodigoHub Backend — Codigo-Categoria Route Handlers
====================================================

What:  /api/codigo-categorias: link and unlink codes and categories, and
       list either side of the relation. All routes require a bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.schemas.category import (
    CategoriesOfCodigoResult,
    CodigoCategoriaRequest,
    CodigosOfCategoryResult,
)
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.security import Actor, get_current_actor
from codigohub.services.codigo_categoria_service import codigo_categoria_service

router = APIRouter(prefix="/api/codigo-categorias", tags=["Codigo-Categorias"])

_ERRORS = {
    400: {"description": "codigoId / categoriaId missing", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
}


@router.post("/add", response_model=MessageResult, responses=_ERRORS, summary="Link a code to a category")
async def add_codigo_to_categoria(
    body: CodigoCategoriaRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await codigo_categoria_service.link(db, body.codigo_id, body.categoria_id)
    return MessageResult(message="Code added to the category")


@router.delete("/remove", response_model=MessageResult, responses=_ERRORS, summary="Unlink a code from a category")
async def remove_codigo_from_categoria(
    body: CodigoCategoriaRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await codigo_categoria_service.unlink(db, body.codigo_id, body.categoria_id)
    return MessageResult(message="Code removed from the category")


@router.get("/codigo/{codigo_id}", response_model=CategoriesOfCodigoResult, responses=_ERRORS)
async def get_categorias_of_codigo(
    codigo_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoriesOfCodigoResult:
    return CategoriesOfCodigoResult(
        data=await codigo_categoria_service.categories_of(db, codigo_id)
    )


@router.get("/categoria/{categoria_id}", response_model=CodigosOfCategoryResult, responses=_ERRORS)
async def get_codigos_of_categoria(
    categoria_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigosOfCategoryResult:
    return CodigosOfCategoryResult(data=await codigo_categoria_service.codes_of(db, categoria_id))
