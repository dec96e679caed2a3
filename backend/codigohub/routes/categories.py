"""
CodigoHub Backend — Category Route Handlers
============================================

What:  /api/categories: every route requires a bearer token. PUT carries
       the id in the body.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.schemas.category import (
    CategoriesOfCodigoResult,
    CategoryCreate,
    CategoryListResult,
    CategoryResult,
    CategoryUpdate,
)
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.security import Actor, get_current_actor
from codigohub.services.category_service import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])

_ERRORS = {
    400: {"description": "Missing fields or invalid estado", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    404: {"description": "Category not found", "model": ErrorResponse},
}


@router.get("", response_model=CategoryListResult, summary="List every category")
async def list_categories(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryListResult:
    categories = await category_service.list_all(db)
    return CategoryListResult(message="Categories retrieved successfully", categories=categories)


@router.get("/code/{codigo_id}", response_model=CategoriesOfCodigoResult, responses=_ERRORS)
async def list_categories_of_code(
    codigo_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoriesOfCodigoResult:
    return CategoriesOfCodigoResult(data=await category_service.categories_by_code(db, codigo_id))


@router.get("/{category_id}", response_model=CategoryResult, responses=_ERRORS, summary="Get a category")
async def get_category(
    category_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResult:
    category = await category_service.get_by_id(db, category_id)
    return CategoryResult(message="Category retrieved successfully", category=category)


@router.post(
    "",
    response_model=CategoryResult,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create a category",
)
async def create_category(
    body: CategoryCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResult:
    category = await category_service.create(db, body.model_dump())
    return CategoryResult(message="Category created successfully", category=category)


@router.put("", response_model=CategoryResult, responses=_ERRORS, summary="Replace a category")
async def update_category(
    body: CategoryUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResult:
    category = await category_service.update(db, body.model_dump())
    return CategoryResult(message="Category updated successfully", category=category)


@router.delete("/{category_id}", response_model=MessageResult, responses=_ERRORS, summary="Delete a category")
async def delete_category(
    category_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await category_service.delete(db, category_id)
    return MessageResult(message="Category deleted successfully")
