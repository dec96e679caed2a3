"""
CodigoHub Backend — Category and Codigo-Categoria Schemas
==========================================================
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from codigohub.schemas.codigo import CodigoListItem


class CategoryCreate(BaseModel):
    nombre: Optional[str] = None
    descripcion: Optional[str] = None
    estado: Optional[str] = Field(default=None, description="activo | inactivo")


class CategoryUpdate(CategoryCreate):
    """PUT /api/categories carries the id in the body."""
    id: Optional[int] = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    descripcion: str
    estado: str


class CodigoCategoriaRequest(BaseModel):
    """Body of POST /add and DELETE /remove on /api/codigo-categorias."""
    model_config = ConfigDict(populate_by_name=True)

    codigo_id: Optional[int] = Field(default=None, alias="codigoId")
    categoria_id: Optional[int] = Field(default=None, alias="categoriaId")


# ── Envelopes ─────────────────────────────────────────────────────────────


class CategoryResult(BaseModel):
    success: bool = True
    message: str
    category: CategoryResponse


class CategoryListResult(BaseModel):
    success: bool = True
    message: str
    categories: List[CategoryResponse]


class CategoriesOfCodigoResult(BaseModel):
    success: bool = True
    data: List[CategoryResponse]


class CodigosOfCategoryResult(BaseModel):
    success: bool = True
    data: List[CodigoListItem]
