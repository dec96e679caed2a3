"""
CodigoHub Backend — Collection Request/Response Schemas
========================================================

What:  Pydantic models for collection endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from codigohub.schemas.codigo import CollectionSnippet


class CollectionWrite(BaseModel):
    """
    Body of POST /api/collections and PUT /api/collections/{id}.

    nombre is required (non-empty after trim); visibilidad must be
    'publica' or 'privada' when given.
    """
    nombre: Optional[str] = None
    descripcion: Optional[str] = None
    visibilidad: Optional[str] = Field(default=None, description="publica | privada")


class SnippetRequest(BaseModel):
    """Body of POST /api/collections/{id}/snippets."""
    model_config = ConfigDict(populate_by_name=True)

    snippet_id: Optional[int] = Field(default=None, alias="snippetId")


class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    usuario_id: int
    nombre: str
    descripcion: Optional[str] = None
    visibilidad: str


class CodigoCollection(CollectionResponse):
    """A collection as listed for one of its codes."""
    fecha_agregado: datetime


# ── Envelopes ─────────────────────────────────────────────────────────────


class CollectionResult(BaseModel):
    success: bool = True
    message: str
    collection: CollectionResponse


class CollectionListResult(BaseModel):
    success: bool = True
    message: str
    collections: List[CollectionResponse]


class CodigoCollectionsResult(BaseModel):
    success: bool = True
    message: str
    colecciones: List[CodigoCollection]


class SnippetListResult(BaseModel):
    success: bool = True
    message: str
    snippets: List[CollectionSnippet]
