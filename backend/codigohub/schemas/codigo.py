"""
CodigoHub Backend — Codigo Request/Response Schemas
====================================================

What:  Pydantic models for snippet endpoints.
Why:   Request models only check shape; required-field rules live in
       CodigoService so they hold even when the service is called directly.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CodigoCreate(BaseModel):
    """Body of POST /api/codigos. titulo, codigo and lenguaje are required."""
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    codigo: Optional[str] = None
    lenguaje: Optional[str] = None
    tags: Optional[List[str]] = Field(default=None, description="Stored comma-joined")
    tipo: Optional[str] = None


class CodigoUpdate(BaseModel):
    """
    Body of PUT /api/codigos/{id}.

    Partial: only fields present in the body are applied. `tags`, when
    present, replaces the stored list entirely.
    """
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    codigo: Optional[str] = None
    lenguaje: Optional[str] = None
    tags: Optional[List[str]] = None
    tipo: Optional[str] = None


class CollectionMembershipRequest(BaseModel):
    """Body of POST /api/codigos/colecciones/{add,remove}."""
    model_config = ConfigDict(populate_by_name=True)

    codigo_id: Optional[int] = Field(default=None, alias="codigoId")
    coleccion_id: Optional[int] = Field(default=None, alias="coleccionId")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CodigoResponse(BaseModel):
    """Full snippet, including its source text."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    usuario_id: int
    titulo: str
    descripcion: Optional[str] = None
    codigo: str
    lenguaje: str
    tags: Optional[str] = Field(default=None, description="Comma-joined tag list")
    tipo: Optional[str] = None


class CodigoListItem(BaseModel):
    """Compact snippet for listings; the source text is left out."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    usuario_id: int
    titulo: str
    descripcion: Optional[str] = None
    lenguaje: str
    tags: Optional[str] = None
    tipo: Optional[str] = None


class CollectionSnippet(CodigoListItem):
    """A snippet as listed inside a collection."""
    fecha_agregado: datetime


class ColeccionCodigoResponse(BaseModel):
    """The association row written by add-to-collection."""
    model_config = ConfigDict(from_attributes=True)

    coleccion_id: int
    codigo_id: int
    fecha_agregado: datetime


# ── Envelopes ─────────────────────────────────────────────────────────────


class CodigoResult(BaseModel):
    success: bool = True
    message: str
    codigo: CodigoResponse


class CodigoListResult(BaseModel):
    success: bool = True
    message: str
    codigos: List[CodigoListItem]


class MembershipResult(BaseModel):
    success: bool = True
    message: str
    coleccion_codigo: Optional[ColeccionCodigoResponse] = None
