"""
CodigoHub Backend — Codigo Route Handlers
==========================================

What:  /api/codigos: snippet CRUD, tag lookup and collection membership.
Who:   Every route except GET /tags/{tag} requires a bearer token.

Fixed paths (/my, /tags/..., /colecciones/...) are declared before
/{codigo_id} so they are not captured by the id parameter.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.exceptions import NotFoundError, ValidationError
from codigohub.schemas.codigo import (
    CodigoCreate,
    CodigoListResult,
    CodigoResult,
    CodigoUpdate,
    CollectionMembershipRequest,
    MembershipResult,
)
from codigohub.schemas.collection import CodigoCollectionsResult
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.security import Actor, get_current_actor
from codigohub.services.codigo_service import codigo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/codigos", tags=["Codigos"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not the owner", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
}


def _membership_ids(body: CollectionMembershipRequest):
    if not body.codigo_id or not body.coleccion_id:
        raise ValidationError("codigoId and coleccionId are required")
    return body.codigo_id, body.coleccion_id


@router.post(
    "",
    response_model=CodigoResult,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create a snippet owned by the caller",
)
async def create_codigo(
    body: CodigoCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigoResult:
    codigo = await codigo_service.create(db, body.model_dump(), owner_id=actor.id)
    return CodigoResult(message="Code created successfully", codigo=codigo)


@router.get("/my", response_model=CodigoListResult, responses=_ERRORS, summary="Caller's snippets")
async def list_my_codigos(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigoListResult:
    codigos = await codigo_service.list_by_user(db, actor.id)
    return CodigoListResult(message="Codes retrieved successfully", codigos=codigos)


@router.get("/tags/{tag}", response_model=CodigoListResult, summary="Snippets carrying a tag")
async def list_codigos_by_tag(
    tag: str,
    db: AsyncSession = Depends(get_db_session),
) -> CodigoListResult:
    """Public: no token needed. Matches whole tags only."""
    codigos = await codigo_service.list_by_tag(db, tag)
    return CodigoListResult(message="Codes retrieved successfully", codigos=codigos)


@router.post(
    "/colecciones/add",
    response_model=MembershipResult,
    responses=_ERRORS,
    summary="Add a snippet to a collection (refreshes the date if already there)",
)
async def add_codigo_to_coleccion(
    body: CollectionMembershipRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResult:
    codigo_id, coleccion_id = _membership_ids(body)
    membership = await codigo_service.add_to_collection(db, codigo_id, coleccion_id, actor)
    return MembershipResult(
        message="Code added to the collection successfully",
        coleccion_codigo=membership,
    )


@router.post(
    "/colecciones/remove",
    response_model=MembershipResult,
    responses=_ERRORS,
    summary="Remove a snippet from a collection",
)
async def remove_codigo_from_coleccion(
    body: CollectionMembershipRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResult:
    codigo_id, coleccion_id = _membership_ids(body)
    removed = await codigo_service.remove_from_collection(db, codigo_id, coleccion_id, actor)
    if not removed:
        raise NotFoundError(
            resource="codigo",
            resource_id=codigo_id,
            message="The code is not in the collection",
        )
    return MembershipResult(message="Code removed from the collection successfully")


@router.get("/{codigo_id}", response_model=CodigoResult, responses=_ERRORS, summary="Get a snippet")
async def get_codigo(
    codigo_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigoResult:
    codigo = await codigo_service.get_by_id(db, codigo_id, actor)
    return CodigoResult(message="Code retrieved successfully", codigo=codigo)


@router.put(
    "/{codigo_id}",
    response_model=CodigoResult,
    responses=_ERRORS,
    summary="Partially update a snippet",
)
async def update_codigo(
    codigo_id: int,
    body: CodigoUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigoResult:
    # Only the fields the client actually sent
    data = body.model_dump(exclude_unset=True)
    codigo = await codigo_service.update(db, codigo_id, data, actor)
    return CodigoResult(message="Code updated successfully", codigo=codigo)


@router.delete(
    "/{codigo_id}",
    response_model=MessageResult,
    responses=_ERRORS,
    summary="Delete a snippet and its collection memberships",
)
async def delete_codigo(
    codigo_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    if not await codigo_service.delete(db, codigo_id, actor):
        raise NotFoundError(resource="codigo", resource_id=codigo_id)
    return MessageResult(message="Code deleted successfully")


@router.get(
    "/{codigo_id}/colecciones",
    response_model=CodigoCollectionsResult,
    responses=_ERRORS,
    summary="Collections that contain a snippet",
)
async def list_colecciones_of_codigo(
    codigo_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CodigoCollectionsResult:
    colecciones = await codigo_service.list_collections_containing(db, codigo_id, actor)
    return CodigoCollectionsResult(
        message="Collections retrieved successfully",
        colecciones=colecciones,
    )
