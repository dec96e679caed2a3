"""
CodigoHub Backend — Collection Route Handlers
==============================================

What:  /api/collections: the caller's collections, CRUD by id and the
       snippets inside a collection. All routes require a bearer token.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.schemas.collection import (
    CollectionListResult,
    CollectionResult,
    CollectionWrite,
    SnippetListResult,
    SnippetRequest,
)
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.security import Actor, get_current_actor
from codigohub.services.collection_service import collection_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/collections", tags=["Collections"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not allowed on this collection", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
}


@router.get("", response_model=CollectionListResult, responses=_ERRORS, summary="Caller's collections")
async def list_my_collections(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionListResult:
    collections = await collection_service.list_by_user(db, actor.id)
    return CollectionListResult(
        message="Collections retrieved successfully", collections=collections
    )


@router.post(
    "",
    response_model=CollectionResult,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create a collection",
)
async def create_collection(
    body: CollectionWrite,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionResult:
    collection = await collection_service.create(db, actor.id, body.model_dump())
    return CollectionResult(message="Collection created successfully", collection=collection)


@router.get(
    "/{collection_id}",
    response_model=CollectionResult,
    responses=_ERRORS,
    summary="Get a collection (public ones are readable by anyone)",
)
async def get_collection(
    collection_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionResult:
    collection = await collection_service.get_by_id(db, collection_id, actor)
    return CollectionResult(message="Collection retrieved successfully", collection=collection)


@router.put("/{collection_id}", response_model=CollectionResult, responses=_ERRORS, summary="Update a collection")
async def update_collection(
    collection_id: int,
    body: CollectionWrite,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionResult:
    collection = await collection_service.update(db, collection_id, actor, body.model_dump())
    return CollectionResult(message="Collection updated successfully", collection=collection)


@router.delete("/{collection_id}", response_model=MessageResult, responses=_ERRORS, summary="Delete a collection")
async def delete_collection(
    collection_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await collection_service.delete(db, collection_id, actor)
    return MessageResult(message="Collection deleted successfully")


@router.get(
    "/{collection_id}/snippets",
    response_model=SnippetListResult,
    responses=_ERRORS,
    summary="Snippets in a collection, most recently added first",
)
async def list_collection_snippets(
    collection_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> SnippetListResult:
    snippets = await collection_service.list_snippets(db, collection_id, actor)
    return SnippetListResult(message="Snippets retrieved successfully", snippets=snippets)


@router.post(
    "/{collection_id}/snippets",
    response_model=MessageResult,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"description": "Already in the collection", "model": ErrorResponse}},
    summary="Add a snippet to a collection",
)
async def add_snippet_to_collection(
    collection_id: int,
    body: SnippetRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await collection_service.add_snippet(db, collection_id, body.snippet_id, actor)
    return MessageResult(message="Snippet added to the collection successfully")


@router.delete(
    "/{collection_id}/snippets/{snippet_id}",
    response_model=MessageResult,
    responses=_ERRORS,
    summary="Remove a snippet from a collection",
)
async def remove_snippet_from_collection(
    collection_id: int,
    snippet_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await collection_service.remove_snippet(db, collection_id, snippet_id, actor)
    return MessageResult(message="Snippet removed from the collection successfully")
