"""
CodigoHub Backend — User Route Handlers
========================================

What:  /api/users: registration and login are public; everything else
       needs a bearer token. GET /{id} is limited to the user and admins;
       DELETE /{id} and GET / are admin-only.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.schemas.user import (
    LoginResult,
    UserListResult,
    UserLogin,
    UserRegister,
    UserResult,
    UserUpdate,
)
from codigohub.security import Actor, get_current_actor
from codigohub.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not allowed", "model": ErrorResponse},
    404: {"description": "User not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=UserResult,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register(body: UserRegister, db: AsyncSession = Depends(get_db_session)) -> UserResult:
    usuario = await user_service.register(db, body.model_dump())
    return UserResult(message="User registered successfully", usuario=usuario)


@router.post("/login", response_model=LoginResult, responses=_ERRORS, summary="Exchange credentials for a token")
async def login(body: UserLogin, db: AsyncSession = Depends(get_db_session)) -> LoginResult:
    result = await user_service.login(db, body.email, body.contrasena)
    return LoginResult(**result.model_dump())


@router.get("/search", response_model=UserListResult, responses=_ERRORS, summary="Search users by name or email")
async def search_users(
    q: str = Query(default="", description="Substring of the name or email"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> UserListResult:
    usuarios = await user_service.search(db, q)
    return UserListResult(message="Users retrieved successfully", usuarios=usuarios)


@router.get("/me", response_model=UserResult, responses=_ERRORS, summary="Caller's profile")
async def get_my_profile(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    usuario = await user_service.get_profile(db, actor, actor.id)
    return UserResult(message="Profile retrieved successfully", usuario=usuario)


@router.get("/{user_id}", response_model=UserResult, responses=_ERRORS, summary="Get a profile")
async def get_profile(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    usuario = await user_service.get_profile(db, actor, user_id)
    return UserResult(message="Profile retrieved successfully", usuario=usuario)


@router.put("/{user_id}", response_model=UserResult, responses=_ERRORS, summary="Update a profile")
async def update_profile(
    user_id: int,
    body: UserUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    usuario = await user_service.update_profile(
        db, actor, user_id, body.model_dump(exclude_unset=True)
    )
    return UserResult(message="Profile updated successfully", usuario=usuario)


@router.delete("/{user_id}", response_model=MessageResult, responses=_ERRORS, summary="Delete a user (admin)")
async def delete_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await user_service.delete(db, actor, user_id)
    return MessageResult(message="User deleted successfully")


@router.get("", response_model=UserListResult, responses=_ERRORS, summary="List every user (admin)")
async def list_users(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> UserListResult:
    usuarios = await user_service.list_all(db, actor)
    return UserListResult(message="Users retrieved successfully", usuarios=usuarios)
