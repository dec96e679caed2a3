"""
CodigoHub Backend — User Service
=================================

What:  Registration, login, profile read/update, admin listing/deletion
       and search.
Who:   Called by the /api/users router.

Rules:
    - Email is unique (DuplicateError on conflict).
    - Registration always creates a 'usuario'; only an admin updating a
      profile may change `rol`.
    - A profile is read or updated by its owner or by an admin.
    - Deleting and listing all users are admin-only.
    - Passwords are stored as werkzeug hashes; login returns a PyJWT
      bearer token carrying the user id and role.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import (
    AuthenticationError,
    DuplicateError,
    ForbiddenError,
    ValidationError,
)
from codigohub.models.user import User
from codigohub.schemas.user import LoginResponse, UserResponse
from codigohub.security import (
    Actor,
    Role,
    create_access_token,
    hash_password,
    verify_password,
)
from codigohub.services.authorization import require_access, require_found
from codigohub.services.lookups import storage_errors

logger = logging.getLogger(__name__)


def _parse_role(rol: Optional[str]) -> Role:
    try:
        return Role(rol) if rol else Role.USUARIO
    except ValueError:
        raise ValidationError("Invalid value for rol. Must be 'usuario' or 'admin'", field="rol")


class UserService:

    async def _fetch(self, db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id_usuario == user_id))
        return result.scalar_one_or_none()

    async def _fetch_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    # ── Registration & login ──────────────────────────────────────────────

    async def register(self, db: AsyncSession, data: Dict[str, Any]) -> UserResponse:
        """
        New accounts are always 'usuario'; a client-sent `rol` is ignored.

        Raises:
            ValidationError: nombre_completo, email or contrasena missing
            DuplicateError:  email already registered
        """
        nombre = (data.get("nombre_completo") or "").strip()
        email = (data.get("email") or "").strip()
        contrasena = data.get("contrasena") or ""
        if not nombre or not email or not contrasena:
            raise ValidationError("Data is missing: nombre_completo, email, contrasena")

        with storage_errors("register the user"):
            if await self._fetch_by_email(db, email) is not None:
                raise DuplicateError("The email is already registered")
            user = User(
                nombre_completo=nombre,
                email=email,
                contrasena=hash_password(contrasena),
                rol=Role.USUARIO.value,
            )
            db.add(user)
            await db.flush()
        logger.info("User %s registered", user.id_usuario)
        return UserResponse.model_validate(user)

    async def login(self, db: AsyncSession, email: str, contrasena: str) -> LoginResponse:
        with storage_errors("log in"):
            user = await self._fetch_by_email(db, email or "")
        if user is None or not verify_password(user.contrasena, contrasena or ""):
            raise AuthenticationError("Invalid credentials")
        token = create_access_token(user.id_usuario, Role(user.rol))
        return LoginResponse(token=token, usuario=UserResponse.model_validate(user))

    # ── Profiles ──────────────────────────────────────────────────────────

    async def get_profile(self, db: AsyncSession, actor: Actor, user_id: int) -> UserResponse:
        """
        Raises:
            NotFoundError:  user does not exist
            ForbiddenError: actor is not the user nor an admin
        """
        with storage_errors("retrieve the user"):
            user = require_found(await self._fetch(db, user_id), "user", user_id)
            require_access(actor, user.id_usuario, "You can only view your own profile")
        return UserResponse.model_validate(user)

    async def update_profile(
        self, db: AsyncSession, actor: Actor, user_id: int, data: Dict[str, Any]
    ) -> UserResponse:
        """
        Update name, email, password or role. Absent fields are kept.

        Raises:
            NotFoundError:  user does not exist
            ForbiddenError: actor is not the user nor an admin, or a
                            non-admin tries to change the role
            DuplicateError: email owned by another user
        """
        with storage_errors("update the user"):
            user = require_found(await self._fetch(db, user_id), "user", user_id)
            require_access(
                actor, user.id_usuario, "You can only update your own profile", write=True
            )

            if data.get("rol") and data["rol"] != user.rol:
                if not actor.is_admin():
                    raise ForbiddenError("Only administrators can change roles")
                user.rol = _parse_role(data["rol"]).value

            if data.get("email") and data["email"].lower() != user.email.lower():
                other = await self._fetch_by_email(db, data["email"])
                if other is not None and other.id_usuario != user.id_usuario:
                    raise DuplicateError("The email is already registered")
                user.email = data["email"].strip()

            if data.get("nombre_completo") and data["nombre_completo"].strip():
                user.nombre_completo = data["nombre_completo"].strip()
            if data.get("contrasena"):
                user.contrasena = hash_password(data["contrasena"])

            await db.flush()
        logger.info("User %s updated by %s", user_id, actor.id)
        return UserResponse.model_validate(user)

    async def delete(self, db: AsyncSession, actor: Actor, user_id: int) -> None:
        """Admin only. Owned resources are removed by ON DELETE CASCADE."""
        with storage_errors("delete the user"):
            require_found(await self._fetch(db, user_id), "user", user_id)
            if not actor.is_admin():
                raise ForbiddenError("Only administrators can delete users")
            await db.execute(delete(User).where(User.id_usuario == user_id))
        logger.info("User %s deleted by admin %s", user_id, actor.id)

    # ── Listing ───────────────────────────────────────────────────────────

    async def search(self, db: AsyncSession, q: str) -> List[UserResponse]:
        """Users whose name or email contains `q` (case-insensitive)."""
        q = (q or "").strip()
        stmt = select(User).order_by(User.id_usuario)
        if q:
            pattern = f"%{q.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(User.nombre_completo).like(pattern),
                    func.lower(User.email).like(pattern),
                )
            )
        with storage_errors("search users"):
            result = await db.execute(stmt)
            return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def list_all(self, db: AsyncSession, actor: Actor) -> List[UserResponse]:
        if not actor.is_admin():
            raise ForbiddenError("Only administrators can list users")
        with storage_errors("retrieve users"):
            result = await db.execute(select(User).order_by(User.id_usuario))
            return [UserResponse.model_validate(u) for u in result.scalars().all()]


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
