"""
CodigoHub Backend — Authorization & Ownership Rules
====================================================

What:  Pure ALLOW/DENY decisions for an actor acting on an owned resource,
       plus the helpers every manager uses to enforce them in order.
Why:   One place decides who may read or write what, so the admin override
       and the visibility rule are identical across managers.

Rules:
    Write (update/delete/link/unlink):
        ALLOW iff actor owns the resource or actor is admin.
    Read:
        visibilidad == 'publica'            → ALLOW
        'privada' or no visibility concept  → owner or admin only

Ordering contract:
    Every single-resource operation runs
        1. require_found()   → NotFoundError
        2. require_access()  → ForbiddenError
        3. the operation itself
    so NOT_FOUND always takes precedence over FORBIDDEN.
"""

import enum
import logging
from typing import Optional, TypeVar

from codigohub.exceptions import ForbiddenError, NotFoundError
from codigohub.security import Actor

logger = logging.getLogger(__name__)

T = TypeVar("T")

PUBLICA = "publica"
PRIVADA = "privada"
VISIBILITIES = (PUBLICA, PRIVADA)


class Access(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


def can_access(
    actor: Actor,
    owner_id: Optional[int],
    visibilidad: Optional[str] = None,
    write: bool = False,
) -> Access:
    """
    Decide whether `actor` may read (write=False) or write a resource.

    Args:
        actor:       The authenticated identity
        owner_id:    usuario_id of the resource
        visibilidad: 'publica' / 'privada', or None for resources without
                     a visibility concept (treated as private)
        write:       True for update/delete/link/unlink
    """
    if actor.is_admin() or actor.owns(owner_id):
        return Access.ALLOW
    if not write and visibilidad == PUBLICA:
        return Access.ALLOW
    return Access.DENY


def require_found(obj: Optional[T], resource: str, resource_id) -> T:
    """Return `obj` or raise NotFoundError when it is None."""
    if obj is None:
        raise NotFoundError(resource=resource, resource_id=resource_id)
    return obj


def require_access(
    actor: Actor,
    owner_id: Optional[int],
    message: str,
    visibilidad: Optional[str] = None,
    write: bool = False,
) -> None:
    """Raise ForbiddenError with `message` unless can_access() allows."""
    if can_access(actor, owner_id, visibilidad=visibilidad, write=write) is Access.DENY:
        logger.warning(
            "Access denied: actor=%s role=%s owner=%s write=%s",
            actor.id,
            actor.role.value,
            owner_id,
            write,
        )
        raise ForbiddenError(message)
