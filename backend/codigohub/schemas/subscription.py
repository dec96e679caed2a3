"""
CodigoHub Backend — Subscription and Feed Schemas
==================================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from codigohub.schemas.category import CategoryResponse
from codigohub.schemas.codigo import CodigoListItem


class SubscriptionCreate(BaseModel):
    id_usuario: Optional[int] = None
    id_categoria: Optional[int] = None
    notificaciones: bool = Field(default=True)


class SubscriptionUpdate(BaseModel):
    id_suscripciones: Optional[int] = None
    notificaciones: Optional[bool] = None


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_suscripciones: int
    id_usuario: int
    id_categoria: int
    notificaciones: bool
    fecha_suscripcion: datetime


class FeedResponse(BaseModel):
    """
    What:  Everything surfaced to a user by their subscriptions.
    How:   Only subscriptions to 'activo' categories contribute; codes are
           distinct and newest first.
    """
    categorias: List[CategoryResponse]
    codigos: List[CodigoListItem]


# ── Envelopes ─────────────────────────────────────────────────────────────


class SubscriptionResult(BaseModel):
    success: bool = True
    message: str
    subscription: SubscriptionResponse


class SubscriptionListResult(BaseModel):
    success: bool = True
    message: str
    subscriptions: List[SubscriptionResponse]


class FeedResult(BaseModel):
    success: bool = True
    message: str
    feed: FeedResponse
