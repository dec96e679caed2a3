"""
CodigoHub Backend — Subscription Service
=========================================

What:  User ↔ category subscriptions and the per-user feed.
Who:   Called by the /api/subscriptions router.

Feed aggregation:
    For a user, take every subscription whose category is 'activo' and
    return those categories plus the distinct codes linked to them
    (codigo_categoria), newest code first. Inactive categories contribute
    nothing even while the subscription row exists.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.exceptions import DuplicateError, NotFoundError, ValidationError
from codigohub.models.category import Category, CodigoCategoria
from codigohub.models.codigo import Codigo
from codigohub.models.subscription import Subscription
from codigohub.schemas.category import CategoryResponse
from codigohub.schemas.codigo import CodigoListItem
from codigohub.schemas.subscription import FeedResponse, SubscriptionResponse
from codigohub.services.lookups import fetch_category, storage_errors

logger = logging.getLogger(__name__)


class SubscriptionService:

    async def _fetch(self, db: AsyncSession, subscription_id: int) -> Subscription:
        result = await db.execute(
            select(Subscription).where(Subscription.id_suscripciones == subscription_id)
        )
        subscription = result.scalar_one_or_none()
        if subscription is None:
            raise NotFoundError(resource="subscription", resource_id=subscription_id)
        return subscription

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_by_user(self, db: AsyncSession, user_id: int) -> List[SubscriptionResponse]:
        if not user_id:
            raise ValidationError("Data is missing: id_usuario", field="id_usuario")
        with storage_errors("retrieve subscriptions"):
            result = await db.execute(
                select(Subscription)
                .where(Subscription.id_usuario == user_id)
                .order_by(Subscription.id_suscripciones.desc())
            )
            return [SubscriptionResponse.model_validate(s) for s in result.scalars().all()]

    async def get_by_id(self, db: AsyncSession, subscription_id: int) -> SubscriptionResponse:
        with storage_errors("retrieve the subscription"):
            subscription = await self._fetch(db, subscription_id)
        return SubscriptionResponse.model_validate(subscription)

    async def feed(self, db: AsyncSession, user_id: int) -> FeedResponse:
        """Categories and codes surfaced by the user's active subscriptions."""
        if not user_id:
            raise ValidationError("Data is missing: id_usuario", field="id_usuario")

        active_subscription = (
            (Subscription.id_categoria == Category.id)
            & (Subscription.id_usuario == user_id)
            & (Category.estado == "activo")
        )
        with storage_errors("build the feed"):
            categories = await db.execute(
                select(Category)
                .join(Subscription, active_subscription)
                .order_by(Category.id)
            )
            codigos = await db.execute(
                select(Codigo)
                .join(CodigoCategoria, CodigoCategoria.codigo_id == Codigo.id)
                .join(Category, Category.id == CodigoCategoria.categoria_id)
                .join(Subscription, active_subscription)
                .distinct()
                .order_by(Codigo.id.desc())
            )
            return FeedResponse(
                categorias=[CategoryResponse.model_validate(c) for c in categories.scalars().all()],
                codigos=[CodigoListItem.model_validate(c) for c in codigos.scalars().all()],
            )

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> SubscriptionResponse:
        """
        Subscribe a user to a category.

        Raises:
            ValidationError: id_usuario or id_categoria missing
            NotFoundError:   category does not exist
            DuplicateError:  user already subscribed to the category
        """
        user_id = data.get("id_usuario")
        category_id = data.get("id_categoria")
        if not user_id or not category_id:
            raise ValidationError("Data is missing: id_usuario, id_categoria")

        notificaciones = data.get("notificaciones")
        with storage_errors("create the subscription"):
            if await fetch_category(db, category_id) is None:
                raise NotFoundError(resource="category", resource_id=category_id)

            existing = await db.execute(
                select(Subscription).where(
                    Subscription.id_usuario == user_id,
                    Subscription.id_categoria == category_id,
                )
            )
            if existing.scalar_one_or_none() is not None:
                raise DuplicateError("The user is already subscribed to this category")

            subscription = Subscription(
                id_usuario=user_id,
                id_categoria=category_id,
                notificaciones=True if notificaciones is None else bool(notificaciones),
            )
            db.add(subscription)
            await db.flush()
        logger.info("User %s subscribed to category %s", user_id, category_id)
        return SubscriptionResponse.model_validate(subscription)

    async def update(self, db: AsyncSession, data: Dict[str, Any]) -> SubscriptionResponse:
        """Only the notification flag can change."""
        subscription_id = data.get("id_suscripciones")
        notificaciones = data.get("notificaciones")
        if not subscription_id or notificaciones is None:
            raise ValidationError("Data is missing: id_suscripciones, notificaciones")

        with storage_errors("update the subscription"):
            subscription = await self._fetch(db, subscription_id)
            subscription.notificaciones = bool(notificaciones)
            await db.flush()
        logger.info(
            "Subscription %s notifications=%s", subscription_id, subscription.notificaciones
        )
        return SubscriptionResponse.model_validate(subscription)

    async def delete(self, db: AsyncSession, subscription_id: int) -> None:
        with storage_errors("delete the subscription"):
            result = await db.execute(
                delete(Subscription).where(Subscription.id_suscripciones == subscription_id)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource="subscription", resource_id=subscription_id)
        logger.info("Subscription %s deleted", subscription_id)


# ── Singleton Instance ────────────────────────────────────────────────────
subscription_service = SubscriptionService()
