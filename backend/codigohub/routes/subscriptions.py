"""
CodigoHub Backend — Subscription Route Handlers
================================================

What:  /api/subscriptions: every route requires a bearer token.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codigohub.database import get_db_session
from codigohub.schemas.common import ErrorResponse, MessageResult
from codigohub.schemas.subscription import (
    FeedResult,
    SubscriptionCreate,
    SubscriptionListResult,
    SubscriptionResult,
    SubscriptionUpdate,
)
from codigohub.security import Actor, get_current_actor
from codigohub.services.subscription_service import subscription_service

router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])

_ERRORS = {
    400: {"description": "Missing fields", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
}


@router.get("/user/{user_id}", response_model=SubscriptionListResult, responses=_ERRORS)
async def list_user_subscriptions(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResult:
    subscriptions = await subscription_service.list_by_user(db, user_id)
    return SubscriptionListResult(
        message="Subscriptions retrieved successfully", subscriptions=subscriptions
    )


@router.get(
    "/feed/user/{user_id}",
    response_model=FeedResult,
    responses=_ERRORS,
    summary="Categories and codes from the user's active subscriptions",
)
async def get_user_feed(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> FeedResult:
    feed = await subscription_service.feed(db, user_id)
    return FeedResult(message="Feed retrieved successfully", feed=feed)


@router.get("/{subscription_id}", response_model=SubscriptionResult, responses=_ERRORS)
async def get_subscription(
    subscription_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResult:
    subscription = await subscription_service.get_by_id(db, subscription_id)
    return SubscriptionResult(
        message="Subscription retrieved successfully", subscription=subscription
    )


@router.post(
    "",
    response_model=SubscriptionResult,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"description": "Already subscribed", "model": ErrorResponse}},
    summary="Subscribe a user to a category",
)
async def create_subscription(
    body: SubscriptionCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResult:
    subscription = await subscription_service.create(db, body.model_dump())
    return SubscriptionResult(message="Subscription created successfully", subscription=subscription)


@router.put("", response_model=SubscriptionResult, responses=_ERRORS, summary="Toggle notifications")
async def update_subscription(
    body: SubscriptionUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResult:
    subscription = await subscription_service.update(db, body.model_dump())
    return SubscriptionResult(message="Subscription updated successfully", subscription=subscription)


@router.delete("/{subscription_id}", response_model=MessageResult, responses=_ERRORS)
async def delete_subscription(
    subscription_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResult:
    await subscription_service.delete(db, subscription_id)
    return MessageResult(message="Subscription deleted successfully")
