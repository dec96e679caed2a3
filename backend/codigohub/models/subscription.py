"""
CodigoHub Backend — Subscription SQLAlchemy Model
==================================================

What:  ORM model for `suscripciones` (user ↔ category opt-in).
Who:   Used by SubscriptionService, including the feed aggregation.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from codigohub.database import Base


class Subscription(Base):
    """A user's subscription to a category, with a notification preference."""

    __tablename__ = "suscripciones"

    id_suscripciones: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    id_usuario: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("usuarios.id_usuario", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    id_categoria: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categorias.id", ondelete="CASCADE"),
        nullable=False,
    )

    notificaciones: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    fecha_suscripcion: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # One subscription per (user, category)
    __table_args__ = (
        UniqueConstraint("id_usuario", "id_categoria", name="uq_suscripciones_usuario_categoria"),
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id_suscripciones}, usuario={self.id_usuario}, "
            f"categoria={self.id_categoria})>"
        )
