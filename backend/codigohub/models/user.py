"""
CodigoHub Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `usuarios` table.
Who:   Used by UserService; referenced by every owned resource.

Lifecycle:
    Created on registration, updated by self or admin, deleted by admin.
    Owned codes, collections and subscriptions are removed by the store
    through ON DELETE CASCADE foreign keys.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from codigohub.database import Base


class User(Base):
    """A registered account. `rol` is either 'usuario' or 'admin'."""

    __tablename__ = "usuarios"

    id_usuario: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre_completo: Mapped[str] = mapped_column(String(150), nullable=False)

    # Unique across accounts; duplicates are rejected by UserService first
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # werkzeug password hash, never the raw password
    contrasena: Mapped[str] = mapped_column(String(255), nullable=False)

    rol: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="usuario",
        server_default=text("'usuario'"),
    )

    fecha_creacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("rol IN ('usuario', 'admin')", name="ck_usuarios_rol"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id_usuario}, email='{self.email}', rol='{self.rol}')>"
