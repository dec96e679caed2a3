"""
CodigoHub Backend — Collection SQLAlchemy Models
=================================================

What:  ORM models for `colecciones` and the `coleccion_codigo` join table.
Who:   Used by CollectionService and CodigoService.

Association rules:
    - (coleccion_id, codigo_id) is the primary key, so a pair exists once.
    - fecha_agregado is refreshed when CodigoService re-adds an existing pair.
    - Rows are deleted explicitly before their code or collection is deleted.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from codigohub.database import Base


class Collection(Base):
    """A named, visibility-scoped grouping of snippets owned by a user."""

    __tablename__ = "colecciones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    usuario_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("usuarios.id_usuario", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # 'publica' → readable by anyone; 'privada' → owner or admin only
    visibilidad: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="privada",
        server_default=text("'privada'"),
    )

    __table_args__ = (
        CheckConstraint(
            "visibilidad IN ('publica', 'privada')",
            name="ck_colecciones_visibilidad",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Collection(id={self.id}, usuario_id={self.usuario_id}, "
            f"visibilidad='{self.visibilidad}')>"
        )


class ColeccionCodigo(Base):
    """Membership of a code in a collection."""

    __tablename__ = "coleccion_codigo"

    coleccion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("colecciones.id", ondelete="CASCADE"),
        primary_key=True,
    )
    codigo_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("codigo.id", ondelete="CASCADE"),
        primary_key=True,
    )
    fecha_agregado: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Reverse lookup: "which collections contain this code"
    __table_args__ = (
        Index("idx_coleccion_codigo_codigo_id", "codigo_id"),
    )

    def __repr__(self) -> str:
        return f"<ColeccionCodigo(coleccion_id={self.coleccion_id}, codigo_id={self.codigo_id})>"
