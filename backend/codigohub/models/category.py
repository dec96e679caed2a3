"""
CodigoHub Backend — Category SQLAlchemy Models
===============================================

What:  ORM models for `categorias` and the `codigo_categoria` join table.
Who:   Used by CategoryService, CodigoCategoriaService and SubscriptionService.

Categories are not owned by anyone. Their `estado` is 'activo' or
'inactivo'; only active categories feed subscriptions.
"""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from codigohub.database import Base


class Category(Base):
    """A taxonomy node with an active/inactive lifecycle state."""

    __tablename__ = "categorias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    descripcion: Mapped[str] = mapped_column(Text, nullable=False)
    estado: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="activo",
        server_default=text("'activo'"),
    )

    __table_args__ = (
        CheckConstraint("estado IN ('activo', 'inactivo')", name="ck_categorias_estado"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, nombre='{self.nombre}', estado='{self.estado}')>"


class CodigoCategoria(Base):
    """Many-to-many link between codes and categories."""

    __tablename__ = "codigo_categoria"

    codigo_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("codigo.id", ondelete="CASCADE"),
        primary_key=True,
    )
    categoria_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categorias.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (
        Index("idx_codigo_categoria_categoria_id", "categoria_id"),
    )
