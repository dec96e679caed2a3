"""
CodigoHub Backend — Codigo (snippet) SQLAlchemy Model
======================================================

What:  ORM model for the `codigo` table.
Who:   Used by CodigoService, CollectionService and CodigoCategoriaService.

Column notes:
    - titulo, codigo, lenguaje: NOT NULL and never empty (enforced in the service)
    - tags: comma-joined list, e.g. "math,basic"; matched element-wise by tag
    - tipo: free-form optional classifier

Query Patterns:
    - List by owner: WHERE usuario_id = :uid ORDER BY id DESC
      → idx_codigo_usuario_id
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from codigohub.database import Base


class Codigo(Base):
    """A stored code snippet owned by exactly one user."""

    __tablename__ = "codigo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    usuario_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("usuarios.id_usuario", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    titulo: Mapped[str] = mapped_column(String(200), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # The snippet source text itself
    codigo: Mapped[str] = mapped_column(Text, nullable=False)

    lenguaje: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    tipo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    @property
    def tag_list(self) -> list:
        """Tags as a list; empty when none are stored."""
        if not self.tags:
            return []
        return [t for t in self.tags.split(",") if t]

    def __repr__(self) -> str:
        return f"<Codigo(id={self.id}, usuario_id={self.usuario_id}, titulo='{self.titulo}')>"
