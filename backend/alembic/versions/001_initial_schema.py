"""Initial CodigoHub schema

Revision ID: 001
Revises: None
Create Date: 2024-05-01 00:00:00.000000+00:00

What:  Creates users, codes, collections, categories, their join tables
       and subscriptions.
How:   Integer identity keys; join tables use composite primary keys so a
       pair can exist only once. Owned rows cascade when their user goes.

Rollback: downgrade() drops every table in reverse dependency order.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "usuarios",
        sa.Column("id_usuario", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre_completo", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("contrasena", sa.String(255), nullable=False),
        sa.Column("rol", sa.String(20), nullable=False, server_default=sa.text("'usuario'")),
        sa.Column(
            "fecha_creacion",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id_usuario"),
        sa.CheckConstraint("rol IN ('usuario', 'admin')", name="ck_usuarios_rol"),
    )
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)

    op.create_table(
        "codigo",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("usuario_id", sa.Integer(), nullable=False),
        sa.Column("titulo", sa.String(200), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("codigo", sa.Text(), nullable=False),
        sa.Column("lenguaje", sa.String(50), nullable=False),
        sa.Column("tags", sa.String(500), nullable=True),
        sa.Column("tipo", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuarios.id_usuario"], ondelete="CASCADE"),
    )
    op.create_index("ix_codigo_usuario_id", "codigo", ["usuario_id"])

    op.create_table(
        "colecciones",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("usuario_id", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(150), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column(
            "visibilidad", sa.String(10), nullable=False, server_default=sa.text("'privada'")
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuarios.id_usuario"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "visibilidad IN ('publica', 'privada')", name="ck_colecciones_visibilidad"
        ),
    )
    op.create_index("ix_colecciones_usuario_id", "colecciones", ["usuario_id"])

    op.create_table(
        "coleccion_codigo",
        sa.Column("coleccion_id", sa.Integer(), nullable=False),
        sa.Column("codigo_id", sa.Integer(), nullable=False),
        sa.Column(
            "fecha_agregado",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("coleccion_id", "codigo_id"),
        sa.ForeignKeyConstraint(["coleccion_id"], ["colecciones.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["codigo_id"], ["codigo.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_coleccion_codigo_codigo_id", "coleccion_codigo", ["codigo_id"])

    op.create_table(
        "categorias",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(100), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=False),
        sa.Column("estado", sa.String(10), nullable=False, server_default=sa.text("'activo'")),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("estado IN ('activo', 'inactivo')", name="ck_categorias_estado"),
    )

    op.create_table(
        "codigo_categoria",
        sa.Column("codigo_id", sa.Integer(), nullable=False),
        sa.Column("categoria_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("codigo_id", "categoria_id"),
        sa.ForeignKeyConstraint(["codigo_id"], ["codigo.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["categoria_id"], ["categorias.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_codigo_categoria_categoria_id", "codigo_categoria", ["categoria_id"])

    op.create_table(
        "suscripciones",
        sa.Column("id_suscripciones", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id_usuario", sa.Integer(), nullable=False),
        sa.Column("id_categoria", sa.Integer(), nullable=False),
        sa.Column("notificaciones", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "fecha_suscripcion",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id_suscripciones"),
        sa.ForeignKeyConstraint(["id_usuario"], ["usuarios.id_usuario"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["id_categoria"], ["categorias.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "id_usuario", "id_categoria", name="uq_suscripciones_usuario_categoria"
        ),
    )
    op.create_index("ix_suscripciones_id_usuario", "suscripciones", ["id_usuario"])


def downgrade() -> None:
    op.drop_table("suscripciones")
    op.drop_table("codigo_categoria")
    op.drop_table("categorias")
    op.drop_table("coleccion_codigo")
    op.drop_table("colecciones")
    op.drop_table("codigo")
    op.drop_table("usuarios")
