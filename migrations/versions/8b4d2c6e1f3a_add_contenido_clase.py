"""add contenido clase

Revision ID: 8b4d2c6e1f3a
Revises: 3e1f0a9c2b7d
Create Date: 2026-10-02 18:40:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "8b4d2c6e1f3a"
down_revision = "3e1f0a9c2b7d"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "contenido_clase",
        sa.Column("id_contenido", sa.Integer(), nullable=False),
        sa.Column("id_materia", sa.Integer(), nullable=False),
        sa.Column("fecha", sa.Date(), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=False),
        sa.Column("archivo_url", sa.Text(), nullable=True),  # signed URL
        sa.Column("archivo_path", sa.String(length=512), nullable=True),  # materia_<id>/<ts>_<nombre>
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["id_materia"], ["materia.id_materia"]),
        sa.PrimaryKeyConstraint("id_contenido"),
    )
    with op.batch_alter_table("contenido_clase", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_contenido_clase_id_materia"), ["id_materia"], unique=False)


def downgrade():
    with op.batch_alter_table("contenido_clase", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_contenido_clase_id_materia"))
    op.drop_table("contenido_clase")
