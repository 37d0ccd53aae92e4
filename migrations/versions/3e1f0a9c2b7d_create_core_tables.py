"""create usuario, profesor, curso, materia, horario tables

Revision ID: 3e1f0a9c2b7d
Revises:
Create Date: 2026-09-28 10:05:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3e1f0a9c2b7d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "usuario",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=True),  # admin | profesor
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("usuario", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_usuario_email"), ["email"], unique=True)

    op.create_table(
        "profesor",
        sa.Column("id_profesor", sa.Integer(), nullable=False),
        sa.Column("usuario_id", sa.Integer(), nullable=True),
        sa.Column("nombre", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("genero", sa.String(length=16), nullable=False),
        sa.Column("direccion", sa.String(length=255), nullable=False),
        sa.Column("telefono", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["usuario_id"], ["usuario.id"]),
        sa.PrimaryKeyConstraint("id_profesor"),
    )
    with op.batch_alter_table("profesor", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_profesor_usuario_id"), ["usuario_id"], unique=True)

    op.create_table(
        "curso",
        sa.Column("id_curso", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(length=120), nullable=False),
        sa.Column("nivel", sa.String(length=64), nullable=False),
        sa.Column("anio", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id_curso"),
    )

    op.create_table(
        "materia",
        sa.Column("id_materia", sa.Integer(), nullable=False),
        sa.Column("nombre", sa.String(length=120), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("carga_horaria", sa.String(length=64), nullable=True),
        sa.Column("id_curso", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["id_curso"], ["curso.id_curso"]),
        sa.PrimaryKeyConstraint("id_materia"),
    )
    with op.batch_alter_table("materia", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_materia_id_curso"), ["id_curso"], unique=False)

    op.create_table(
        "profesor_materia",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("id_profesor", sa.Integer(), nullable=False),
        sa.Column("id_materia", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["id_profesor"], ["profesor.id_profesor"]),
        sa.ForeignKeyConstraint(["id_materia"], ["materia.id_materia"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id_profesor", "id_materia", name="uq_profesor_materia"),
    )
    with op.batch_alter_table("profesor_materia", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_profesor_materia_id_profesor"), ["id_profesor"], unique=False)
        batch_op.create_index(batch_op.f("ix_profesor_materia_id_materia"), ["id_materia"], unique=False)

    op.create_table(
        "horario",
        sa.Column("id_horario", sa.Integer(), nullable=False),
        sa.Column("dia_semana", sa.String(length=16), nullable=False),  # Lunes..Viernes
        sa.Column("hora_inicio", sa.String(length=5), nullable=False),  # HH:MM
        sa.Column("hora_fin", sa.String(length=5), nullable=False),  # HH:MM
        sa.Column("id_curso", sa.Integer(), nullable=False),
        sa.Column("id_materia", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["id_curso"], ["curso.id_curso"]),
        sa.ForeignKeyConstraint(["id_materia"], ["materia.id_materia"]),
        sa.PrimaryKeyConstraint("id_horario"),
        sa.UniqueConstraint(
            "id_materia",
            "dia_semana",
            "hora_inicio",
            "hora_fin",
            name="uq_horario_materia_slot",
        ),
    )
    with op.batch_alter_table("horario", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_horario_id_curso"), ["id_curso"], unique=False)
        batch_op.create_index(batch_op.f("ix_horario_id_materia"), ["id_materia"], unique=False)


def downgrade():
    with op.batch_alter_table("horario", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_horario_id_materia"))
        batch_op.drop_index(batch_op.f("ix_horario_id_curso"))
    op.drop_table("horario")

    with op.batch_alter_table("profesor_materia", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_profesor_materia_id_materia"))
        batch_op.drop_index(batch_op.f("ix_profesor_materia_id_profesor"))
    op.drop_table("profesor_materia")

    with op.batch_alter_table("materia", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_materia_id_curso"))
    op.drop_table("materia")

    op.drop_table("curso")

    with op.batch_alter_table("profesor", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_profesor_usuario_id"))
    op.drop_table("profesor")

    with op.batch_alter_table("usuario", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_usuario_email"))
    op.drop_table("usuario")
