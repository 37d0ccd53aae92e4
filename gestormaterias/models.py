from __future__ import annotations

from datetime import datetime

from flask_login import UserMixin

from .extensions import db


class Usuario(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=True)  # admin | profesor | otro
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Profesor(db.Model):
    id_profesor = db.Column(db.Integer, primary_key=True)
    usuario_id = db.Column(db.Integer, db.ForeignKey("usuario.id"), nullable=True, unique=True, index=True)
    nombre = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    genero = db.Column(db.String(16), nullable=False)
    direccion = db.Column(db.String(255), nullable=False)
    telefono = db.Column(db.BigInteger, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    usuario = db.relationship("Usuario", lazy="joined")


class Curso(db.Model):
    id_curso = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(120), nullable=False)
    nivel = db.Column(db.String(64), nullable=False)
    anio = db.Column(db.Integer, nullable=False)

    @property
    def display_name(self) -> str:
        return f"{self.nombre} - {self.nivel} ({self.anio})"


class Materia(db.Model):
    id_materia = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(120), nullable=False)
    descripcion = db.Column(db.Text, nullable=True)
    carga_horaria = db.Column(db.String(64), nullable=True)
    id_curso = db.Column(db.Integer, db.ForeignKey("curso.id_curso"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    curso = db.relationship("Curso", lazy="joined")
    asignaciones = db.relationship(
        "ProfesorMateria", lazy="selectin", back_populates="materia", cascade="all, delete-orphan"
    )

    @property
    def profesor(self) -> Profesor | None:
        for asignacion in self.asignaciones:
            if asignacion.profesor is not None:
                return asignacion.profesor
        return None


class ProfesorMateria(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    id_profesor = db.Column(db.Integer, db.ForeignKey("profesor.id_profesor"), nullable=False, index=True)
    id_materia = db.Column(db.Integer, db.ForeignKey("materia.id_materia"), nullable=False, index=True)

    profesor = db.relationship("Profesor", lazy="joined")
    materia = db.relationship("Materia", back_populates="asignaciones")

    __table_args__ = (
        db.UniqueConstraint("id_profesor", "id_materia", name="uq_profesor_materia"),
    )


class Horario(db.Model):
    id_horario = db.Column(db.Integer, primary_key=True)
    dia_semana = db.Column(db.String(16), nullable=False)  # Lunes..Viernes
    hora_inicio = db.Column(db.String(5), nullable=False)  # HH:MM
    hora_fin = db.Column(db.String(5), nullable=False)  # HH:MM
    id_curso = db.Column(db.Integer, db.ForeignKey("curso.id_curso"), nullable=False, index=True)
    id_materia = db.Column(db.Integer, db.ForeignKey("materia.id_materia"), nullable=True, index=True)

    __table_args__ = (
        db.UniqueConstraint(
            "id_materia",
            "dia_semana",
            "hora_inicio",
            "hora_fin",
            name="uq_horario_materia_slot",
        ),
    )


class ContenidoClase(db.Model):
    id_contenido = db.Column(db.Integer, primary_key=True)
    id_materia = db.Column(db.Integer, db.ForeignKey("materia.id_materia"), nullable=False, index=True)
    fecha = db.Column(db.Date, nullable=False)
    descripcion = db.Column(db.Text, nullable=False)
    archivo_url = db.Column(db.Text, nullable=True)
    archivo_path = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
