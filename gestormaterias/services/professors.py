from __future__ import annotations

import logging

from ..constants import (
    PROFESOR_DEFAULT_DIRECCION,
    PROFESOR_DEFAULT_GENERO,
    PROFESOR_DEFAULT_TELEFONO,
    ROLE_PROFESOR,
)
from ..extensions import db
from ..models import Profesor, Usuario

logger = logging.getLogger(__name__)


def list_professor_users() -> list[dict]:
    usuarios = Usuario.query.filter_by(role=ROLE_PROFESOR).order_by(Usuario.nombre.asc()).all()
    if not usuarios:
        return []

    usuario_ids = [int(u.id) for u in usuarios]
    profesor_by_usuario: dict[int, int] = {
        int(usuario_id): int(id_profesor)
        for id_profesor, usuario_id in (
            db.session.query(Profesor.id_profesor, Profesor.usuario_id)
            .filter(Profesor.usuario_id.in_(usuario_ids))
            .all()
        )
    }

    return [
        {
            "user_id": int(u.id),
            "email": u.email,
            "nombre": u.nombre or u.email,
            "id_profesor": profesor_by_usuario.get(int(u.id)),
        }
        for u in usuarios
    ]


def get_or_create_profesor(usuario_id: int) -> Profesor | None:
    usuario = db.session.get(Usuario, usuario_id)
    if usuario is None or usuario.role != ROLE_PROFESOR:
        return None

    existing = Profesor.query.filter_by(usuario_id=usuario.id).first()
    if existing is not None:
        return existing

    profesor = Profesor(
        usuario_id=usuario.id,
        nombre=usuario.nombre or usuario.email,
        email=usuario.email,
        genero=PROFESOR_DEFAULT_GENERO,
        direccion=PROFESOR_DEFAULT_DIRECCION,
        telefono=PROFESOR_DEFAULT_TELEFONO,
    )
    db.session.add(profesor)
    db.session.flush()
    logger.info("created profesor id=%s for usuario=%s", profesor.id_profesor, usuario.id)
    return profesor
