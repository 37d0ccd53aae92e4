from __future__ import annotations

import logging
from functools import wraps

from flask import current_app, render_template
from flask_login import current_user

from ..constants import ROLE_ADMIN, ROLE_PROFESOR
from ..extensions import db
from ..models import Profesor, Usuario

logger = logging.getLogger(__name__)


def get_role(usuario: Usuario | None) -> str | None:
    if usuario is None:
        return None
    if usuario.role == ROLE_ADMIN:
        return ROLE_ADMIN
    linked = db.session.query(Profesor.id_profesor).filter_by(usuario_id=usuario.id).first()
    if linked is not None or usuario.role == ROLE_PROFESOR:
        return ROLE_PROFESOR
    return usuario.role or None


def current_role() -> str | None:
    if not current_user.is_authenticated:
        return None
    return get_role(current_user)


def profesor_for(usuario: Usuario) -> Profesor | None:
    return Profesor.query.filter_by(usuario_id=usuario.id).first()


def role_required(*roles: str):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            role = get_role(current_user)
            if role not in roles:
                logger.info("access denied user=%s role=%s", current_user.id, role)
                return render_template("errors/acceso_denegado.html", role=role), 403
            return view(*args, **kwargs)

        return wrapped

    return decorator
