import logging
from urllib.parse import urlsplit

from flask import Blueprint, redirect, render_template, request, url_for
from flask_login import login_user, logout_user
from werkzeug.security import check_password_hash

from ..constants import ROLE_PROFESOR
from ..extensions import db
from ..models import Usuario
from ..services.professors import get_or_create_profesor
from ..services.roles import get_role

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _safe_next(target: str | None) -> str | None:
    if not target:
        return None
    parts = urlsplit(target)
    # Only same-site relative paths.
    if parts.scheme or parts.netloc or not target.startswith("/") or target.startswith("//"):
        return None
    return target


@auth_bp.get("/login")
def login():
    return render_template("auth/login.html", next=_safe_next(request.args.get("next")))


@auth_bp.post("/login")
def login_post():
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""
    next_url = _safe_next(request.form.get("next") or request.args.get("next"))

    if not email or not password:
        return render_template("auth/login.html", error="Ingresa email y contraseña.", next=next_url), 400

    usuario = Usuario.query.filter_by(email=email).first()
    if usuario is None or not check_password_hash(usuario.password_hash, password):
        logger.info("failed login email=%s", email)
        return render_template("auth/login.html", error="Email o contraseña inválidos.", next=next_url), 401

    role = get_role(usuario)
    if role == ROLE_PROFESOR and get_or_create_profesor(usuario.id) is not None:
        # Content and subject screens look professors up by their profesor row.
        db.session.commit()

    login_user(usuario)
    logger.info("login usuario=%s role=%s", usuario.id, role)
    return redirect(next_url or url_for("admin.dashboard"))


@auth_bp.post("/logout")
def logout():
    logout_user()
    return redirect(url_for("auth.login"))
