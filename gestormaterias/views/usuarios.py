from flask import Blueprint, flash, redirect, render_template, request, url_for
from werkzeug.security import generate_password_hash

from ..constants import ROLE_ADMIN, ROLES
from ..extensions import db
from ..models import Usuario
from ..services.roles import role_required

usuarios_bp = Blueprint("usuarios", __name__)


def _render(error: str | None = None, status: int = 200):
    usuarios = Usuario.query.order_by(Usuario.nombre.asc()).all()
    return (
        render_template("usuarios/index.html", active_tab="usuarios", usuarios=usuarios, roles=ROLES, error=error),
        status,
    )


@usuarios_bp.get("/usuarios")
@role_required(ROLE_ADMIN)
def index():
    return _render()


@usuarios_bp.post("/usuarios")
@role_required(ROLE_ADMIN)
def create():
    nombre = (request.form.get("nombre") or "").strip()
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""
    role = (request.form.get("role") or "").strip() or None

    if not nombre or not email or not password:
        return _render(error="Completa nombre, email y contraseña.", status=400)
    if role is not None and role not in ROLES:
        return _render(error="Rol inválido.", status=400)
    if Usuario.query.filter_by(email=email).first() is not None:
        return _render(error="Ya existe un usuario con ese email.", status=400)

    db.session.add(Usuario(nombre=nombre, email=email, password_hash=generate_password_hash(password), role=role))
    db.session.commit()

    flash("Usuario creado")
    return redirect(url_for("usuarios.index"))


@usuarios_bp.post("/usuarios/<int:usuario_id>/rol")
@role_required(ROLE_ADMIN)
def set_role(usuario_id: int):
    usuario = db.get_or_404(Usuario, usuario_id)
    role = (request.form.get("role") or "").strip() or None
    if role is not None and role not in ROLES:
        return _render(error="Rol inválido.", status=400)

    usuario.role = role
    db.session.commit()

    flash("Rol actualizado")
    return redirect(url_for("usuarios.index"))
