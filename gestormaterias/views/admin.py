from flask import Blueprint, jsonify, redirect, url_for
from flask_login import current_user

from ..constants import ROLE_ADMIN, ROLE_PROFESOR
from ..services.professors import list_professor_users
from ..services.roles import role_required

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/")
def index():
    if current_user.is_authenticated:
        return redirect(url_for("admin.dashboard"))
    return redirect(url_for("auth.login"))


@admin_bp.get("/admin")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def dashboard():
    return redirect(url_for("materias.index"))


@admin_bp.get("/api/admin/professors-users")
def professors_users():
    if not current_user.is_authenticated:
        return jsonify({"error": "Unauthorized"}), 401
    return jsonify(list_professor_users())
