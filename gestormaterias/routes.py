from flask import Flask

from .views.admin import admin_bp
from .views.auth import auth_bp
from .views.contenidos import contenidos_bp
from .views.horarios import horarios_bp
from .views.materias import materias_bp
from .views.usuarios import usuarios_bp


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(materias_bp)
    app.register_blueprint(contenidos_bp)
    app.register_blueprint(horarios_bp)
    app.register_blueprint(usuarios_bp)
