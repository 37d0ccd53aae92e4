from flask import Flask

from .config import Settings
from .extensions import db, login_manager, migrate
from .errors import register_error_handlers
from .logging_config import setup_logging
from .routes import register_blueprints
from .cli import create_curso_command, create_usuario_command


def create_app(overrides: dict | None = None) -> Flask:
    from dotenv import load_dotenv  # noqa: PLC0415

    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    import os  # noqa: PLC0415

    os.makedirs(app.instance_path, exist_ok=True)
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    database_url = settings.database_url
    if database_url.startswith("sqlite:///instance/"):
        filename = database_url.removeprefix("sqlite:///instance/")
        database_url = f"sqlite:///{os.path.join(app.instance_path, filename)}"

    app.config.update(
        SECRET_KEY=settings.secret_key,
        SQLALCHEMY_DATABASE_URI=database_url,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        MAX_CONTENT_LENGTH=settings.max_upload_mb * 1024 * 1024,
        STORAGE_BUCKET=settings.storage_bucket,
        STORAGE_ENDPOINT=settings.storage_endpoint,
        STORAGE_ACCESS_KEY=settings.storage_access_key,
        STORAGE_SECRET_KEY=settings.storage_secret_key,
        STORAGE_REGION=settings.storage_region,
        SIGNED_URL_TTL=settings.signed_url_ttl,
    )
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from .models import Usuario  # noqa: PLC0415

    @login_manager.user_loader
    def load_user(user_id: str) -> Usuario | None:
        try:
            usuario_id = int(user_id)
        except ValueError:
            return None
        return db.session.get(Usuario, usuario_id)

    from .services.roles import current_role  # noqa: PLC0415

    @app.context_processor
    def inject_role() -> dict:
        return {"current_role": current_role()}

    register_blueprints(app)
    register_error_handlers(app)
    app.cli.add_command(create_usuario_command)
    app.cli.add_command(create_curso_command)

    return app
