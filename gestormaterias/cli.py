import click
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash

from .constants import ROLES
from .extensions import db
from .models import Curso, Usuario


@click.command("create-usuario")
@click.option("--nombre", required=True, help="Nombre del usuario")
@click.option("--email", required=True, help="Email del usuario")
@click.option("--password", required=True, help="Contraseña en texto (será hasheada)")
@click.option("--role", type=click.Choice(ROLES), default=None, help="Rol del usuario")
@with_appcontext
def create_usuario_command(nombre: str, email: str, password: str, role: str | None) -> None:
    email_normalized = email.strip().lower()

    existing = Usuario.query.filter_by(email=email_normalized).first()
    if existing is not None:
        raise click.ClickException("Ya existe un usuario con ese email.")

    usuario = Usuario(
        nombre=nombre.strip(),
        email=email_normalized,
        password_hash=generate_password_hash(password),
        role=role,
    )
    db.session.add(usuario)
    db.session.commit()

    click.echo(f"Usuario creado: {usuario.email} (id={usuario.id}, rol={usuario.role or '-'})")


@click.command("create-curso")
@click.option("--nombre", required=True, help="Nombre del curso, ej: 1ro A")
@click.option("--nivel", required=True, help="Nivel, ej: Secundario")
@click.option("--anio", required=True, type=int, help="Año lectivo")
@with_appcontext
def create_curso_command(nombre: str, nivel: str, anio: int) -> None:
    curso = Curso(nombre=nombre.strip(), nivel=nivel.strip(), anio=anio)
    db.session.add(curso)
    db.session.commit()

    click.echo(f"Curso creado: {curso.display_name} (id={curso.id_curso})")
