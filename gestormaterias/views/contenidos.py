from __future__ import annotations

import logging
from datetime import date, datetime

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import current_user

from ..constants import ROLE_ADMIN, ROLE_PROFESOR
from ..extensions import db
from ..models import ContenidoClase, Materia, ProfesorMateria
from ..services import storage
from ..services.roles import get_role, profesor_for, role_required

logger = logging.getLogger(__name__)

contenidos_bp = Blueprint("contenidos", __name__)


def _materias_visibles() -> list[Materia]:
    query = Materia.query.order_by(Materia.nombre.asc())
    if get_role(current_user) == ROLE_ADMIN:
        return query.all()
    profesor = profesor_for(current_user)
    if profesor is None:
        return []
    return (
        query.join(ProfesorMateria, ProfesorMateria.id_materia == Materia.id_materia)
        .filter(ProfesorMateria.id_profesor == profesor.id_profesor)
        .all()
    )


def _materia_or_404(materia_id: int) -> Materia:
    for materia in _materias_visibles():
        if int(materia.id_materia) == int(materia_id):
            return materia
    abort(404)


def _parse_fecha(raw: str) -> date | None:
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


def _render_index(materias: list[Materia], selected: Materia | None, *, editing=None, error=None, status=200):
    contenidos = []
    if selected is not None:
        contenidos = (
            ContenidoClase.query.filter_by(id_materia=selected.id_materia)
            .order_by(ContenidoClase.fecha.desc(), ContenidoClase.id_contenido.desc())
            .all()
        )
    return (
        render_template(
            "contenidos/index.html",
            active_tab="contenidos",
            materias=materias,
            selected=selected,
            contenidos=contenidos,
            editing=editing,
            today=date.today().isoformat(),
            error=error,
        ),
        status,
    )


@contenidos_bp.get("/contenidos")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def index():
    materias = _materias_visibles()
    selected_id = request.args.get("materia", type=int)
    selected = None
    if selected_id is not None:
        selected = next((m for m in materias if int(m.id_materia) == selected_id), None)
        if selected is None:
            abort(404)
    elif materias and get_role(current_user) == ROLE_PROFESOR:
        selected = materias[0]

    editing = None
    editar_id = request.args.get("editar", type=int)
    if selected is not None and editar_id is not None:
        editing = ContenidoClase.query.filter_by(id_contenido=editar_id, id_materia=selected.id_materia).first()

    return _render_index(materias, selected, editing=editing)


@contenidos_bp.post("/contenidos/<int:materia_id>/guardar")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def guardar(materia_id: int):
    materia = _materia_or_404(materia_id)
    contenido_id = request.form.get("contenido_id", type=int)
    fecha = _parse_fecha((request.form.get("fecha") or "").strip())
    descripcion = (request.form.get("descripcion") or "").strip()
    archivo = request.files.get("archivo")

    contenido: ContenidoClase | None = None
    if contenido_id is not None:
        contenido = ContenidoClase.query.filter_by(id_contenido=contenido_id, id_materia=materia.id_materia).first()
        if contenido is None:
            abort(404)

    if fecha is None or not descripcion:
        return _render_index(
            _materias_visibles(), materia, editing=contenido, error="Completa los campos obligatorios", status=400
        )

    archivo_url = contenido.archivo_url if contenido is not None else None
    archivo_path = contenido.archivo_path if contenido is not None else None

    if archivo is not None and archivo.filename:
        if contenido is not None and (archivo_path or archivo_url):
            storage.delete_quietly(archivo_path, archivo_url)
        try:
            archivo_path, archivo_url = storage.get_blob_store().upload(
                materia.id_materia, archivo.filename, archivo.stream, archivo.mimetype
            )
        except storage.StorageError as exc:
            if contenido is not None:
                # The previous file is already gone.
                contenido.archivo_url = None
                contenido.archivo_path = None
                db.session.commit()
            return _render_index(_materias_visibles(), materia, editing=contenido, error=str(exc), status=502)

    if contenido is None:
        contenido = ContenidoClase(id_materia=materia.id_materia)
        db.session.add(contenido)
        message = "Contenido agregado"
    else:
        message = "Contenido actualizado"

    contenido.fecha = fecha
    contenido.descripcion = descripcion
    contenido.archivo_url = archivo_url
    contenido.archivo_path = archivo_path
    db.session.commit()

    logger.info("saved contenido id=%s materia=%s", contenido.id_contenido, materia.id_materia)
    flash(message)
    return redirect(url_for("contenidos.index", materia=materia.id_materia))


@contenidos_bp.post("/contenidos/<int:materia_id>/<int:contenido_id>/delete")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def delete(materia_id: int, contenido_id: int):
    materia = _materia_or_404(materia_id)
    contenido = ContenidoClase.query.filter_by(id_contenido=contenido_id, id_materia=materia.id_materia).first()
    if contenido is None:
        abort(404)

    archivo_path, archivo_url = contenido.archivo_path, contenido.archivo_url
    db.session.delete(contenido)
    db.session.commit()
    storage.delete_quietly(archivo_path, archivo_url)

    flash("Contenido eliminado")
    return redirect(url_for("contenidos.index", materia=materia.id_materia))


@contenidos_bp.post("/contenidos/<int:materia_id>/carga-horaria")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def carga_horaria(materia_id: int):
    materia = _materia_or_404(materia_id)
    materia.carga_horaria = (request.form.get("carga_horaria") or "").strip()
    db.session.commit()

    flash("Carga horaria actualizada")
    return redirect(url_for("contenidos.index", materia=materia.id_materia))
